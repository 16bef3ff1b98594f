from __future__ import annotations

"""
Project Aggregator.

Computes whole-project statistics and the deterministic project summary
used when no enrichment is available.
"""

from typing import Any, Dict, List

from codemap.domain.constants import TECH_STACK_LABELS, Category
from codemap.domain.models import FileNode, FolderNode, ProjectSummary


def get_file_stats(files: List[FileNode]) -> Dict[str, int]:
    """
    Count files per category.

    Every category is present in the result, including zero counts.
    """
    stats: Dict[str, int] = {category.value: 0 for category in Category}
    for f in files:
        stats[f.category.value] = stats.get(f.category.value, 0) + 1
    return stats


def get_folder_outline(
        folder: FolderNode,
        max_depth: int = 2,
        _depth: int = 0,
) -> List[Dict[str, Any]]:
    """
    Summarize the folder structure down to `max_depth` levels.

    Returns:
        List[Dict[str, Any]]: Pre-order entries with name, depth and childCount.
    """
    if _depth > max_depth:
        return []

    outline: List[Dict[str, Any]] = [{
        "name": folder.name,
        "depth": _depth,
        "childCount": len(folder.children),
    }]
    for child in folder.children:
        if isinstance(child, FolderNode):
            outline.extend(get_folder_outline(child, max_depth, _depth + 1))
    return outline


def generate_fallback_project_summary(files: List[FileNode]) -> ProjectSummary:
    """
    Build the deterministic project summary.

    Args:
        files: Flat list of analyzed files.

    Returns:
        ProjectSummary: Description, technology tags and architecture guess.
    """
    stats = get_file_stats(files)
    tech_stack = [label for category, label in TECH_STACK_LABELS if stats[category.value] > 0]

    if stats[Category.CODE.value] > stats[Category.BACKEND.value]:
        architecture = "Frontend-focused"
    else:
        architecture = "Full-stack"

    return ProjectSummary(
        description=f"Project with {len(files)} analyzable files",
        tech_stack=tech_stack,
        architecture=architecture,
        stats=stats,
    )


def aggregate(files: List[FileNode]) -> Dict[str, Any]:
    """
    Aggregate a flat file list into project-level facts.

    Returns:
        Dict[str, Any]: statsByCategory, fallbackDescription, techStackTags
                        and architectureGuess.
    """
    summary = generate_fallback_project_summary(files)
    return {
        "statsByCategory": summary.stats,
        "fallbackDescription": summary.description,
        "techStackTags": summary.tech_stack,
        "architectureGuess": summary.architecture,
    }
