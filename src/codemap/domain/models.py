from __future__ import annotations

"""
Analysis Domain Data Models.

Defines the structures produced by a workspace scan: analyzed files,
folders, the assembled workspace tree, resolved dependency edges, the
cycle-safe dependency hierarchy and the result object returned to the
interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from codemap.domain.constants import Category, Layer

# -----------------------------------------------------------------------------
# ERRORS
# -----------------------------------------------------------------------------

class CodemapError(Exception):
    """Base class for failures surfaced by the analysis core."""


class WorkspaceNotFoundError(CodemapError):
    """Raised when the scan root does not exist or is not a directory."""

    def __init__(self, path: str):
        super().__init__(f"Invalid workspace directory: {path}")
        self.path = path


# -----------------------------------------------------------------------------
# PER-FILE FACTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Inspection:
    """
    Derived facts for a single file content.

    Attributes:
        layer: Architectural layer.
        complexity: Relative weight clamped to [1, 100].
        keywords: Ordered short tags (at most 5 once attached to a FileNode).
        summary: Human-readable description.
    """
    layer: Layer
    complexity: int
    keywords: List[str]
    summary: str


@dataclass
class FileNode:
    """
    One analyzed file.

    Attributes:
        name: File name with extension.
        path: Absolute filesystem path (unique key within a scan).
        rel_path: POSIX path relative to the scan root.
        category: Extension-derived category.
        extension: Lowercased extension including the leading dot.
        layer: Architectural layer assigned at creation time.
        complexity: Relative weight in [1, 100].
        summary: Short description.
        keywords: Up to 5 tags.
        dependency_hints: Unresolved textual references.
        dependencies: Hints that resolved to another known file.
        dependents: Paths of files whose hints resolved to this file.
        enriched: True when the metadata came from the enrichment provider.
    """
    name: str
    path: str
    rel_path: str
    category: Category
    extension: str
    layer: Layer
    complexity: int
    summary: str
    keywords: List[str] = field(default_factory=list)
    dependency_hints: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    dependents: List[str] = field(default_factory=list)
    enriched: bool = False

    @property
    def stem(self) -> str:
        """File name with its last extension removed."""
        return strip_extension(self.name)


@dataclass
class FolderNode:
    """
    One directory retained in the tree.

    Attributes:
        name: Directory name.
        path: Absolute filesystem path.
        purpose: Short description (enriched or generated).
        folder_type: Coarse folder role.
        enriched: True when the purpose came from the enrichment provider.
        children: Retained sub-folders and files in traversal order.
    """
    name: str
    path: str
    purpose: str = ""
    folder_type: str = "component"
    enriched: bool = False
    children: List[Union["FolderNode", FileNode]] = field(default_factory=list)


# -----------------------------------------------------------------------------
# WORKSPACE-LEVEL MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DependencyEdge:
    """Directed edge meaning `source_path` references `target_path`."""
    source_path: str
    target_path: str


@dataclass
class ProjectSummary:
    """
    Aggregate description of the scanned project.

    Attributes:
        description: Free-text project description.
        tech_stack: Detected technology tags.
        architecture: Architecture classification.
        stats: File counts per category.
        main_features: Feature tags (enrichment only).
        enriched: True when produced by the enrichment provider.
    """
    description: str
    tech_stack: List[str]
    architecture: str
    stats: Dict[str, int] = field(default_factory=dict)
    main_features: List[str] = field(default_factory=list)
    enriched: bool = False


@dataclass
class WorkspaceStats:
    """Whole-scan counters."""
    total_files: int = 0
    ai_analyzed: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)


@dataclass
class WorkspaceTree:
    """
    Complete output of one scan.

    Attributes:
        root: Root folder (always retained, possibly empty).
        flat_files: All files in pre-order traversal order.
        stats: Scan counters.
        project_summary: Aggregated project description.
        edges: Resolved dependency edges.
    """
    root: FolderNode
    flat_files: List[FileNode] = field(default_factory=list)
    stats: WorkspaceStats = field(default_factory=WorkspaceStats)
    project_summary: Optional[ProjectSummary] = None
    edges: List[DependencyEdge] = field(default_factory=list)


@dataclass
class HierarchyNode:
    """
    Node of the dependency-rooted hierarchy view.

    Attributes:
        file: The file represented by this node.
        children: Nodes for the files this file depends on.
        circular: True when the file was already being visited on this branch.
    """
    file: FileNode
    children: List["HierarchyNode"] = field(default_factory=list)
    circular: bool = False


@dataclass(frozen=True)
class AnalysisResult:
    """
    Unified result of a complete analysis run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        base_path: Normalized root directory analyzed.
        output_path: Path of the persisted knowledge map, if written.
        workspace: The scan output (None on failure).
        summary: Execution counters for reporting.
    """
    ok: bool
    error: str
    base_path: str
    output_path: str = ""
    workspace: Optional[WorkspaceTree] = None
    summary: Dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(error: str, base_path: str) -> AnalysisResult:
    """Create a failed analysis result."""
    return AnalysisResult(ok=False, error=error, base_path=base_path)


def create_success_result(
        base_path: str,
        workspace: WorkspaceTree,
        output_path: str = "",
        summary_extra: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """
    Create a successful analysis result.

    Args:
        base_path: Normalized input directory.
        workspace: The assembled workspace tree.
        output_path: Persisted knowledge-map path (empty when not written).
        summary_extra: Additional metrics for the summary payload.

    Returns:
        AnalysisResult: An immutable success result object.
    """
    summary: Dict[str, Any] = {
        "total_files": workspace.stats.total_files,
        "ai_analyzed": workspace.stats.ai_analyzed,
        "edges": len(workspace.edges),
    }
    summary.update(summary_extra or {})
    return AnalysisResult(
        ok=True,
        error="",
        base_path=base_path,
        output_path=output_path,
        workspace=workspace,
        summary=summary,
    )


def strip_extension(name: str) -> str:
    """Remove the last `.ext` suffix from a name (dotfiles keep their name)."""
    dot = name.rfind(".")
    if dot <= 0 or dot == len(name) - 1:
        return name
    return name[:dot]
