from __future__ import annotations

"""
Knowledge Map Persistence.

Serializes a WorkspaceTree into the JSON document consumed by external
renderers and writes it to disk. The document has four top-level keys:
`tree`, `files`, `projectSummary` and `stats`.
"""

import json
import logging
import os
from typing import Any, Dict, List, Union

from codemap.domain.models import FileNode, FolderNode, ProjectSummary, WorkspaceTree

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SERIALIZATION
# -----------------------------------------------------------------------------

def file_to_dict(node: FileNode) -> Dict[str, Any]:
    """Serialize a FileNode with its attribute block."""
    return {
        "name": node.name,
        "path": node.path,
        "type": "file",
        "fileCategory": node.category.value,
        "extension": node.extension,
        "attributes": {
            "layer": node.layer.value,
            "complexity": node.complexity,
            "summary": node.summary,
            "keywords": list(node.keywords),
            "dependencies": list(node.dependency_hints),
            "fileType": node.category.value,
            "aiGenerated": node.enriched,
            "resolvedDependencies": list(node.dependencies),
            "dependents": list(node.dependents),
        },
    }


def folder_to_dict(folder: FolderNode) -> Dict[str, Any]:
    """Serialize a FolderNode recursively."""
    return {
        "name": folder.name,
        "path": folder.path,
        "type": "folder",
        "attributes": {
            "purpose": folder.purpose,
            "folderType": folder.folder_type,
            "aiGenerated": folder.enriched,
        },
        "children": [_node_to_dict(child) for child in folder.children],
    }


def project_summary_to_dict(summary: ProjectSummary) -> Dict[str, Any]:
    """
    Serialize the project summary.

    The fallback summary carries description, techStack, stats and
    architecture; an enriched summary adds mainFeatures.
    """
    data: Dict[str, Any] = {
        "description": summary.description,
        "techStack": list(summary.tech_stack),
        "stats": dict(summary.stats),
        "architecture": summary.architecture,
    }
    if summary.enriched:
        data["mainFeatures"] = list(summary.main_features)
    return data


def workspace_to_dict(workspace: WorkspaceTree) -> Dict[str, Any]:
    """Build the complete knowledge-map document."""
    summary = workspace.project_summary
    return {
        "tree": folder_to_dict(workspace.root),
        "files": [file_to_dict(f) for f in workspace.flat_files],
        "projectSummary": project_summary_to_dict(summary) if summary else None,
        "stats": {
            "totalFiles": workspace.stats.total_files,
            "aiAnalyzed": workspace.stats.ai_analyzed,
            "byCategory": dict(workspace.stats.by_category),
        },
    }


# -----------------------------------------------------------------------------
# DISK I/O
# -----------------------------------------------------------------------------

def save_knowledge_map(workspace: WorkspaceTree, output_path: str) -> str:
    """
    Write the knowledge map as pretty-printed UTF-8 JSON.

    Args:
        workspace: Scan output.
        output_path: Destination file.

    Returns:
        str: The absolute path written.

    Raises:
        OSError: If the file cannot be written.
    """
    path = os.path.abspath(output_path)
    document = workspace_to_dict(workspace)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)
        f.write("\n")
    logger.info(f"Knowledge map saved to: {path}")
    return path


def load_knowledge_map(path: str) -> Dict[str, Any]:
    """
    Read a previously written knowledge map.

    Documents that carry only the tree get their flat `files` list rebuilt
    from it in pre-order.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not a knowledge-map document.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or not isinstance(data.get("tree"), dict):
        raise ValueError(f"Not a knowledge map document: {path}")
    if not isinstance(data.get("files"), list):
        data["files"] = iter_file_dicts(data)
    data.setdefault("stats", {})
    return data


def _node_to_dict(node: Union[FolderNode, FileNode]) -> Dict[str, Any]:
    if isinstance(node, FolderNode):
        return folder_to_dict(node)
    return file_to_dict(node)


def iter_file_dicts(document: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Collect file entries of a loaded document's tree in pre-order."""
    out: List[Dict[str, Any]] = []
    stack = [document.get("tree") or {}]
    while stack:
        node = stack.pop()
        if node.get("type") == "file":
            out.append(node)
            continue
        stack.extend(reversed(node.get("children") or []))
    return out
