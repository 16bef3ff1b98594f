from __future__ import annotations

"""
Tree Renderer.

Converts the folder tree and the dependency hierarchy into visual ASCII
representations using standard connectors (├──, └──).
"""

from typing import List, Sequence

from codemap.domain.models import FileNode, FolderNode, HierarchyNode

CIRCULAR_MARKER = " (circular)"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_folder_tree(
        folder: FolderNode,
        lines: List[str],
        prefix: str = "",
        show_details: bool = False,
) -> None:
    """
    Recursively transform a FolderNode into a list of strings.

    Children are rendered in traversal order. With `show_details`, each
    file line carries its layer and complexity.

    Args:
        folder: Current folder to process.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
        show_details: Append layer and complexity to file entries.
    """
    total = len(folder.children)

    for i, node in enumerate(folder.children):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        if isinstance(node, FolderNode):
            lines.append(f"{prefix}{connector}{node.name}/")
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_folder_tree(node, lines, prefix=new_prefix, show_details=show_details)
            continue

        label = node.name
        if show_details and isinstance(node, FileNode):
            label = f"{node.name} [{node.layer.value}, {node.complexity}]"
        lines.append(f"{prefix}{connector}{label}")


def render_hierarchy(nodes: Sequence[HierarchyNode], lines: List[str], prefix: str = "") -> None:
    """
    Render dependency-rooted hierarchy nodes.

    Circular back-references are rendered with a trailing marker and are
    never expanded.

    Args:
        nodes: Sibling nodes at the current level.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
    """
    total = len(nodes)
    for i, node in enumerate(nodes):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        marker = CIRCULAR_MARKER if node.circular else ""
        lines.append(f"{prefix}{connector}{node.file.name} [{node.file.layer.value}]{marker}")

        if node.children:
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_hierarchy(node.children, lines, prefix=new_prefix)
