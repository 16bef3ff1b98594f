from __future__ import annotations

"""
Unit tests for the Tree Renderer.

Verifies connector placement for the folder tree and the circular marker
in the dependency hierarchy view.
"""

from codemap.core.analysis.tree_renderer import CIRCULAR_MARKER, render_folder_tree, render_hierarchy
from codemap.domain.constants import Category, Layer
from codemap.domain.models import FileNode, FolderNode, HierarchyNode


def make_file(name: str, layer: Layer = Layer.UTILITY) -> FileNode:
    return FileNode(
        name=name,
        path=f"/ws/{name}",
        rel_path=name,
        category=Category.CODE,
        extension=".js",
        layer=layer,
        complexity=12,
        summary="",
    )


def test_render_folder_tree_connectors():
    src = FolderNode(name="src", path="/ws/src", children=[make_file("a.js"), make_file("b.js")])
    root = FolderNode(name="ws", path="/ws", children=[src, make_file("main.js")])

    lines = []
    render_folder_tree(root, lines)

    assert lines == [
        "├── src/",
        "│   ├── a.js",
        "│   └── b.js",
        "└── main.js",
    ]


def test_render_folder_tree_details():
    root = FolderNode(name="ws", path="/ws", children=[make_file("app.js", Layer.FRONTEND)])

    lines = []
    render_folder_tree(root, lines, show_details=True)

    assert lines == ["└── app.js [Frontend, 12]"]


def test_render_hierarchy_marks_circular_nodes():
    a = make_file("a.js")
    b = make_file("b.js")
    tree = HierarchyNode(
        file=make_file("index.js"),
        children=[HierarchyNode(file=a, children=[HierarchyNode(file=b, children=[
            HierarchyNode(file=a, circular=True),
        ])])],
    )

    lines = []
    render_hierarchy([tree], lines)

    assert lines == [
        "└── index.js [Utility]",
        "    └── a.js [Utility]",
        "        └── b.js [Utility]",
        f"            └── a.js [Utility]{CIRCULAR_MARKER}",
    ]
