from __future__ import annotations

"""
Unit tests for the analysis domain models and factories.
"""

import pytest

from codemap.domain.constants import Category, Layer
from codemap.domain.models import (
    FileNode,
    FolderNode,
    WorkspaceNotFoundError,
    WorkspaceStats,
    WorkspaceTree,
    create_error_result,
    create_success_result,
    strip_extension,
)


@pytest.mark.parametrize("name, expected", [
    ("Header.jsx", "Header"),
    ("archive.tar.gz", "archive.tar"),
    (".env", ".env"),
    ("Makefile", "Makefile"),
    ("trailing.", "trailing."),
])
def test_strip_extension(name, expected):
    assert strip_extension(name) == expected


def test_file_node_stem():
    node = FileNode(
        name="main.css",
        path="/ws/main.css",
        rel_path="main.css",
        category=Category.STYLE,
        extension=".css",
        layer=Layer.FRONTEND,
        complexity=12,
        summary="",
    )
    assert node.stem == "main"


def test_workspace_not_found_message():
    err = WorkspaceNotFoundError("/nowhere")

    assert str(err) == "Invalid workspace directory: /nowhere"
    assert err.path == "/nowhere"


def test_result_factories():
    workspace = WorkspaceTree(
        root=FolderNode(name="ws", path="/ws"),
        stats=WorkspaceStats(total_files=4, ai_analyzed=1),
    )

    ok = create_success_result("/ws", workspace, output_path="/ws/knowledge-map.json", summary_extra={"x": 1})
    failed = create_error_result("boom", "/ws")

    assert ok.ok is True
    assert ok.summary == {"total_files": 4, "ai_analyzed": 1, "edges": 0, "x": 1}
    assert failed.ok is False
    assert failed.error == "boom"
    assert failed.workspace is None
