from __future__ import annotations

"""
Integration tests for the Workspace Walker.

Runs real scans over temporary directory trees and verifies pruning,
ordering, dependency resolution, progress reporting and the merging of
enrichment answers.
"""

import os
from typing import Any, Dict, List, Optional

import pytest

from codemap.core.pipeline import walker as walker_module
from codemap.core.pipeline.walker import analyze_file, flatten, walk
from codemap.core.pipeline.writer import save_knowledge_map
from codemap.core.services.enrichment import EnrichmentProvider
from codemap.domain.constants import Layer
from codemap.domain.models import FolderNode, WorkspaceNotFoundError


class StubProvider(EnrichmentProvider):
    """Deterministic provider answering every request."""

    def __init__(self, file_answer: Optional[Dict[str, Any]] = None):
        self.file_answer = file_answer
        self.folder_calls: List[str] = []

    def is_available(self) -> bool:
        return True

    def summarize_file(self, filename, content):
        return self.file_answer

    def summarize_folder(self, folder_name, child_names):
        self.folder_calls.append(folder_name)
        return {"purpose": f"Holds {len(child_names)} things", "type": "service"}

    def summarize_project(self, project_name, category_stats, folder_outline):
        return {
            "description": "A demo",
            "techStack": ["React"],
            "architecture": "Frontend",
            "mainFeatures": ["Buttons"],
        }


# -----------------------------------------------------------------------------
# TRAVERSAL
# -----------------------------------------------------------------------------

def test_walk_prunes_and_orders(sample_workspace):
    workspace = walk(str(sample_workspace))

    names = [f.rel_path for f in workspace.flat_files]
    assert names == [
        "README.md",
        "package.json",
        "src/components/Button.jsx",
        "src/components/Header.jsx",
        "src/index.js",
        "src/styles/base.css",
        "src/styles/main.css",
    ]
    top_level = [c.name for c in workspace.root.children]
    assert "node_modules" not in top_level
    assert "empty" not in top_level


def test_stats_match_flat_list(sample_workspace):
    workspace = walk(str(sample_workspace))

    assert workspace.stats.total_files == len(workspace.flat_files) == len(flatten(workspace.root))
    assert workspace.stats.ai_analyzed == 0
    assert workspace.stats.by_category["code"] == 3
    assert workspace.stats.by_category["style"] == 2


def test_dependencies_resolved_across_folders(sample_workspace):
    workspace = walk(str(sample_workspace))
    by_name = {f.name: f for f in workspace.flat_files}

    pairs = {
        (os.path.basename(e.source_path), os.path.basename(e.target_path))
        for e in workspace.edges
    }
    assert pairs == {
        ("Header.jsx", "Button.jsx"),
        ("index.js", "Header.jsx"),
        ("main.css", "base.css"),
    }
    assert by_name["Button.jsx"].dependents == [by_name["Header.jsx"].path]
    assert all(e.source_path != e.target_path for e in workspace.edges)


def test_file_metadata_from_static_analysis(sample_workspace):
    workspace = walk(str(sample_workspace))
    by_name = {f.name: f for f in workspace.flat_files}

    assert by_name["Header.jsx"].layer is Layer.FRONTEND
    assert by_name["package.json"].layer is Layer.UTILITY
    assert "NPM Scripts" in by_name["package.json"].keywords
    assert "React Hook" in by_name["Button.jsx"].keywords
    assert by_name["main.css"].dependency_hints == ["base"]
    assert all(1 <= f.complexity <= 100 for f in workspace.flat_files)


def test_folder_purpose_and_fallback_summary(sample_workspace):
    workspace = walk(str(sample_workspace))
    src = next(c for c in workspace.root.children if isinstance(c, FolderNode))

    assert src.purpose == f"Contains {len(src.children)} items"
    assert src.folder_type == "component"
    assert workspace.project_summary.description == "Project with 7 analyzable files"
    assert workspace.project_summary.enriched is False


def test_progress_messages(sample_workspace):
    messages: List[str] = []

    walk(str(sample_workspace), progress_callback=messages.append)

    assert len(messages) == 7
    assert messages[0] == "Analyzing README.md (1/7)"
    assert messages[-1] == "Analyzing main.css (7/7)"


def test_extra_skip_and_depth_limit(sample_workspace):
    skipped = walk(str(sample_workspace), extra_skip=["styles"])
    shallow = walk(str(sample_workspace), max_depth=1)

    assert not any(f.extension == ".css" for f in skipped.flat_files)
    assert [f.name for f in shallow.flat_files] == ["README.md", "package.json", "index.js"]


# -----------------------------------------------------------------------------
# EDGE CASES
# -----------------------------------------------------------------------------

def test_empty_root_is_not_an_error(tmp_path):
    root = tmp_path / "nothing"
    root.mkdir()
    (root / "image.bin").write_bytes(b"\x00")

    workspace = walk(str(root))

    assert workspace.stats.total_files == 0
    assert workspace.root.children == []
    assert workspace.root.name == "nothing"


def test_missing_root_raises(tmp_path):
    with pytest.raises(WorkspaceNotFoundError):
        walk(str(tmp_path / "missing"))


def test_file_as_root_raises(tmp_path):
    target = tmp_path / "file.js"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(WorkspaceNotFoundError):
        walk(str(target))


def test_rescan_ignores_written_knowledge_map(sample_workspace):
    first = walk(str(sample_workspace))
    save_knowledge_map(first, str(sample_workspace / "knowledge-map.json"))

    second = walk(str(sample_workspace))

    assert [f.path for f in second.flat_files] == [f.path for f in first.flat_files]
    assert second.stats.by_category == first.stats.by_category
    assert [(f.layer, f.complexity, f.keywords) for f in second.flat_files] == \
           [(f.layer, f.complexity, f.keywords) for f in first.flat_files]


def test_unreadable_directory_is_skipped(sample_workspace, monkeypatch, caplog):
    blocked = os.path.join(str(sample_workspace), "src", "components")
    real_list = walker_module.list_directory

    def guarded_list(path):
        if path == blocked:
            raise PermissionError(13, "Permission denied", path)
        return real_list(path)

    monkeypatch.setattr(walker_module, "list_directory", guarded_list)

    with caplog.at_level("WARNING"):
        workspace = walk(str(sample_workspace))

    assert [f.rel_path for f in workspace.flat_files] == [
        "README.md", "package.json", "src/index.js", "src/styles/base.css", "src/styles/main.css",
    ]
    assert "Unreadable directory skipped" in caplog.text


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="permissions are not enforced for root")
def test_chmod_protected_directory_is_skipped(sample_workspace):
    locked = sample_workspace / "src" / "styles"
    locked.chmod(0)
    try:
        workspace = walk(str(sample_workspace))
    finally:
        locked.chmod(0o755)

    assert not any(f.extension == ".css" for f in workspace.flat_files)
    assert workspace.stats.total_files == 5


def test_symlink_loops_are_not_followed(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    (root / "a.js").write_text("export const a = 1;\n", encoding="utf-8")
    try:
        os.symlink(str(root), str(root / "l1"), target_is_directory=True)
        os.symlink(str(root), str(root / "l2"), target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symbolic links are not supported here")

    messages: List[str] = []
    workspace = walk(str(root), progress_callback=messages.append)

    assert [f.rel_path for f in workspace.flat_files] == ["a.js"]
    assert messages == ["Analyzing a.js (1/1)"]


def test_unreadable_file_gets_sentinel(tmp_path):
    node = analyze_file(str(tmp_path / "ghost.js"), str(tmp_path))

    assert node.layer is Layer.UTILITY
    assert node.complexity == 1
    assert node.summary == "Unreadable content"
    assert node.keywords == []
    assert node.dependency_hints == []


def test_own_name_hints_are_dropped(tmp_path):
    target = tmp_path / "theme.css"
    target.write_text('@import "theme.css";\n@import "reset.css";\n', encoding="utf-8")

    node = analyze_file(str(target), str(tmp_path))

    assert node.dependency_hints == ["reset"]


# -----------------------------------------------------------------------------
# ENRICHMENT
# -----------------------------------------------------------------------------

def test_enrichment_overrides_are_validated(sample_workspace):
    provider = StubProvider(file_answer={
        "layer": "Spaceship",
        "complexity": 500,
        "summary": "Enriched summary.",
        "keywords": ["a", "b", "c", "d", "e", "f"],
    })

    workspace = walk(str(sample_workspace), enricher=provider)
    header = next(f for f in workspace.flat_files if f.name == "Header.jsx")

    assert header.enriched is True
    assert header.layer is Layer.FRONTEND
    assert header.complexity == 100
    assert header.summary == "Enriched summary."
    assert header.keywords == ["a", "b", "c", "d", "e"]
    assert workspace.stats.ai_analyzed == 7


def test_enrichment_folders_and_project(sample_workspace):
    provider = StubProvider(file_answer=None)

    workspace = walk(str(sample_workspace), enricher=provider)

    assert workspace.stats.ai_analyzed == 0
    assert workspace.root.purpose == f"Holds {len(workspace.root.children)} things"
    assert workspace.root.folder_type == "service"
    assert workspace.root.enriched is True
    assert provider.folder_calls[-1] == "project"
    summary = workspace.project_summary
    assert summary.enriched is True
    assert summary.main_features == ["Buttons"]
    assert summary.stats["code"] == 3
