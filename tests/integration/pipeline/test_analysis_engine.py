from __future__ import annotations

"""
Integration tests for the analysis engine.

Verifies the end-to-end run: configuration handling, knowledge-map
persistence and round-trip, and error results.
"""

from codemap.core.pipeline.engine import analyze_workspace, run_analysis
from codemap.core.pipeline.writer import iter_file_dicts, load_knowledge_map


def test_run_analysis_writes_knowledge_map(sample_workspace, mock_config_dict):
    mock_config_dict["input_path"] = str(sample_workspace)

    result = run_analysis(mock_config_dict)

    assert result.ok is True
    assert result.output_path == str(sample_workspace / "knowledge-map.json")
    assert result.summary["total_files"] == 7
    assert result.summary["edges"] == 3

    document = load_knowledge_map(result.output_path)
    assert set(document) == {"tree", "files", "projectSummary", "stats"}
    assert document["stats"]["totalFiles"] == len(document["files"]) == len(iter_file_dicts(document))
    assert document["projectSummary"]["architecture"] == "Frontend-focused"


def test_run_analysis_is_idempotent(sample_workspace, mock_config_dict):
    mock_config_dict["input_path"] = str(sample_workspace)

    first = run_analysis(mock_config_dict)
    first_doc = load_knowledge_map(first.output_path)
    second = run_analysis(mock_config_dict)
    second_doc = load_knowledge_map(second.output_path)

    assert first_doc == second_doc


def test_run_analysis_without_writing(sample_workspace, mock_config_dict):
    mock_config_dict.update({"input_path": str(sample_workspace), "write_output": False})

    result = run_analysis(mock_config_dict)

    assert result.ok is True
    assert result.output_path == ""
    assert not (sample_workspace / "knowledge-map.json").exists()


def test_run_analysis_custom_output_name(sample_workspace, mock_config_dict):
    mock_config_dict.update({"input_path": str(sample_workspace), "output_file": "map.json"})

    first = run_analysis(mock_config_dict)
    second = run_analysis(mock_config_dict)

    assert first.output_path.endswith("map.json")
    assert second.summary["total_files"] == first.summary["total_files"]


def test_run_analysis_missing_directory(tmp_path, mock_config_dict):
    mock_config_dict["input_path"] = str(tmp_path / "missing")

    result = run_analysis(mock_config_dict)

    assert result.ok is False
    assert "Invalid workspace directory" in result.error
    assert result.workspace is None


def test_analyze_workspace_honors_config(sample_workspace):
    workspace = analyze_workspace(str(sample_workspace), config={"extra_skip_folders": ["components"]})

    assert [f.name for f in workspace.flat_files] == [
        "README.md", "package.json", "index.js", "base.css", "main.css",
    ]
    assert workspace.edges[0].target_path.endswith("base.css")
