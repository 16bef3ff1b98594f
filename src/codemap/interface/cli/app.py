from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: initialization of logging, loading and merging
of configuration sources (defaults, persistent storage, and CLI overrides),
analysis execution, result rendering, and saving of the last successful session.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from codemap.core.analysis.graph import build_hierarchy
from codemap.core.analysis.tree_renderer import render_folder_tree, render_hierarchy
from codemap.core.pipeline.engine import run_analysis
from codemap.core.pipeline.validator import validate_config
from codemap.core.pipeline.writer import workspace_to_dict
from codemap.domain.config import get_default_config, load_app_settings, load_config, save_config
from codemap.domain.models import AnalysisResult
from codemap.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from codemap.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 analysis failure, 2 invalid
             input path, 130 interrupted).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    app_settings = {} if args.use_defaults else load_app_settings()
    log_level = "DEBUG" if args.debug else "INFO"
    log_file = None
    if args.log_file is not None:
        log_file = args.log_file or get_default_log_path()
    elif app_settings.get("log_to_file"):
        log_file = get_default_log_path()
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    # 5. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 6. Pre-flight input verification
    input_path = os.path.abspath(clean_conf.get("input_path", ""))
    if not os.path.isdir(input_path):
        msg = f"Input path does not exist or is not a directory: {input_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2
    clean_conf["input_path"] = input_path

    # 7. Analysis phase
    logger.info(f"Targeting input directory: {input_path}")
    try:
        result = run_analysis(clean_conf, progress_callback=logger.debug)
    except KeyboardInterrupt:
        msg = "Analysis interrupted by user."
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130

    # 8. Output rendering phase
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1

    if not args.use_defaults:
        save_config(clean_conf)

    if args.json_output:
        print(json.dumps(workspace_to_dict(result.workspace), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    if args.tree:
        _print_folder_tree(result)
    if args.hierarchy:
        _print_hierarchy(result, clean_conf["hierarchy_max_depth"])

    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys are merged and `None` values are ignored.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = [
        "input_path", "output_file", "write_output",
        "enable_ai", "ai_model", "extra_skip_folders",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: AnalysisResult) -> None:
    """
    Format and print the analysis result to the standard output.

    Args:
        result: The analysis result to render.
    """
    workspace = result.workspace
    summary = result.summary

    print("Analysis completed successfully.")
    if result.output_path:
        print(f"Knowledge map: {result.output_path}")

    print(f"Files analyzed: {summary.get('total_files', 0)}")
    print(f"AI enriched: {summary.get('ai_analyzed', 0)}")
    print(f"Dependency edges: {summary.get('edges', 0)}")

    if workspace is None:
        return

    by_category = {k: v for k, v in workspace.stats.by_category.items() if v}
    if by_category:
        print("\nBy category:")
        for category, count in by_category.items():
            print(f"  - {category}: {count}")

    project = workspace.project_summary
    if project is not None:
        print(f"\nProject: {project.description}")
        print(f"Architecture: {project.architecture}")
        if project.tech_stack:
            print(f"Tech stack: {', '.join(project.tech_stack)}")


def _print_folder_tree(result: AnalysisResult) -> None:
    if result.workspace is None:
        return
    root = result.workspace.root
    lines: List[str] = [f"{root.name}/"]
    render_folder_tree(root, lines, show_details=True)
    print("\n" + "\n".join(lines))


def _print_hierarchy(result: AnalysisResult, max_depth: int) -> None:
    if result.workspace is None:
        return
    nodes = build_hierarchy(result.workspace.flat_files, max_depth=max_depth)
    lines: List[str] = ["Dependency hierarchy:"]
    render_hierarchy(nodes, lines)
    print("\n" + "\n".join(lines))

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
