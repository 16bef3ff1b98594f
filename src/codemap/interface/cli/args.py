from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema, including help messages,
argument types, and defaults. Provides logic to translate raw argparse
namespaces into domain-compatible configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from codemap.domain.constants import APP_VERSION, DEFAULT_OUTPUT_FILE

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the codemap CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="codemap",
        description="Scan a codebase and produce a JSON knowledge map of its "
                    "files, layers and dependencies.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    # --- Path Management ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Directory to analyze (default: current directory).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_file",
        default=None,
        help=f"Knowledge-map file name written inside the analyzed directory "
             f"(default: {DEFAULT_OUTPUT_FILE}).",
    )
    p.add_argument(
        "--no-write",
        action="store_true",
        help="Analyze without writing the knowledge map to disk.",
    )

    # --- Enrichment ---
    ai_group = p.add_mutually_exclusive_group()
    ai_group.add_argument(
        "--ai",
        dest="enable_ai",
        action="store_const",
        const=True,
        default=None,
        help="Enrich metadata with the Gemini API (requires GEMINI_API_KEY).",
    )
    ai_group.add_argument(
        "--no-ai",
        dest="enable_ai",
        action="store_const",
        const=False,
        help="Use static analysis only.",
    )
    p.add_argument(
        "--model",
        dest="ai_model",
        default=None,
        help="Gemini model identifier used for enrichment.",
    )

    # --- Traversal ---
    p.add_argument(
        "--exclude",
        dest="extra_skip_folders",
        default=None,
        help="Comma-separated directory names to skip in addition to the built-in list.",
    )

    # --- Views ---
    p.add_argument(
        "--tree",
        action="store_true",
        help="Print the analyzed folder tree.",
    )
    p.add_argument(
        "--hierarchy",
        action="store_true",
        help="Print the dependency hierarchy.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the knowledge-map document as JSON to stdout.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration and settings, and do not save this session.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default location if no path is given).",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a domain configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.input_path
    overrides["output_file"] = args.output_file
    overrides["enable_ai"] = args.enable_ai
    overrides["ai_model"] = args.ai_model

    if args.no_write:
        overrides["write_output"] = False
    if args.extra_skip_folders:
        overrides["extra_skip_folders"] = _split_csv(args.extra_skip_folders)

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
