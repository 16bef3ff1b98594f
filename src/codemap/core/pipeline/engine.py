from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates a complete analysis run:
1. Validates configuration and paths.
2. Selects the enrichment provider (if any).
3. Walks the workspace and resolves the dependency graph.
4. Persists the knowledge map next to the analyzed sources.
"""

import logging
import os
from typing import Any, Dict, Optional

from codemap.core.pipeline.validator import validate_config
from codemap.core.pipeline.walker import ProgressCallback, walk
from codemap.core.pipeline.writer import save_knowledge_map
from codemap.core.services.enrichment import EnrichmentProvider, create_provider
from codemap.domain.models import (
    AnalysisResult,
    CodemapError,
    WorkspaceTree,
    create_error_result,
    create_success_result,
)
from codemap.infra.fs import normalize_path

logger = logging.getLogger(__name__)


def analyze_workspace(
        root_path: str,
        config: Optional[Dict[str, Any]] = None,
        enricher: Optional[EnrichmentProvider] = None,
        progress_callback: Optional[ProgressCallback] = None,
) -> WorkspaceTree:
    """
    Analyze a workspace without persisting anything.

    Args:
        root_path: Directory to scan.
        config: Optional configuration (validated, defaults filled in).
        enricher: Explicit provider; when omitted one is built from config.
        progress_callback: Called once per analyzed file.

    Returns:
        WorkspaceTree: The complete scan output.

    Raises:
        WorkspaceNotFoundError: If the root is missing or not a directory.
    """
    cfg, warnings = validate_config(config or {}, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    if enricher is None:
        enricher = create_provider(cfg)

    return walk(
        root_path,
        enricher=enricher,
        progress_callback=progress_callback,
        extra_skip=cfg["extra_skip_folders"],
        max_depth=cfg["max_depth"],
        output_file=cfg["output_file"],
    )


def run_analysis(
        config: Optional[Dict[str, Any]],
        *,
        enricher: Optional[EnrichmentProvider] = None,
        progress_callback: Optional[ProgressCallback] = None,
) -> AnalysisResult:
    """
    Execute a full analysis run and persist the knowledge map.

    Every failure is converted into an error result instead of raising.

    Args:
        config: The configuration dictionary (raw or partial).
        enricher: Explicit provider overriding the configured one.
        progress_callback: Called once per analyzed file.

    Returns:
        AnalysisResult: Object containing status, workspace and summary.
    """
    logger.info("Analysis run started.")

    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    base_path = normalize_path(cfg.get("input_path", ""), os.getcwd())

    try:
        workspace = analyze_workspace(
            base_path,
            config=cfg,
            enricher=enricher,
            progress_callback=progress_callback,
        )
    except CodemapError as e:
        logger.error(str(e))
        return create_error_result(str(e), base_path)
    except Exception as e:
        msg = f"Analysis failure: {e}"
        logger.exception(msg)
        return create_error_result(msg, base_path)

    output_path = ""
    if cfg["write_output"]:
        try:
            output_path = save_knowledge_map(workspace, os.path.join(base_path, cfg["output_file"]))
        except OSError as e:
            msg = f"Failed to write knowledge map: {e}"
            logger.error(msg)
            return create_error_result(msg, base_path)

    logger.info("Analysis run finished successfully.")
    return create_success_result(
        base_path,
        workspace,
        output_path=output_path,
        summary_extra={"warnings": list(warnings)},
    )
