from __future__ import annotations

"""
codemap: codebase knowledge-map generator.

Scans a directory, derives per-file layer, complexity, keywords and
dependency hints, resolves them into a dependency graph and persists the
result as a JSON knowledge map.
"""

from codemap.core.pipeline.engine import analyze_workspace, run_analysis
from codemap.core.pipeline.writer import load_knowledge_map, save_knowledge_map
from codemap.domain.constants import APP_VERSION

__version__ = APP_VERSION

__all__ = [
    "__version__",
    "analyze_workspace",
    "run_analysis",
    "load_knowledge_map",
    "save_knowledge_map",
]
