from __future__ import annotations

"""
Source Inspector.

Derives the architectural layer, a complexity estimate, keyword tags and a
fallback summary for a single file. Syntax-tree inspection is used for the
code category; every other category relies on textual heuristics.
Inspection never raises: malformed sources degrade to base values.
"""

import logging
import os
from typing import List, Optional

from tree_sitter import Tree

from codemap.core.analysis.classifier import classify, is_parseable
from codemap.core.analysis.js_parser import (
    SyntaxKind,
    callee_name,
    declared_name,
    iter_syntax,
    parse_source,
)
from codemap.domain.constants import (
    BACKEND_PATH_TOKENS,
    BASE_COMPLEXITY,
    DATABASE_CONTENT_TOKENS,
    DATABASE_PATH_TOKENS,
    LINES_PER_COMPLEXITY_POINT,
    MANIFEST_FILENAMES,
    MANIFEST_PREFIXES,
    MAX_COMPLEXITY,
    MAX_KEYWORDS,
    MIN_COMPLEXITY,
    ROUTER_CONTENT_TOKENS,
    ROUTER_PATH_TOKENS,
    SUMMARY_BY_CATEGORY,
    SUMMARY_BY_LAYER,
    UI_CONTENT_TOKENS,
    UI_PATH_TOKENS,
    UNREADABLE_SUMMARY,
    Category,
    Layer,
)
from codemap.domain.models import Inspection, strip_extension

logger = logging.getLogger(__name__)

# Weight added per construct found in a syntax tree
COMPLEXITY_WEIGHTS = {
    SyntaxKind.FUNCTION_DECLARATION: 5,
    SyntaxKind.ARROW_FUNCTION: 3,
    SyntaxKind.CLASS_DECLARATION: 10,
    SyntaxKind.IF: 2,
    SyntaxKind.FOR: 3,
    SyntaxKind.WHILE: 3,
    SyntaxKind.SWITCH: 4,
    SyntaxKind.TRY: 2,
}

FRAMEWORK_HOOKS = frozenset({"useState", "useEffect", "useContext"})

UNREADABLE_INSPECTION = Inspection(
    layer=Layer.UTILITY,
    complexity=MIN_COMPLEXITY,
    keywords=[],
    summary=UNREADABLE_SUMMARY,
)

_UNPARSED = object()


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def inspect(filename: str, content: str, extension: str, path: str = "") -> Inspection:
    """
    Produce layer, complexity, keywords and summary for one file.

    Args:
        filename: File base name with extension.
        content: Decoded file content.
        extension: Lowercased extension including the dot.
        path: Path used for path-based layer signals (defaults to filename).

    Returns:
        Inspection: Derived facts; keywords are already capped at 5.
    """
    category = classify(extension)
    tree = parse_source(content, extension) if is_parseable(extension) else None

    layer = detect_layer(path or filename, content, extension)
    complexity = calculate_complexity(content, extension, syntax_tree=tree)
    keywords = extract_keywords(content, extension, syntax_tree=tree)[:MAX_KEYWORDS]
    summary = generate_summary(filename, layer, category)

    return Inspection(layer=layer, complexity=complexity, keywords=keywords, summary=summary)


def detect_layer(path: str, content: str, extension: str) -> Layer:
    """
    Classify a file into an architectural layer (first matching rule wins).

    Args:
        path: File path (workspace-relative preferred).
        content: File content.
        extension: Lowercased extension.

    Returns:
        Layer: The detected layer.
    """
    category = classify(extension)
    lower_path = path.lower()
    lower_content = content.lower()

    if category is Category.STYLE:
        return Layer.FRONTEND

    if category is Category.DOCUMENTATION:
        return Layer.UTILITY

    if category is Category.DATA:
        if _is_manifest(lower_path):
            return Layer.UTILITY
        return Layer.CONFIGURATION

    if _mentions(lower_path, UI_PATH_TOKENS) or _mentions(lower_content, UI_CONTENT_TOKENS):
        return Layer.FRONTEND

    if _mentions(lower_path, ROUTER_PATH_TOKENS) or _mentions(lower_content, ROUTER_CONTENT_TOKENS):
        return Layer.ROUTER

    if _mentions(lower_path, DATABASE_PATH_TOKENS) or _mentions(lower_content, DATABASE_CONTENT_TOKENS):
        return Layer.DATABASE

    if _mentions(lower_path, BACKEND_PATH_TOKENS):
        return Layer.BACKEND

    return Layer.UTILITY


def calculate_complexity(content: str, extension: str, syntax_tree=_UNPARSED) -> int:
    """
    Estimate a relative complexity weight in [1, 100].

    Parseable sources start at 10 and add a fixed weight per construct.
    Other sources score 10 + one point per 20 lines, plus one point per
    opening brace for stylesheets.

    Args:
        content: File content.
        extension: Lowercased extension.
        syntax_tree: Pre-parsed tree (None means the parse failed).

    Returns:
        int: Clamped complexity score.
    """
    complexity = BASE_COMPLEXITY

    if is_parseable(extension):
        tree = _resolve_tree(content, extension, syntax_tree)
        if tree is not None:
            for kind, _ in iter_syntax(tree):
                complexity += COMPLEXITY_WEIGHTS.get(kind, 0)
    else:
        line_count = len(content.split("\n"))
        complexity = BASE_COMPLEXITY + line_count // LINES_PER_COMPLEXITY_POINT
        if classify(extension) is Category.STYLE:
            complexity += content.count("{")

    return clamp_complexity(complexity)


def extract_keywords(content: str, extension: str, syntax_tree=_UNPARSED) -> List[str]:
    """
    Collect short descriptive tags for a file.

    The result is ordered by first detection and not capped; callers apply
    the five-tag limit.

    Args:
        content: File content.
        extension: Lowercased extension.
        syntax_tree: Pre-parsed tree (None means the parse failed).

    Returns:
        List[str]: Unique tags.
    """
    category = classify(extension)
    keywords: List[str] = []

    def add(tag: str) -> None:
        if tag and tag not in keywords:
            keywords.append(tag)

    if category is Category.CODE:
        tree = _resolve_tree(content, extension, syntax_tree)
        if tree is None:
            return keywords
        for kind, node in iter_syntax(tree):
            if kind is SyntaxKind.CLASS_DECLARATION:
                add(declared_name(node))
            elif kind is SyntaxKind.CALL and callee_name(node) in FRAMEWORK_HOOKS:
                add("React Hook")
            elif kind is SyntaxKind.JSX_ELEMENT:
                add("JSX")

    elif category is Category.STYLE:
        if "@media" in content:
            add("Responsive")
        if "@keyframes" in content:
            add("Animation")
        if ":root" in content or "var(--" in content:
            add("CSS Variables")
        if "flex" in content:
            add("Flexbox")
        if "grid" in content:
            add("Grid")

    elif category is Category.MARKUP:
        if "<form" in content:
            add("Form")
        if "<table" in content:
            add("Table")
        if "<canvas" in content:
            add("Canvas")
        if "<svg" in content:
            add("SVG")
        if "data-" in content:
            add("Data Attributes")

    elif category is Category.DATA:
        add("Configuration")
        if extension == ".json" and '"scripts"' in content:
            add("NPM Scripts")
        if extension == ".json" and '"dependencies"' in content:
            add("Dependencies")
        if extension == ".toml" and "dependencies" in content:
            add("Dependencies")

    elif category is Category.DOCUMENTATION:
        add("Documentation")
        if "## " in content or "# " in content:
            add("Markdown")

    return keywords


def generate_summary(filename: str, layer: Layer, category: Category) -> str:
    """
    Build the templated fallback summary for a file.

    Args:
        filename: File base name with extension.
        layer: Resolved layer (used for code-like categories).
        category: File category.

    Returns:
        str: Human-readable one-line summary.
    """
    name = strip_extension(filename)
    template = SUMMARY_BY_CATEGORY.get(category)
    if template is None:
        template = SUMMARY_BY_LAYER.get(layer, "{name} module")
    return template.format(name=name)


def clamp_complexity(value: int) -> int:
    """Clamp a complexity score into [1, 100]."""
    return max(MIN_COMPLEXITY, min(MAX_COMPLEXITY, int(value)))


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _resolve_tree(content: str, extension: str, syntax_tree) -> Optional[Tree]:
    """Use the caller's tree when one was supplied, otherwise parse."""
    if syntax_tree is _UNPARSED:
        return parse_source(content, extension)
    return syntax_tree


def _mentions(text: str, tokens) -> bool:
    """Whether any token occurs as a substring of text."""
    return any(token in text for token in tokens)


def _is_manifest(lower_path: str) -> bool:
    """Known build/tooling manifests are tooling, not runtime configuration."""
    base = os.path.basename(lower_path.replace("\\", "/"))
    if base in MANIFEST_FILENAMES:
        return True
    return any(base.startswith(prefix) for prefix in MANIFEST_PREFIXES)
