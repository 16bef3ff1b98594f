from __future__ import annotations

"""
Dependency Extractor.

Produces unresolved dependency hints (file or module base names) for a
single file. Matching hints to real files happens later in the graph
resolver. Only code, stylesheet, markup and Python sources yield hints.
"""

import logging
import posixpath
import re
from typing import List

from codemap.core.analysis.classifier import classify, is_parseable
from codemap.core.analysis.js_parser import SyntaxKind, import_source, iter_syntax, parse_source
from codemap.domain.constants import Category
from codemap.domain.models import strip_extension

logger = logging.getLogger(__name__)

_CSS_IMPORT_RX = re.compile(r"""@import\s+['"]([^'"]+)['"]""")
_MARKUP_REF_RX = re.compile(r"""(?:src|href)=['"]([^'"]+)['"]""")
_PY_IMPORT_RX = re.compile(r"^[ \t]*(from|import)[ \t]+([\w.][\w., \t]*)", re.MULTILINE)
_URL_SCHEME_RX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_CODE_SUFFIX_RX = re.compile(r"\.(js|jsx|ts|tsx)$")

_RELATIVE_PREFIXES = ("./", "../")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def extract_dependencies(content: str, extension: str) -> List[str]:
    """
    Extract unresolved dependency hints from a file's content.

    Args:
        content: Decoded file content.
        extension: Lowercased extension including the dot.

    Returns:
        List[str]: Hints in source order. Duplicates are kept except for
                   Python sources, which are de-duplicated per file.
    """
    category = classify(extension)

    if category is Category.CODE and is_parseable(extension):
        return _extract_module_imports(content, extension)
    if category is Category.STYLE:
        return _extract_css_imports(content)
    if category is Category.MARKUP:
        return _extract_markup_refs(content)
    if extension == ".py":
        return _extract_python_imports(content)
    return []


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _extract_module_imports(content: str, extension: str) -> List[str]:
    """Relative ES module imports, reduced to base names without code suffix."""
    tree = parse_source(content, extension)
    if tree is None:
        return []

    hints: List[str] = []
    for kind, node in iter_syntax(tree):
        if kind is not SyntaxKind.IMPORT:
            continue
        source = import_source(node)
        if not source.startswith(_RELATIVE_PREFIXES):
            continue
        name = _CODE_SUFFIX_RX.sub("", posixpath.basename(source))
        if name:
            hints.append(name)
    return hints


def _extract_css_imports(content: str) -> List[str]:
    """`@import "path"` directives, reduced to base names without extension."""
    hints: List[str] = []
    for match in _CSS_IMPORT_RX.finditer(content):
        name = strip_extension(posixpath.basename(match.group(1)))
        if name:
            hints.append(name)
    return hints


def _extract_markup_refs(content: str) -> List[str]:
    """Local `src=`/`href=` references; absolute and protocol-relative URLs are skipped."""
    hints: List[str] = []
    for match in _MARKUP_REF_RX.finditer(content):
        ref = match.group(1).strip()
        if ref.startswith("//") or _URL_SCHEME_RX.match(ref):
            continue
        ref = ref.split("#", 1)[0].split("?", 1)[0]
        name = posixpath.basename(ref)
        if name:
            hints.append(name)
    return hints


def _extract_python_imports(content: str) -> List[str]:
    """Top-level module segment of every import statement, de-duplicated."""
    hints: List[str] = []
    for match in _PY_IMPORT_RX.finditer(content):
        keyword, targets = match.group(1), match.group(2)
        if keyword == "from":
            parts = targets.split(None, 2)
            modules = parts[:1]
            if modules and not modules[0].strip(".") and len(parts) == 3 and parts[1] == "import":
                # "from . import a, b" names sibling modules after the keyword
                modules = [name.split()[0] for name in parts[2].split(",") if name.split()]
        else:
            modules = [part.split()[0] for part in targets.split(",") if part.split()]
        for module in modules:
            top = module.lstrip(".").split(".")[0]
            if top and top not in hints:
                hints.append(top)
    return hints
