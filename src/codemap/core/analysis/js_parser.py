from __future__ import annotations

"""
JavaScript/TypeScript Syntax Service.

Builds tree-sitter syntax trees for the code category and exposes a small
visitor over the handful of node kinds the heuristics rely on. A tree that
contains syntax errors is treated as a parse failure.
"""

import logging
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)


class SyntaxKind(Enum):
    """Syntax constructs relevant to complexity, keywords and imports."""
    FUNCTION_DECLARATION = "function_declaration"
    ARROW_FUNCTION = "arrow_function"
    CLASS_DECLARATION = "class_declaration"
    IF = "if"
    FOR = "for"
    WHILE = "while"
    SWITCH = "switch"
    TRY = "try"
    CALL = "call"
    JSX_ELEMENT = "jsx_element"
    IMPORT = "import"


_NODE_KINDS: Dict[str, SyntaxKind] = {
    "function_declaration": SyntaxKind.FUNCTION_DECLARATION,
    "generator_function_declaration": SyntaxKind.FUNCTION_DECLARATION,
    "arrow_function": SyntaxKind.ARROW_FUNCTION,
    "class_declaration": SyntaxKind.CLASS_DECLARATION,
    "abstract_class_declaration": SyntaxKind.CLASS_DECLARATION,
    "if_statement": SyntaxKind.IF,
    "for_statement": SyntaxKind.FOR,
    "while_statement": SyntaxKind.WHILE,
    "switch_statement": SyntaxKind.SWITCH,
    "try_statement": SyntaxKind.TRY,
    "call_expression": SyntaxKind.CALL,
    "jsx_element": SyntaxKind.JSX_ELEMENT,
    "jsx_self_closing_element": SyntaxKind.JSX_ELEMENT,
    "import_statement": SyntaxKind.IMPORT,
}

_GRAMMAR_BY_EXTENSION: Dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

# Parsers are built lazily and reused for the whole process
_PARSER_CACHE: Dict[str, Parser] = {}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_source(content: str, extension: str) -> Optional[Tree]:
    """
    Parse JavaScript/TypeScript source into a syntax tree.

    Args:
        content: Source text.
        extension: Lowercased file extension selecting the grammar.

    Returns:
        Optional[Tree]: The syntax tree, or None when the extension has no
                        grammar or the source contains syntax errors.
    """
    grammar = _GRAMMAR_BY_EXTENSION.get(extension)
    if grammar is None:
        return None

    tree = _get_parser(grammar).parse(content.encode("utf-8"))
    if tree.root_node.has_error:
        logger.debug(f"Syntax errors found while parsing {extension} source.")
        return None
    return tree


def iter_syntax(tree: Tree) -> Iterator[Tuple[SyntaxKind, Node]]:
    """
    Visit every node of interest in pre-order.

    Uses an explicit stack so that deeply nested sources cannot exhaust the
    interpreter call stack.

    Yields:
        Tuple[SyntaxKind, Node]: The construct kind and its node.
    """
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        kind = _NODE_KINDS.get(node.type)
        if kind is not None:
            yield kind, node
        stack.extend(reversed(node.children))


def node_text(node: Optional[Node]) -> str:
    """Decode the source text covered by a node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def import_source(node: Node) -> str:
    """Return the module specifier of an import statement without quotes."""
    raw = node_text(node.child_by_field_name("source"))
    if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def declared_name(node: Node) -> str:
    """Return the declared identifier of a class or function node."""
    return node_text(node.child_by_field_name("name"))


def callee_name(node: Node) -> str:
    """Return the callee identifier of a call expression, or '' for member calls."""
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return ""
    return node_text(callee)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _get_parser(grammar: str) -> Parser:
    """Build (once) and return the parser for a grammar name."""
    if grammar not in _PARSER_CACHE:
        if grammar == "javascript":
            language = Language(tsjavascript.language())
        elif grammar == "typescript":
            language = Language(tstypescript.language_typescript())
        else:
            language = Language(tstypescript.language_tsx())
        _PARSER_CACHE[grammar] = Parser(language)
    return _PARSER_CACHE[grammar]
