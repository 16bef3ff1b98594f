from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the static tables that drive classification and heuristics:
the extension-to-category table, architectural layers, directory deny-lists,
framework tokens used for layer detection, and entry-point naming conventions.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

APP_VERSION = "1.0.0"
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_OUTPUT_FILE = "knowledge-map.json"


# -----------------------------------------------------------------------------
# FILE CATEGORIES
# -----------------------------------------------------------------------------

class Category(str, Enum):
    """File-kind classification derived purely from the extension."""
    CODE = "code"
    STYLE = "style"
    MARKUP = "markup"
    DATA = "data"
    BACKEND = "backend"
    DOCUMENTATION = "documentation"
    SCRIPT = "script"
    OTHER = "other"


# Ordered: the first category owning an extension wins
CATEGORY_EXTENSIONS: Tuple[Tuple[Category, FrozenSet[str]], ...] = (
    (Category.CODE, frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})),
    (Category.STYLE, frozenset({".css", ".scss", ".sass", ".less", ".styl"})),
    (Category.MARKUP, frozenset({".html", ".htm", ".xml", ".svg"})),
    (Category.DATA, frozenset({".json", ".yaml", ".yml", ".toml", ".env", ".ini", ".cfg"})),
    (Category.BACKEND, frozenset({
        ".py", ".rb", ".php", ".java", ".go", ".rs", ".c", ".cpp", ".h", ".cs"
    })),
    (Category.DOCUMENTATION, frozenset({".md", ".mdx", ".txt", ".rst"})),
    (Category.SCRIPT, frozenset({".sh", ".bash", ".ps1", ".bat", ".cmd"})),
)

# Extensions with a tree-sitter grammar available
PARSEABLE_EXTENSIONS: FrozenSet[str] = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})

# Labels used by the fallback project summary
TECH_STACK_LABELS: Tuple[Tuple[Category, str], ...] = (
    (Category.CODE, "JavaScript/TypeScript"),
    (Category.STYLE, "CSS"),
    (Category.MARKUP, "HTML"),
    (Category.BACKEND, "Backend"),
)


# -----------------------------------------------------------------------------
# ARCHITECTURAL LAYERS
# -----------------------------------------------------------------------------

class Layer(str, Enum):
    """Coarse architectural role assigned to a file."""
    FRONTEND = "Frontend"
    ROUTER = "Router"
    BACKEND = "Backend"
    DATABASE = "Database"
    CONFIGURATION = "Configuration"
    UTILITY = "Utility"


# Presentation order, top to bottom
LAYER_PRECEDENCE: Tuple[Layer, ...] = (
    Layer.FRONTEND,
    Layer.ROUTER,
    Layer.BACKEND,
    Layer.DATABASE,
    Layer.CONFIGURATION,
    Layer.UTILITY,
)

UI_PATH_TOKENS: Tuple[str, ...] = ("component", "page")
UI_CONTENT_TOKENS: Tuple[str, ...] = ("react", "jsx")

ROUTER_PATH_TOKENS: Tuple[str, ...] = ("route", "controller")
ROUTER_CONTENT_TOKENS: Tuple[str, ...] = ("express", "router")

DATABASE_PATH_TOKENS: Tuple[str, ...] = ("model", "schema")
DATABASE_CONTENT_TOKENS: Tuple[str, ...] = ("mongoose", "sequelize")

BACKEND_PATH_TOKENS: Tuple[str, ...] = ("service", "middleware")

# Build/tooling manifests are classified as Utility instead of Configuration
MANIFEST_FILENAMES: FrozenSet[str] = frozenset({
    "package.json",
    "package-lock.json",
    "jsconfig.json",
    "composer.json",
    "pyproject.toml",
    "cargo.toml",
})
MANIFEST_PREFIXES: Tuple[str, ...] = ("tsconfig",)


# -----------------------------------------------------------------------------
# TRAVERSAL AND GRAPH CONSTANTS
# -----------------------------------------------------------------------------

SKIP_FOLDERS: FrozenSet[str] = frozenset({
    "node_modules",
    "dist",
    "build",
    ".git",
    ".vscode",
    "coverage",
    "__pycache__",
    ".next",
    ".nuxt",
    "vendor",
    "bower_components",
})

HIDDEN_PREFIX = "."

ENTRY_POINT_NAMES: FrozenSet[str] = frozenset({"main", "index", "app", "extension"})

DEFAULT_MAX_DEPTH = 64
DEFAULT_HIERARCHY_MAX_DEPTH = 10

MAX_KEYWORDS = 5
MIN_COMPLEXITY = 1
MAX_COMPLEXITY = 100
BASE_COMPLEXITY = 10
LINES_PER_COMPLEXITY_POINT = 20

UNREADABLE_SUMMARY = "Unreadable content"

SUMMARY_BY_CATEGORY: Dict[Category, str] = {
    Category.STYLE: "Styles for {name} components",
    Category.MARKUP: "HTML structure for {name}",
    Category.DATA: "Configuration for {name}",
    Category.DOCUMENTATION: "Documentation for {name}",
    Category.SCRIPT: "Script for {name} automation",
}

SUMMARY_BY_LAYER: Dict[Layer, str] = {
    Layer.FRONTEND: "Renders the {name} UI component",
    Layer.ROUTER: "Handles {name} API routes",
    Layer.DATABASE: "Defines {name} data model",
    Layer.BACKEND: "Implements {name} business logic",
    Layer.CONFIGURATION: "Configuration for {name}",
    Layer.UTILITY: "Provides {name} utilities",
}


# -----------------------------------------------------------------------------
# ENRICHMENT PROVIDER DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_AI_MODEL = "gemini-2.0-flash-lite"
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"
FALLBACK_API_KEY_ENVS: List[str] = ["GOOGLE_API_KEY"]

FOLDER_TYPES: FrozenSet[str] = frozenset({
    "component", "service", "utility", "config", "asset", "test"
})
DEFAULT_FOLDER_TYPE = "component"
