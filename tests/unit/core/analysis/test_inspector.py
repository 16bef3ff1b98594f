from __future__ import annotations

"""
Unit tests for the Source Inspector.

Verifies layer detection, complexity scoring, keyword extraction and
summary generation, including the degraded behavior on parse failures.
"""

from codemap.core.analysis.inspector import (
    calculate_complexity,
    clamp_complexity,
    detect_layer,
    extract_keywords,
    generate_summary,
    inspect,
)
from codemap.domain.constants import Category, Layer

# -----------------------------------------------------------------------------
# SCENARIOS
# -----------------------------------------------------------------------------

def test_function_and_conditional_complexity_is_17():
    """One function declaration (+5) and one conditional (+2) on base 10."""
    code = (
        "function check(x) {\n"
        "  if (x) {\n"
        "    return 1;\n"
        "  }\n"
        "  return 0;\n"
        "}\n"
    )
    result = inspect("check.js", code, ".js")

    assert result.complexity == 17


def test_stylesheet_scenario():
    content = '@import "base.css";\n.a { color: red; }\n.b { color: blue; }\n'
    result = inspect("main.css", content, ".css")

    line_count = len(content.split("\n"))
    assert result.layer is Layer.FRONTEND
    assert result.complexity == 10 + line_count // 20 + 2
    assert result.summary == "Styles for main components"


def test_manifest_scenario():
    content = '{\n  "name": "demo",\n  "dependencies": {"react": "^18.0.0"}\n}\n'
    result = inspect("package.json", content, ".json")

    assert result.layer is Layer.UTILITY
    assert "Configuration" in result.keywords
    assert "Dependencies" in result.keywords


def test_parse_failure_degrades_to_base_values():
    result = inspect("broken.js", "function (( {", ".js")

    assert result.complexity == 10
    assert result.keywords == []


# -----------------------------------------------------------------------------
# LAYER DETECTION
# -----------------------------------------------------------------------------

def test_detect_layer_rules_in_order():
    assert detect_layer("src/components/Nav.js", "", ".js") is Layer.FRONTEND
    assert detect_layer("src/api.js", "import React from 'react';", ".js") is Layer.FRONTEND
    assert detect_layer("src/routes/users.js", "", ".js") is Layer.ROUTER
    assert detect_layer("server.js", "const app = express();", ".js") is Layer.ROUTER
    assert detect_layer("src/models/user.js", "", ".js") is Layer.DATABASE
    assert detect_layer("db.js", "const mongoose = require('mongoose');", ".js") is Layer.DATABASE
    assert detect_layer("src/services/mail.js", "", ".js") is Layer.BACKEND
    assert detect_layer("src/math.js", "export const add = 1;", ".js") is Layer.UTILITY


def test_detect_layer_category_shortcuts():
    assert detect_layer("theme.scss", "", ".scss") is Layer.FRONTEND
    assert detect_layer("README.md", "", ".md") is Layer.UTILITY
    assert detect_layer("settings.yaml", "", ".yaml") is Layer.CONFIGURATION
    assert detect_layer("tsconfig.build.json", "", ".json") is Layer.UTILITY


# -----------------------------------------------------------------------------
# COMPLEXITY
# -----------------------------------------------------------------------------

def test_complexity_for_non_parseable_counts_lines():
    content = "\n".join(["line"] * 45)
    assert calculate_complexity(content, ".md") == 10 + 45 // 20


def test_complexity_is_clamped_to_upper_bound():
    code = "\n".join(f"class C{i} {{}}" for i in range(20))
    assert calculate_complexity(code, ".js") == 100


def test_clamp_complexity_bounds():
    assert clamp_complexity(-5) == 1
    assert clamp_complexity(0) == 1
    assert clamp_complexity(250) == 100
    assert clamp_complexity(42) == 42


def test_arrow_functions_and_loops_in_typescript():
    code = (
        "const f = (n: number): number => n * 2;\n"
        "for (let i = 0; i < 3; i++) { f(i); }\n"
        "while (false) {}\n"
    )
    assert calculate_complexity(code, ".ts") == 10 + 3 + 3 + 3


# -----------------------------------------------------------------------------
# KEYWORDS AND SUMMARY
# -----------------------------------------------------------------------------

def test_code_keywords_hooks_jsx_and_classes():
    code = (
        "import { useState } from 'react';\n"
        "class Store {}\n"
        "export function Counter() {\n"
        "  const [n, setN] = useState(0);\n"
        "  return <span>{n}</span>;\n"
        "}\n"
    )
    keywords = extract_keywords(code, ".jsx")

    assert keywords == ["Store", "React Hook", "JSX"]


def test_style_keywords():
    content = ":root { --gap: 1px; }\n@media (x) { .a { display: grid; } }\n@keyframes spin {}\n"
    keywords = extract_keywords(content, ".css")

    assert keywords == ["Responsive", "Animation", "CSS Variables", "Grid"]


def test_markup_keywords():
    content = '<form data-id="1"><table></table><svg></svg></form>'
    assert extract_keywords(content, ".html") == ["Form", "Table", "SVG", "Data Attributes"]


def test_inspect_caps_keywords_at_five():
    code = "\n".join(f"class K{i} {{}}" for i in range(8))
    result = inspect("many.js", code, ".js")

    assert result.keywords == ["K0", "K1", "K2", "K3", "K4"]


def test_generate_summary_templates():
    assert generate_summary("Header.jsx", Layer.FRONTEND, Category.CODE) == "Renders the Header UI component"
    assert generate_summary("users.js", Layer.ROUTER, Category.CODE) == "Handles users API routes"
    assert generate_summary("README.md", Layer.UTILITY, Category.DOCUMENTATION) == "Documentation for README"
    assert generate_summary("deploy.sh", Layer.UTILITY, Category.SCRIPT) == "Script for deploy automation"
