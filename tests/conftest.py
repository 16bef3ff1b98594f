from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration dictionaries and sample workspaces.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'codemap.domain.config'.
    """
    return {
        "input_path": "/tmp/test_input",
        "output_file": "knowledge-map.json",
        "write_output": True,
        "enable_ai": False,
        "ai_model": "gemini-2.0-flash-lite",
        "api_key_env": "GEMINI_API_KEY",
        "ai_timeout": 30,
        "extra_skip_folders": [],
        "max_depth": 64,
        "hierarchy_max_depth": 10,
    }


@pytest.fixture
def sample_workspace(tmp_path: Path) -> Path:
    """
    Create a small web project.

    Structure:
    /project
      /src
        /components
          Header.jsx      (imports ./Button)
          Button.jsx
        /styles
          main.css        (@import "base.css")
          base.css
        index.js          (imports ./components/Header)
      /node_modules
        lib.js
      /empty
        notes.bin
      package.json
      README.md
    """
    root = tmp_path / "project"
    src = root / "src"
    components = src / "components"
    styles = src / "styles"
    components.mkdir(parents=True)
    styles.mkdir()

    (components / "Header.jsx").write_text(
        "import Button from './Button';\n"
        "export default function Header() {\n"
        "  return <header><Button /></header>;\n"
        "}\n",
        encoding="utf-8",
    )
    (components / "Button.jsx").write_text(
        "import { useState } from 'react';\n"
        "export default function Button() {\n"
        "  const [on, setOn] = useState(false);\n"
        "  return <button onClick={() => setOn(!on)}>Go</button>;\n"
        "}\n",
        encoding="utf-8",
    )
    (styles / "main.css").write_text(
        '@import "base.css";\nbody { display: flex; }\n',
        encoding="utf-8",
    )
    (styles / "base.css").write_text("html { margin: 0; }\n", encoding="utf-8")
    (src / "index.js").write_text(
        "import Header from './components/Header';\nHeader();\n",
        encoding="utf-8",
    )

    node_modules = root / "node_modules"
    node_modules.mkdir()
    (node_modules / "lib.js").write_text("module.exports = 1;\n", encoding="utf-8")

    empty = root / "empty"
    empty.mkdir()
    (empty / "notes.bin").write_bytes(b"\x00\x01")

    (root / "package.json").write_text(
        '{\n  "name": "demo",\n  "scripts": {"start": "node src/index.js"},\n'
        '  "dependencies": {"react": "^18.0.0"}\n}\n',
        encoding="utf-8",
    )
    (root / "README.md").write_text("# Demo\n\nA demo project.\n", encoding="utf-8")

    return root
