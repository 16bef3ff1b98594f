from __future__ import annotations

"""
File Classifier.

Maps extensions to file categories and decides which files and directories
take part in a scan. All decisions are driven by the static tables in
`codemap.domain.constants`.
"""

import os
from typing import Dict, Iterable, Optional

from codemap.domain.constants import (
    CATEGORY_EXTENSIONS,
    HIDDEN_PREFIX,
    PARSEABLE_EXTENSIONS,
    SKIP_FOLDERS,
    Category,
)

# Flattened lookup built once from the ordered table
_EXTENSION_INDEX: Dict[str, Category] = {}
for _category, _extensions in CATEGORY_EXTENSIONS:
    for _ext in _extensions:
        _EXTENSION_INDEX.setdefault(_ext, _category)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def get_extension(filename: str) -> str:
    """Return the lowercased extension of a filename, including the dot."""
    _, ext = os.path.splitext(filename)
    return ext.lower()


def classify(extension: str) -> Category:
    """
    Map an extension to its category.

    Args:
        extension: Extension including the leading dot (any case).

    Returns:
        Category: The owning category, or Category.OTHER when unknown.
    """
    return _EXTENSION_INDEX.get((extension or "").lower(), Category.OTHER)


def is_eligible(extension: str) -> bool:
    """Whether files with this extension are analyzed at all."""
    return (extension or "").lower() in _EXTENSION_INDEX


def is_parseable(extension: str) -> bool:
    """Whether a syntax tree can be built for this extension."""
    return (extension or "").lower() in PARSEABLE_EXTENSIONS


def is_hidden(name: str) -> bool:
    """Hidden entries (dotfiles and dot-directories) never take part in a scan."""
    return name.startswith(HIDDEN_PREFIX)


def should_skip_dir(name: str, extra_skip: Optional[Iterable[str]] = None) -> bool:
    """
    Decide whether a directory is pruned before recursion.

    Args:
        name: Directory base name.
        extra_skip: Additional deny-listed names from configuration.

    Returns:
        bool: True if the directory must not be traversed.
    """
    if is_hidden(name) or name in SKIP_FOLDERS:
        return True
    return name in set(extra_skip or ())
