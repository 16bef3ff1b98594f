from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation and user data directory
resolution. Acts as an abstraction over the 'os' module to ensure uniform
behavior across Windows and Unix-like systems.
"""

import os
from typing import List, Optional, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "Codemap"
UNIX_APP_DIR_NAME = ".codemap"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/Codemap
    - Linux/Mac: ~/.codemap

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def to_posix_relpath(path: str, root: str) -> str:
    """Express `path` relative to `root` using forward slashes."""
    rel = os.path.relpath(path, root)
    if rel == ".":
        return ""
    return rel.replace(os.sep, "/")


def list_directory(path: str) -> List[Tuple[str, bool, bool]]:
    """
    List directory entries sorted lexicographically by name.

    Symbolic links are reported as neither directory nor file, so callers
    never descend through them.

    Args:
        path: Directory to list.

    Returns:
        List[Tuple[str, bool, bool]]: (name, is_dir, is_file) per entry.

    Raises:
        OSError: If the directory cannot be read.
    """
    entries: List[Tuple[str, bool, bool]] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError:
                continue
            entries.append((entry.name, is_dir, is_file))
    entries.sort(key=lambda e: e[0])
    return entries
