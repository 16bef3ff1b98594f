from __future__ import annotations

"""
Dependency Graph Resolver.

Matches the raw dependency hints of every file against the other known
files to produce directed edges, and builds the dependency-rooted hierarchy
used by tree browsers. The resulting graph may contain cycles; the hierarchy
builder tracks the files being visited on the current branch and marks
repeats as circular instead of descending into them.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from codemap.domain.constants import (
    DEFAULT_HIERARCHY_MAX_DEPTH,
    ENTRY_POINT_NAMES,
    LAYER_PRECEDENCE,
)
from codemap.domain.models import DependencyEdge, FileNode, HierarchyNode, strip_extension

logger = logging.getLogger(__name__)

_LAYER_RANK = {layer: index for index, layer in enumerate(LAYER_PRECEDENCE)}


# -----------------------------------------------------------------------------
# EDGE RESOLUTION
# -----------------------------------------------------------------------------

HintIndex = Dict[str, Tuple[int, FileNode]]


def build_hint_index(files: List[FileNode]) -> HintIndex:
    """
    Index files by full name and extension-stripped name.

    Each key keeps the first file in list order that carries it, together
    with that file's position, so lookups preserve first-match semantics.
    """
    index: HintIndex = {}
    for position, f in enumerate(files):
        index.setdefault(f.name, (position, f))
        index.setdefault(f.stem, (position, f))
    return index


def match_hint(hint: str, index: HintIndex) -> Optional[FileNode]:
    """
    Find the file a hint refers to.

    A candidate matches when the hint, or the hint without its trailing
    extension, equals the candidate's full name or its extension-stripped
    name. Matching is case-sensitive and the first candidate in list order
    wins.

    Args:
        hint: Unresolved reference.
        index: Lookup built by `build_hint_index` over the flat list.

    Returns:
        Optional[FileNode]: The matched file, if any.
    """
    if not hint:
        return None
    found = [index[key] for key in {hint, strip_extension(hint)} if key in index]
    if not found:
        return None
    return min(found, key=lambda entry: entry[0])[1]


def resolve_dependencies(files: List[FileNode]) -> List[DependencyEdge]:
    """
    Resolve every file's hints into edges and fill the bidirectional lists.

    Resets and then populates `dependencies` (matched hint strings) and
    `dependents` (paths of referencing files) on each FileNode. Self matches
    and unmatched hints are dropped; each (source, target) pair yields one
    edge.

    Args:
        files: Flat file list in pre-order.

    Returns:
        List[DependencyEdge]: Edges in source order.
    """
    for f in files:
        f.dependencies = []
        f.dependents = []

    index = build_hint_index(files)
    edges: List[DependencyEdge] = []
    seen: Set[Tuple[str, str]] = set()
    dropped = 0

    for source in files:
        for hint in source.dependency_hints:
            target = match_hint(hint, index)
            if target is None or target.path == source.path:
                dropped += 1
                continue

            key = (source.path, target.path)
            if key in seen:
                continue
            seen.add(key)

            source.dependencies.append(hint)
            target.dependents.append(source.path)
            edges.append(DependencyEdge(source_path=source.path, target_path=target.path))

    logger.debug(f"Resolved {len(edges)} dependency edges ({dropped} hints unmatched).")
    return edges


# -----------------------------------------------------------------------------
# HIERARCHY VIEW
# -----------------------------------------------------------------------------

def is_entry_point(file: FileNode) -> bool:
    """Whether the file name contains an entry-point style name such as "app" or "index"."""
    stem = file.stem.lower()
    return any(name in stem for name in ENTRY_POINT_NAMES)


def find_roots(files: List[FileNode]) -> List[FileNode]:
    """
    Select hierarchy roots: entry points and files nobody depends on.

    Roots are stable-sorted by layer precedence, so files of the same layer
    keep their flat-list order.
    """
    roots = [f for f in files if is_entry_point(f) or not f.dependents]
    return sorted(roots, key=lambda f: _LAYER_RANK.get(f.layer, len(_LAYER_RANK)))


def build_hierarchy(
        files: List[FileNode],
        max_depth: int = DEFAULT_HIERARCHY_MAX_DEPTH,
) -> List[HierarchyNode]:
    """
    Build the dependency-rooted hierarchy.

    Each root gets its own tree. A file reached again while it is still on
    the current branch is emitted once more with `circular=True` and no
    children. Files are released when the branch backtracks, so the same
    file may appear under several branches.

    Args:
        files: Resolved flat file list.
        max_depth: Maximum nesting below a root.

    Returns:
        List[HierarchyNode]: One node per root.
    """
    index = build_hint_index(files)
    targets: Dict[str, List[FileNode]] = {}
    for f in files:
        children: List[FileNode] = []
        for hint in f.dependencies:
            target = match_hint(hint, index)
            if target is None or target.path == f.path:
                continue
            if all(c.path != target.path for c in children):
                children.append(target)
        targets[f.path] = children

    hierarchy: List[HierarchyNode] = []
    for root in find_roots(files):
        visiting: Set[str] = set()
        hierarchy.append(_build_node(root, targets, visiting, 0, max_depth))
    return hierarchy


def _build_node(
        file: FileNode,
        targets: Dict[str, List[FileNode]],
        visiting: Set[str],
        depth: int,
        max_depth: int,
) -> HierarchyNode:
    """Depth-first construction with a per-branch visiting set."""
    if file.path in visiting:
        return HierarchyNode(file=file, circular=True)

    node = HierarchyNode(file=file)
    if depth >= max_depth:
        return node

    visiting.add(file.path)
    for child in targets.get(file.path, []):
        node.children.append(_build_node(child, targets, visiting, depth + 1, max_depth))
    visiting.discard(file.path)
    return node
