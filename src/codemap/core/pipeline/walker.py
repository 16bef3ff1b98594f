from __future__ import annotations

"""
Workspace Walker.

Traverses a directory depth-first, analyzes every eligible file exactly
once and assembles the folder tree, the flat file list, the resolved
dependency edges and the project summary. Hidden and deny-listed
directories are pruned before recursion, and folders that end up without
eligible descendants are dropped (the root is always kept).
"""

import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from codemap.core.analysis.aggregator import (
    generate_fallback_project_summary,
    get_file_stats,
    get_folder_outline,
)
from codemap.core.analysis.classifier import (
    classify,
    get_extension,
    is_eligible,
    is_hidden,
    should_skip_dir,
)
from codemap.core.analysis.dependencies import extract_dependencies
from codemap.core.analysis.graph import resolve_dependencies
from codemap.core.analysis.inspector import UNREADABLE_INSPECTION, clamp_complexity, inspect
from codemap.core.services.enrichment import EnrichmentProvider
from codemap.domain.constants import (
    DEFAULT_FOLDER_TYPE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_OUTPUT_FILE,
    FOLDER_TYPES,
    MAX_KEYWORDS,
    Layer,
)
from codemap.domain.models import (
    FileNode,
    FolderNode,
    ProjectSummary,
    WorkspaceNotFoundError,
    WorkspaceStats,
    WorkspaceTree,
    strip_extension,
)
from codemap.infra.fs import list_directory, to_posix_relpath

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

_LAYERS_BY_VALUE = {layer.value: layer for layer in Layer}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def analyze_file(
        path: str,
        root: str = "",
        enricher: Optional[EnrichmentProvider] = None,
) -> FileNode:
    """
    Analyze a single file into a FileNode.

    The file is read once. An unreadable file yields a sentinel record
    (Utility layer, complexity 1, no keywords, no hints) instead of raising.
    Enrichment, when it answers, overrides the statically derived layer,
    complexity, summary and keywords field by field.

    Args:
        path: Absolute file path.
        root: Scan root used for the relative path and path-based layer signals.
        enricher: Optional metadata provider.

    Returns:
        FileNode: The analyzed file. Dependency lists are left empty until
                  the graph resolver runs.
    """
    name = os.path.basename(path)
    extension = get_extension(name)
    category = classify(extension)
    rel_path = to_posix_relpath(path, root) if root else name

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        logger.warning(f"Unreadable file skipped from analysis: {path} ({e})")
        return FileNode(
            name=name,
            path=path,
            rel_path=rel_path,
            category=category,
            extension=extension,
            layer=UNREADABLE_INSPECTION.layer,
            complexity=UNREADABLE_INSPECTION.complexity,
            summary=UNREADABLE_INSPECTION.summary,
            keywords=list(UNREADABLE_INSPECTION.keywords),
        )

    inspection = inspect(name, content, extension, path=rel_path)
    stem = strip_extension(name)
    hints = [h for h in extract_dependencies(content, extension) if h not in (name, stem)]

    node = FileNode(
        name=name,
        path=path,
        rel_path=rel_path,
        category=category,
        extension=extension,
        layer=inspection.layer,
        complexity=inspection.complexity,
        summary=inspection.summary,
        keywords=list(inspection.keywords),
        dependency_hints=hints,
    )

    if enricher is not None and enricher.is_available():
        _apply_file_enrichment(node, enricher.summarize_file(name, content))

    return node


def walk(
        root_path: str,
        enricher: Optional[EnrichmentProvider] = None,
        progress_callback: Optional[ProgressCallback] = None,
        extra_skip: Optional[Iterable[str]] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        output_file: str = DEFAULT_OUTPUT_FILE,
) -> WorkspaceTree:
    """
    Scan a workspace and assemble the complete WorkspaceTree.

    Entries are visited in lexicographic order. The previously written
    knowledge map at the root (`output_file`) is never analyzed, so repeated
    scans of an unchanged workspace produce the same result.

    Args:
        root_path: Directory to scan.
        enricher: Optional metadata provider.
        progress_callback: Called once per analyzed file.
        extra_skip: Additional directory names to prune.
        max_depth: Maximum folder nesting below the root.
        output_file: Name of the knowledge-map file to ignore at the root.

    Returns:
        WorkspaceTree: Folder tree, flat list, edges, stats and summary.

    Raises:
        WorkspaceNotFoundError: If the root is missing or not a directory.
    """
    root = os.path.abspath(root_path)
    if not os.path.isdir(root):
        raise WorkspaceNotFoundError(root)

    walker = _Walker(
        root=root,
        enricher=enricher if enricher is not None and enricher.is_available() else None,
        progress_callback=progress_callback,
        skip=set(extra_skip or ()),
        max_depth=max_depth,
        ignored_files={os.path.join(root, output_file)} if output_file else set(),
    )

    logger.info(f"Scanning workspace: {root}")
    walker.total = sum(1 for _ in walker.iter_eligible_files(root, 0))

    tree_root = walker.build_folder(root, 0)
    if tree_root is None:
        tree_root = FolderNode(
            name=os.path.basename(root) or root,
            path=root,
            purpose="Contains 0 items",
            folder_type=DEFAULT_FOLDER_TYPE,
        )

    flat_files = flatten(tree_root)
    edges = resolve_dependencies(flat_files)

    stats = WorkspaceStats(
        total_files=len(flat_files),
        ai_analyzed=sum(1 for f in flat_files if f.enriched),
        by_category=get_file_stats(flat_files),
    )

    project_summary = _summarize_project(tree_root, flat_files, walker.enricher)

    logger.info(
        f"Scan complete: {stats.total_files} files, {len(edges)} edges, "
        f"{stats.ai_analyzed} enriched."
    )
    return WorkspaceTree(
        root=tree_root,
        flat_files=flat_files,
        stats=stats,
        project_summary=project_summary,
        edges=edges,
    )


def flatten(folder: FolderNode) -> List[FileNode]:
    """Collect every FileNode of a folder tree in pre-order."""
    files: List[FileNode] = []
    for child in folder.children:
        if isinstance(child, FolderNode):
            files.extend(flatten(child))
        else:
            files.append(child)
    return files


# -----------------------------------------------------------------------------
# TRAVERSAL
# -----------------------------------------------------------------------------

class _Walker:
    """Traversal state shared by the counting and building passes."""

    def __init__(
            self,
            root: str,
            enricher: Optional[EnrichmentProvider],
            progress_callback: Optional[ProgressCallback],
            skip: Set[str],
            max_depth: int,
            ignored_files: Set[str],
    ):
        self.root = root
        self.enricher = enricher
        self.progress_callback = progress_callback
        self.skip = skip
        self.max_depth = max_depth
        self.ignored_files = ignored_files
        self.total = 0
        self.processed = 0

    def iter_eligible_files(self, directory: str, depth: int):
        """Yield eligible file paths using the same pruning as the build pass."""
        for name, is_dir, is_file, full_path in self._entries(directory):
            if is_dir:
                if depth < self.max_depth:
                    yield from self.iter_eligible_files(full_path, depth + 1)
            elif is_file and self._is_analyzable(name, full_path):
                yield full_path

    def build_folder(self, directory: str, depth: int) -> Optional[FolderNode]:
        """
        Build the FolderNode for `directory`.

        Returns None when no eligible descendant was found.
        """
        children: List[Any] = []

        for name, is_dir, is_file, full_path in self._entries(directory):
            if is_dir:
                if depth >= self.max_depth:
                    logger.warning(f"Maximum depth {self.max_depth} reached. Skipping: {full_path}")
                    continue
                sub = self.build_folder(full_path, depth + 1)
                if sub is not None:
                    children.append(sub)
            elif is_file and self._is_analyzable(name, full_path):
                self.processed += 1
                if self.progress_callback:
                    self.progress_callback(f"Analyzing {name} ({self.processed}/{self.total})")
                children.append(analyze_file(full_path, self.root, self.enricher))

        if not children:
            return None

        folder = FolderNode(
            name=os.path.basename(directory) or directory,
            path=directory,
            purpose=f"Contains {len(children)} items",
            folder_type=DEFAULT_FOLDER_TYPE,
            children=children,
        )
        if self.enricher is not None:
            _apply_folder_enrichment(
                folder, self.enricher.summarize_folder(folder.name, [c.name for c in children])
            )
        return folder

    def _entries(self, directory: str):
        """Sorted, non-hidden, non-pruned entries of a directory."""
        try:
            listing = list_directory(directory)
        except OSError as e:
            logger.warning(f"Unreadable directory skipped: {directory} ({e})")
            return

        for name, is_dir, is_file in listing:
            if is_hidden(name):
                continue
            if is_dir and should_skip_dir(name, self.skip):
                continue
            yield name, is_dir, is_file, os.path.join(directory, name)

    def _is_analyzable(self, name: str, full_path: str) -> bool:
        return is_eligible(get_extension(name)) and full_path not in self.ignored_files


# -----------------------------------------------------------------------------
# ENRICHMENT MERGING
# -----------------------------------------------------------------------------

def _apply_file_enrichment(node: FileNode, data: Optional[Dict[str, Any]]) -> None:
    """Override static metadata with the provider's answer, field by field."""
    if not data:
        return

    layer = _LAYERS_BY_VALUE.get(str(data.get("layer", "")))
    if layer is not None:
        node.layer = layer

    complexity = data.get("complexity")
    if isinstance(complexity, (int, float)) and not isinstance(complexity, bool) and complexity:
        node.complexity = clamp_complexity(complexity)

    summary = data.get("summary")
    if isinstance(summary, str) and summary.strip():
        node.summary = summary.strip()

    keywords = data.get("keywords")
    if isinstance(keywords, list):
        node.keywords = [str(k) for k in keywords if k][:MAX_KEYWORDS]

    node.enriched = True


def _apply_folder_enrichment(folder: FolderNode, data: Optional[Dict[str, Any]]) -> None:
    if not data:
        return

    purpose = data.get("purpose")
    if isinstance(purpose, str) and purpose.strip():
        folder.purpose = purpose.strip()

    folder_type = data.get("type")
    if isinstance(folder_type, str) and folder_type in FOLDER_TYPES:
        folder.folder_type = folder_type

    folder.enriched = True


def _summarize_project(
        tree_root: FolderNode,
        files: List[FileNode],
        enricher: Optional[EnrichmentProvider],
) -> ProjectSummary:
    """Enriched project summary when available, deterministic fallback otherwise."""
    fallback = generate_fallback_project_summary(files)
    if enricher is None:
        return fallback

    data = enricher.summarize_project(
        tree_root.name, fallback.stats, get_folder_outline(tree_root)
    )
    if not data:
        return fallback

    description = data.get("description")
    tech_stack = data.get("techStack")
    features = data.get("mainFeatures")
    architecture = data.get("architecture")

    return ProjectSummary(
        description=description if isinstance(description, str) and description else fallback.description,
        tech_stack=[str(t) for t in tech_stack] if isinstance(tech_stack, list) else fallback.tech_stack,
        architecture=architecture if isinstance(architecture, str) and architecture else fallback.architecture,
        stats=fallback.stats,
        main_features=[str(f) for f in features] if isinstance(features, list) else [],
        enriched=True,
    )
