"""
Turn command-line paths into the ordered list of PDFs to process.

  canonical_path -> reduce_roots -> collect_files

Roots are canonicalized and pruned so no root sits inside another, which
means every file is reached at most once by the walk.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Set, Union

from . import PDF_EXT, has_suffix, is_hidden
from .errors import PathResolutionError, RelativePathError, TraversalError
from .naming import natural_key

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def canonical_path(path: PathLike) -> Path:
    """Absolute, symlink-resolved form of an existing path."""
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        # RuntimeError: symlink loop on older interpreters
        raise PathResolutionError(f"cannot resolve {os.fspath(path)!r}: {e}") from e


def is_descendant(path: Path, ancestor: Path) -> bool:
    """
    True if `path` lies within the subtree rooted at `ancestor` (or is it).
    Compares whole segments, so /a/bc is not under /a/b.
    """
    if not (path.is_absolute() and ancestor.is_absolute()):
        raise RelativePathError(f"cannot relate {str(path)!r} to {str(ancestor)!r}: both must be absolute")
    n = len(ancestor.parts)
    return path.parts[:n] == ancestor.parts


def reduce_roots(paths: Iterable[PathLike]) -> Set[Path]:
    """
    Canonicalize `paths` and keep only the outermost ones.

    Fails on the first path that cannot be resolved; no partial result.
    """
    roots: Set[Path] = set()
    for raw in paths:
        candidate = canonical_path(raw)
        if candidate in roots:
            continue
        add = True
        for member in list(roots):
            below = is_descendant(candidate, member)
            above = is_descendant(member, candidate)
            if below == above:
                continue  # disjoint
            if below:
                log.debug("dropping %s: inside %s", candidate, member)
                add = False
                break
            log.debug("dropping %s: inside %s", member, candidate)
            roots.discard(member)
        if add:
            roots.add(candidate)
    return roots


def _walk(root: Path, suffix: str) -> Iterator[Path]:
    # Hidden entries are pruned whole, the root included.
    if is_hidden(root.name):
        return
    if not root.is_dir():
        if root.is_file() and has_suffix(root.name, suffix):
            yield root
        return
    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError as e:
        raise TraversalError(f"cannot list {str(root)!r}: {e}") from e
    for entry in entries:
        if is_hidden(entry.name):
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError as e:
            raise TraversalError(f"cannot stat {entry.path!r}: {e}") from e
        if is_dir:
            yield from _walk(Path(entry.path), suffix)
        elif is_file and has_suffix(entry.name, suffix):
            yield Path(entry.path)


def collect_files(roots: Iterable[Path], suffix: str = PDF_EXT) -> List[Path]:
    """
    Every non-hidden regular file under `roots` ending in `suffix`
    (case-insensitive), in natural order.
    """
    found: List[Path] = []
    for root in roots:
        found.extend(_walk(Path(root), suffix))
    found.sort(key=natural_key)
    return found
