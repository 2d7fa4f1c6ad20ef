"""Path normalization and glob handling shared by mappers and validation.

Patterns use gitignore (``gitwildmatch``) syntax, anchored at the repository
root, with ``{a,b}`` alternatives expanded before matching. A pattern naming a
directory also matches everything below it.
"""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path, PurePosixPath
import posixpath
from typing import Iterable, Iterator

import pathspec

_PRUNED_DIRS = frozenset({".git", "__pycache__"})


def normalize_path(path: str | PurePosixPath | Path, *, root: Path) -> str | None:
    """Return the canonical repo-relative form of ``path``.

    ``None`` means the path is not eligible for ownership lookup: it is empty,
    or it escapes ``root``.
    """
    text = str(path).strip()
    if not text:
        return None
    candidate = PurePosixPath(text)
    if candidate.is_absolute():
        relative = _relative_to_root(candidate, root=root)
        if relative is None:
            return None
        candidate = relative
    normalized = posixpath.normpath(candidate.as_posix())
    if normalized in {"", ".", ".."} or normalized.startswith("../"):
        return None
    return normalized


def _relative_to_root(candidate: PurePosixPath, *, root: Path) -> PurePosixPath | None:
    for base in _root_forms(root):
        try:
            return candidate.relative_to(base)
        except ValueError:
            continue
    return None


def _root_forms(root: Path) -> tuple[PurePosixPath, ...]:
    absolute = PurePosixPath(root.absolute().as_posix())
    resolved = PurePosixPath(root.resolve().as_posix())
    if absolute == resolved:
        return (absolute,)
    return (absolute, resolved)


def expand_braces(pattern: str) -> list[str]:
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    depth = 0
    splits: list[int] = []
    end = -1
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
        elif char == "," and depth == 1:
            splits.append(index)
    if end == -1:
        return [pattern]
    bounds = [start, *splits, end]
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for left, right in zip(bounds, bounds[1:]):
        option = pattern[left + 1 : right]
        for tail in expand_braces(prefix + option + suffix):
            if tail not in expanded:
                expanded.append(tail)
    return expanded


@lru_cache(maxsize=2048)
def pattern_spec(pattern: str) -> pathspec.PathSpec:
    """Root-anchored gitwildmatch ``PathSpec`` for one configured pattern."""
    lines = [
        f"/{option.lstrip('/')}"
        for option in expand_braces(pattern.strip())
        if option.strip("/")
    ]
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def glob_matches(pattern: str, path: str) -> bool:
    return pattern_spec(pattern).match_file(path.lstrip("/"))


def matches_any(patterns: Iterable[str], path: str) -> bool:
    return any(glob_matches(pattern, path) for pattern in patterns)


def _literal_base(pattern: str) -> str:
    """Leading directories of ``pattern`` that contain no wildcard."""
    base: list[str] = []
    for part in pattern.strip("/").split("/")[:-1]:
        if not part or any(char in part for char in "*?["):
            break
        base.append(part)
    return "/".join(base)


def _walk_files(root: Path, base: str) -> Iterator[str]:
    start = root / base if base else root
    if not start.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(start, topdown=True):
        dirnames[:] = sorted(d for d in dirnames if d not in _PRUNED_DIRS)
        current = Path(dirpath).relative_to(root).as_posix()
        for filename in sorted(filenames):
            yield filename if current == "." else f"{current}/{filename}"


def expand_globs(root: Path, patterns: Iterable[str]) -> set[str]:
    """Expand glob patterns against the file system under ``root``.

    Only regular files are returned, as repo-relative POSIX paths.
    """
    files: set[str] = set()
    for pattern in patterns:
        for option in expand_braces(pattern.strip().lstrip("/")):
            if not option:
                continue
            spec = pattern_spec(option)
            files.update(spec.match_files(_walk_files(root, _literal_base(option))))
    return files


def is_within(directory: str, path: str) -> bool:
    """True when repo-relative ``path`` lives under repo-relative ``directory``."""
    if directory in {"", "."}:
        return True
    return path == directory or path.startswith(directory.rstrip("/") + "/")
