from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Iterable

from loguru import logger

from ownerscope.paths import matches_any


def _run_git(root: Path, args: list[str]) -> str:
    proc = subprocess.run(
        ["git", *args],
        cwd=root,
        check=False,
        capture_output=True,
        text=True,
    )
    if proc.returncode != 0:
        message = proc.stderr.strip() or proc.stdout.strip() or f"git {args[0]} failed"
        raise RuntimeError(message)
    return proc.stdout


def git_ls_files(root: Path) -> list[str]:
    raw = _run_git(root, ["ls-files", "-z", "--cached", "--others", "--exclude-standard"])
    return sorted({item for item in raw.split("\0") if item})


def tracked_files(root: Path, owned_globs: Iterable[str]) -> list[str]:
    """Files git knows about that fall under the configured ``owned_globs``."""
    patterns = tuple(owned_globs)
    files = [
        path
        for path in git_ls_files(root)
        if matches_any(patterns, path) and (root / path).is_file()
    ]
    logger.debug("{} tracked file(s) under {}", len(files), root)
    return files


def stage_files(root: Path, paths: Iterable[str]) -> None:
    targets = [str(path) for path in paths]
    if not targets:
        return
    _run_git(root, ["add", "--", *targets])
    logger.info("staged {}", ", ".join(targets))
