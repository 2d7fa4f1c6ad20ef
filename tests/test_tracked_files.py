from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable

import pytest

from ownerscope import tracked_files

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(root: Path, *args: str) -> str:
    proc = subprocess.run(["git", *args], cwd=root, check=True, capture_output=True, text=True)
    return proc.stdout


def _init_repo(root: Path) -> None:
    _git(root, "init")
    _git(root, "config", "user.email", "test@example.com")
    _git(root, "config", "user.name", "Test")


def test_tracked_files_filters_by_owned_globs(
    repo_root: Path, write_file: Callable[..., Path]
) -> None:
    _init_repo(repo_root)
    write_file("app/a.py", "x")
    write_file("app/nested/b.py", "x")
    write_file("docs/readme.md", "x")
    write_file("build/out.py", "x")
    write_file(".gitignore", "build/\n")
    _git(repo_root, "add", "app/a.py", ".gitignore")

    assert tracked_files.git_ls_files(repo_root) == [
        ".gitignore",
        "app/a.py",
        "app/nested/b.py",
        "docs/readme.md",
    ]
    assert tracked_files.tracked_files(repo_root, ["app/**/*.py"]) == ["app/a.py", "app/nested/b.py"]


def test_stage_files_adds_to_index(repo_root: Path, write_file: Callable[..., Path]) -> None:
    _init_repo(repo_root)
    write_file(".github/CODEOWNERS", "/a.py @org/a\n")
    tracked_files.stage_files(repo_root, [".github/CODEOWNERS"])
    assert _git(repo_root, "diff", "--cached", "--name-only").split() == [".github/CODEOWNERS"]
    tracked_files.stage_files(repo_root, [])


def test_git_failure_raises(tmp_path: Path) -> None:
    outside = tmp_path / "not-a-repo"
    outside.mkdir()
    with pytest.raises(RuntimeError):
        tracked_files.stage_files(outside, ["missing.txt"])
