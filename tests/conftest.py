from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable, Iterable

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

import pytest
from loguru import logger

from ownerscope.session import OwnershipSession


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterable[None]:
    yield
    logger.remove()
    logger.disable("ownerscope")


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def write_file(repo_root: Path) -> Callable[..., Path]:
    def _write(rel_path: str, content: str = "") -> Path:
        path = repo_root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_team(write_file: Callable[..., Path]) -> Callable[..., Path]:
    def _write(
        name: str,
        *,
        owned_globs: Iterable[str] = (),
        github: str | None = None,
        filename: str | None = None,
    ) -> Path:
        lines = [f"name: {name}"]
        if github is not None:
            lines.extend(["github:", f"  team: '{github}'"])
        globs = list(owned_globs)
        if globs:
            lines.append("owned_globs:")
            lines.extend(f"  - '{pattern}'" for pattern in globs)
        slug = filename or name.lower().replace(" ", "_")
        return write_file(f"config/teams/{slug}.yml", "\n".join(lines) + "\n")

    return _write


@pytest.fixture
def write_config(write_file: Callable[..., Path]) -> Callable[[str], Path]:
    def _write(body: str) -> Path:
        return write_file("ownerscope.toml", textwrap.dedent(body).strip() + "\n")

    return _write


@pytest.fixture
def make_session(repo_root: Path) -> Callable[..., OwnershipSession]:
    def _make(files: Iterable[str] | None = None, **kwargs: object) -> OwnershipSession:
        if files is None:
            files = [
                path.relative_to(repo_root).as_posix()
                for path in repo_root.rglob("*")
                if path.is_file()
            ]
        return OwnershipSession(repo_root, files=files, **kwargs)

    return _make
