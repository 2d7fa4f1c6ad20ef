from __future__ import annotations

from pathlib import Path

import pytest

from ownerscope import paths


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("app/models/user.py", "app/models/user.py"),
        ("./app/models/user.py", "app/models/user.py"),
        ("app/../app/models/user.py", "app/models/user.py"),
        ("  app/x.py  ", "app/x.py"),
    ],
)
def test_normalize_path_canonical_forms(tmp_path: Path, raw: str, expected: str) -> None:
    assert paths.normalize_path(raw, root=tmp_path) == expected


def test_normalize_path_strips_absolute_root(tmp_path: Path) -> None:
    absolute = tmp_path / "app" / "x.py"
    assert paths.normalize_path(str(absolute), root=tmp_path) == "app/x.py"
    assert paths.normalize_path(absolute, root=tmp_path) == "app/x.py"


@pytest.mark.parametrize("raw", ["", "   ", ".", "..", "../outside.py", "app/../../x.py"])
def test_normalize_path_rejects_ineligible(tmp_path: Path, raw: str) -> None:
    assert paths.normalize_path(raw, root=tmp_path) is None


def test_normalize_path_rejects_absolute_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    root.mkdir()
    assert paths.normalize_path(str(tmp_path / "other" / "x.py"), root=root) is None


def test_expand_braces() -> None:
    assert paths.expand_braces("app/*.{py,pyi}") == ["app/*.py", "app/*.pyi"]
    assert paths.expand_braces("{a,b}/{c,d}") == ["a/c", "a/d", "b/c", "b/d"]
    assert paths.expand_braces("no_braces") == ["no_braces"]
    assert paths.expand_braces("broken{a,b") == ["broken{a,b"]


@pytest.mark.parametrize(
    ("pattern", "path", "expected"),
    [
        ("app/**/*.py", "app/x.py", True),
        ("app/**/*.py", "app/a/b/x.py", True),
        ("app/*.py", "app/a/x.py", False),
        ("app/**", "app/a/b/x.py", True),
        ("**/*", "README.md", True),
        ("*.md", "docs/README.md", False),
        ("app/?.py", "app/a.py", True),
        ("app/?.py", "app/ab.py", False),
        ("app/[ab].py", "app/b.py", True),
        ("app/[!ab].py", "app/b.py", False),
        ("/app/**", "app/x.py", True),
        ("app/*.{py,rb}", "app/x.rb", True),
        ("app/x+y.py", "app/x+y.py", True),
        ("app/payments", "app/payments/charge.py", True),
        ("ownerscope.toml", "sub/ownerscope.toml", False),
        ("**/.codeowner", ".codeowner", True),
    ],
)
def test_glob_matches(pattern: str, path: str, expected: bool) -> None:
    assert paths.glob_matches(pattern, path) is expected


def test_expand_globs_returns_files_only(tmp_path: Path) -> None:
    (tmp_path / "gen" / "nested").mkdir(parents=True)
    (tmp_path / "gen" / "output.txt").write_text("x", encoding="utf-8")
    (tmp_path / "gen" / "nested" / "deep.txt").write_text("x", encoding="utf-8")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.py").write_text("x", encoding="utf-8")

    assert paths.expand_globs(tmp_path, ["gen/**"]) == {"gen/output.txt", "gen/nested/deep.txt"}
    assert paths.expand_globs(tmp_path, ["gen/*.txt"]) == {"gen/output.txt"}
    assert paths.expand_globs(tmp_path, ["{gen,src}/*.{txt,py}"]) == {"gen/output.txt", "src/a.py"}
    assert paths.expand_globs(tmp_path, ["missing/**"]) == set()


def test_is_within() -> None:
    assert paths.is_within("packs/foo", "packs/foo/app/x.py")
    assert not paths.is_within("packs/foo", "packs/foobar/x.py")
    assert paths.is_within(".", "anything.py")


def test_expand_globs_is_root_anchored_and_skips_git(tmp_path: Path) -> None:
    (tmp_path / ".git" / "objects").mkdir(parents=True)
    (tmp_path / ".git" / "objects" / "config.yml").write_text("x", encoding="utf-8")
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "config.yml").write_text("x", encoding="utf-8")
    (tmp_path / "config.yml").write_text("x", encoding="utf-8")

    assert paths.expand_globs(tmp_path, ["config.yml"]) == {"config.yml"}
    assert paths.expand_globs(tmp_path, ["**/config.yml"]) == {"config.yml", "config/config.yml"}
    assert paths.expand_globs(tmp_path, ["config"]) == {"config/config.yml"}


def test_pattern_spec_is_shared_across_calls() -> None:
    assert paths.pattern_spec("app/**") is paths.pattern_spec("app/**")
