from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from ownerscope.config import (
    Configuration,
    configuration_from_section,
    excluded_team_names,
    load_configuration,
)
from ownerscope.exceptions import InvalidOwnershipConfigurationError
from ownerscope.session import OwnershipSession


def test_missing_config_yields_defaults(tmp_path: Path) -> None:
    config = load_configuration(tmp_path)
    assert config == Configuration()
    assert config.owned_globs == ("**/*",)
    assert config.team_file_glob == ("config/teams/**/*.yml",)
    assert config.codeowners_path == ".github/CODEOWNERS"
    assert config.skip_codeowners_validation is False


def test_config_reads_ownership_section(
    repo_root: Path, write_config: Callable[[str], Path]
) -> None:
    write_config(
        """
        [ownership]
        owned_globs = ["{app,lib}/**/*.py"]
        unowned_globs = ["gen/**", "vendor/**"]
        team_file_glob = "teams/*.yml"
        codeowners_path = "CODEOWNERS"
        skip_codeowners_validation = "yes"
        require_github_teams = true
        """
    )
    config = load_configuration(repo_root)
    assert config.owned_globs == ("{app,lib}/**/*.py",)
    assert config.unowned_globs == ("gen/**", "vendor/**")
    assert config.team_file_glob == ("teams/*.yml",)
    assert config.codeowners_path == "CODEOWNERS"
    assert config.skip_codeowners_validation is True
    assert config.require_github_teams is True
    assert config.raw["codeowners_path"] == "CODEOWNERS"


def test_explicit_config_path_wins(tmp_path: Path) -> None:
    config_path = tmp_path / "elsewhere.toml"
    config_path.write_text('[ownership]\nunowned_globs = ["tmp/**"]\n', encoding="utf-8")
    config = load_configuration(tmp_path / "missing-root", config_path=config_path)
    assert config.unowned_globs == ("tmp/**",)


def test_unparsable_config_raises(tmp_path: Path) -> None:
    (tmp_path / "ownerscope.toml").write_text(
        "[ownership\nunowned_globs = ['gen/**']\n", encoding="utf-8"
    )
    with pytest.raises(InvalidOwnershipConfigurationError, match="not valid TOML"):
        load_configuration(tmp_path)


def test_missing_explicit_config_path_raises(tmp_path: Path) -> None:
    with pytest.raises(InvalidOwnershipConfigurationError, match="does not exist"):
        load_configuration(tmp_path, config_path=tmp_path / "nope.toml")


def test_non_table_ownership_section_raises(tmp_path: Path) -> None:
    (tmp_path / "ownerscope.toml").write_text('ownership = "all"\n', encoding="utf-8")
    with pytest.raises(InvalidOwnershipConfigurationError, match=r"\[ownership\]"):
        load_configuration(tmp_path)


def test_broken_config_stops_session(
    repo_root: Path, make_session: Callable[..., OwnershipSession]
) -> None:
    (repo_root / "ownerscope.toml").write_text("[ownership\n", encoding="utf-8")
    with pytest.raises(InvalidOwnershipConfigurationError):
        make_session()


def test_non_table_section_yields_defaults() -> None:
    assert configuration_from_section(None) == Configuration()
    assert configuration_from_section({"owned_globs": 3}).owned_globs == ("**/*",)
    assert configuration_from_section({"codeowners_path": "  "}).codeowners_path == ".github/CODEOWNERS"


def test_excluded_team_names_accepts_lists_and_comma_strings() -> None:
    assert excluded_team_names(["Payments", "Infra, Search"]) == ["Payments", "Infra", "Search"]
    assert excluded_team_names("Payments,") == ["Payments"]
    assert excluded_team_names(None) == []
