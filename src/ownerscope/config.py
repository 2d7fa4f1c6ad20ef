from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from ownerscope.exceptions import InvalidOwnershipConfigurationError

DEFAULT_CONFIG_NAME = "ownerscope.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]

_DEFAULT_OWNED_GLOBS: tuple[str, ...] = ("**/*",)
_DEFAULT_TEAM_FILE_GLOBS: tuple[str, ...] = ("config/teams/**/*.yml",)
_DEFAULT_JS_PACKAGE_PATHS: tuple[str, ...] = ("frontend/**",)
_DEFAULT_PACKAGE_PATHS: tuple[str, ...] = ("packs/*", "packs/**/*")
_DEFAULT_CODEOWNERS_PATH = ".github/CODEOWNERS"
_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Configuration:
    owned_globs: tuple[str, ...] = _DEFAULT_OWNED_GLOBS
    unowned_globs: tuple[str, ...] = ()
    team_file_glob: tuple[str, ...] = _DEFAULT_TEAM_FILE_GLOBS
    js_package_paths: tuple[str, ...] = _DEFAULT_JS_PACKAGE_PATHS
    package_paths: tuple[str, ...] = _DEFAULT_PACKAGE_PATHS
    codeowners_path: str = _DEFAULT_CODEOWNERS_PATH
    skip_codeowners_validation: bool = False
    require_github_teams: bool = False
    raw: TomlTable = field(default_factory=dict, compare=False)


def _read_config_table(path: Path, *, required: bool) -> TomlTable:
    """Parse ``path``; an absent optional file means "use the defaults"."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if required:
            raise InvalidOwnershipConfigurationError(f"{path} does not exist") from None
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidOwnershipConfigurationError(f"{path} is not valid TOML: {exc}") from exc


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is not None:
        return _read_config_table(config_path, required=True)
    base = root if root is not None else Path.cwd()
    return _read_config_table(base / DEFAULT_CONFIG_NAME, required=False)


def ownership_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("ownership", {})
    if not isinstance(section, dict):
        raise InvalidOwnershipConfigurationError("[ownership] must be a table")
    return section


def _split_names(value: TomlValue) -> list[str]:
    """Names from a string or a list of strings, each possibly comma separated."""
    if isinstance(value, str):
        chunks = [value]
    elif isinstance(value, (list, tuple, set)):
        chunks = [item for item in value if isinstance(item, str)]
    else:
        return []
    return [name.strip() for chunk in chunks for name in chunk.split(",") if name.strip()]


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (bool, int)):
        return bool(value)
    return False


def _glob_list(section: TomlTable, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in section:
        return default
    # Glob patterns may legitimately contain commas inside braces.
    value = section.get(key)
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
    return default


def configuration_from_section(section: TomlTable | None) -> Configuration:
    if section is None or not isinstance(section, dict):
        return Configuration()
    codeowners_path = section.get("codeowners_path")
    return Configuration(
        owned_globs=_glob_list(section, "owned_globs", _DEFAULT_OWNED_GLOBS),
        unowned_globs=_glob_list(section, "unowned_globs", ()),
        team_file_glob=_glob_list(section, "team_file_glob", _DEFAULT_TEAM_FILE_GLOBS),
        js_package_paths=_glob_list(section, "js_package_paths", _DEFAULT_JS_PACKAGE_PATHS),
        package_paths=_glob_list(section, "package_paths", _DEFAULT_PACKAGE_PATHS),
        codeowners_path=(
            codeowners_path.strip()
            if isinstance(codeowners_path, str) and codeowners_path.strip()
            else _DEFAULT_CODEOWNERS_PATH
        ),
        skip_codeowners_validation=_as_bool(section.get("skip_codeowners_validation")),
        require_github_teams=_as_bool(section.get("require_github_teams")),
        raw=dict(section),
    )


def load_configuration(
    root: Path | None = None, config_path: Path | None = None
) -> Configuration:
    return configuration_from_section(ownership_defaults(root=root, config_path=config_path))


def excluded_team_names(value: TomlValue) -> list[str]:
    """Team names from a CLI/config value given as a list or a comma list."""
    return _split_names(value)
