"""Readers for YAML/JSON rule sources.

Unlike the config loader, rule sources are authoritative: a file that exists
but cannot be parsed into a mapping raises, because every ownership answer
derived from it would be wrong.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

import yaml

from ownerscope.exceptions import InvalidOwnershipConfigurationError


def _yaml_loader():
    class Loader(yaml.SafeLoader):
        pass

    # Team names such as "No" or "On" must stay strings.
    for key, values in list(Loader.yaml_implicit_resolvers.items()):
        Loader.yaml_implicit_resolvers[key] = [
            (tag, regexp) for tag, regexp in values if tag != "tag:yaml.org,2002:bool"
        ]
    return Loader


_LOADER = _yaml_loader()


def load_yaml_mapping(path: Path) -> dict[str, object]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.load(handle, Loader=_LOADER)
    except yaml.YAMLError as exc:
        raise InvalidOwnershipConfigurationError(f"{path} is not valid YAML: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidOwnershipConfigurationError(f"{path} root must be a mapping")
    return {str(key): value for key, value in raw.items()}


def load_json_mapping(path: Path) -> dict[str, object]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidOwnershipConfigurationError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise InvalidOwnershipConfigurationError(f"{path} root must be an object")
    return {str(key): value for key, value in raw.items()}


def string_list(raw: object, *, source: str, field_name: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list) or any(not isinstance(item, str) for item in raw):
        raise InvalidOwnershipConfigurationError(
            f"{source} invalid {field_name}: expected list[str]"
        )
    return tuple(raw)


def optional_string(raw: object, *, source: str, field_name: str) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise InvalidOwnershipConfigurationError(
            f"{source} invalid {field_name}: expected str"
        )
    stripped = raw.strip()
    return stripped or None
