"""Concrete ownership strategies and the default registry order."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

from ownerscope.config import Configuration
from ownerscope.mapper import MapperRegistry
from ownerscope.mappers.directory_ownership import DirectoryOwnership
from ownerscope.mappers.file_annotations import FileAnnotations
from ownerscope.mappers.js_package_ownership import JsPackageOwnership
from ownerscope.mappers.package_ownership import PackageOwnership
from ownerscope.mappers.team_globs import TeamGlobs
from ownerscope.mappers.team_yml_ownership import TeamYmlOwnership
from ownerscope.teams import TeamIndex

__all__ = [
    "DirectoryOwnership",
    "FileAnnotations",
    "JsPackageOwnership",
    "PackageOwnership",
    "TeamGlobs",
    "TeamYmlOwnership",
    "default_registry",
]


def default_registry(
    *,
    root: Path,
    teams: TeamIndex,
    config: Configuration,
    files: Callable[[], Iterable[str]],
) -> MapperRegistry:
    """Registry in priority order: per-file rules before broad ones."""
    return MapperRegistry(
        [
            FileAnnotations(root=root, teams=teams, files=files),
            TeamYmlOwnership(teams=teams),
            TeamGlobs(teams=teams),
            DirectoryOwnership(root=root, teams=teams),
            PackageOwnership(root=root, teams=teams, package_paths=config.package_paths),
            JsPackageOwnership(root=root, teams=teams, package_paths=config.js_package_paths),
        ]
    )
