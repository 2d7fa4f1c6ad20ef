from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable, Mapping

from ownerscope.mapper import Mapper, OwnershipAssociation
from ownerscope.paths import expand_globs, is_within
from ownerscope.rule_io import load_yaml_mapping, optional_string
from ownerscope.teams import Team, TeamIndex

PACKAGE_MANIFEST = "package.yml"


class ManifestOwnership(Mapper):
    """Ownership declared by a manifest file sitting at a package root.

    The deepest package containing a file wins, so nested packages override
    their parents.
    """

    manifest_name: str = PACKAGE_MANIFEST

    def __init__(self, *, root: Path, teams: TeamIndex, package_paths: Iterable[str]):
        self._root = root
        self._teams = teams
        self._package_paths = tuple(package_paths)
        self._packages: list[tuple[str, Team | None]] | None = None

    def load_manifest(self, path: Path) -> Mapping[str, object]:
        return load_yaml_mapping(path)

    def owner_name(self, manifest: Mapping[str, object], *, source: str) -> str | None:
        metadata = manifest.get("metadata")
        if isinstance(metadata, Mapping) and metadata.get("owner") is not None:
            return optional_string(metadata.get("owner"), source=source, field_name="metadata.owner")
        return optional_string(manifest.get("owner"), source=source, field_name="owner")

    def map_file_to_owner(self, path: str) -> Team | None:
        for package_dir, team in self._index():
            if is_within(package_dir, path):
                return team
        return None

    def owned_associations(self) -> list[OwnershipAssociation]:
        return [
            OwnershipAssociation(label=f"{package_dir}/**/**", team=team)
            for package_dir, team in sorted(self._index(), key=lambda item: item[0])
        ]

    def owner_for_package(self, package_dir: str | Path) -> Team | None:
        rel_dir = Path(package_dir)
        if rel_dir.is_absolute():
            rel_dir = rel_dir.relative_to(self._root.absolute())
        manifest_path = self._root / rel_dir / self.manifest_name
        if not manifest_path.is_file():
            return None
        return self._owner_from_manifest(manifest_path)

    def reset_cache(self) -> None:
        self._packages = None
        self._teams.invalidate()

    def _index(self) -> list[tuple[str, Team | None]]:
        if self._packages is None:
            patterns = [f"{pattern.rstrip('/')}/{self.manifest_name}" for pattern in self._package_paths]
            packages: list[tuple[str, Team | None]] = []
            for manifest in sorted(expand_globs(self._root, patterns)):
                if "node_modules" in PurePosixPath(manifest).parts:
                    continue
                team = self._owner_from_manifest(self._root / manifest)
                if team is None:
                    continue
                packages.append((PurePosixPath(manifest).parent.as_posix(), team))
            # Deepest package first so nested packages shadow their parents.
            packages.sort(key=lambda item: (-item[0].count("/"), item[0]))
            self._packages = packages
        return self._packages

    def _owner_from_manifest(self, manifest_path: Path) -> Team | None:
        source = manifest_path.relative_to(self._root).as_posix()
        name = self.owner_name(self.load_manifest(manifest_path), source=source)
        if name is None:
            return None
        return self._teams.require(name, source=source)


class PackageOwnership(ManifestOwnership):
    manifest_name = PACKAGE_MANIFEST

    @property
    def description(self) -> str:
        return "Owner metadata key in package.yml"
