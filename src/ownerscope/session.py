from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger

from ownerscope.backtrace import BacktraceAttributor, OwnedFrame
from ownerscope.codeowners import codeowners_content, write_codeowners
from ownerscope.config import Configuration, load_configuration
from ownerscope.mapper import MapperRegistry
from ownerscope.mappers import FileAnnotations, PackageOwnership, default_registry
from ownerscope.report import report_for_team
from ownerscope.resolver import Resolver
from ownerscope.teams import Team, TeamIndex, load_teams
from ownerscope.tracked_files import tracked_files
from ownerscope.validator import ValidationResult, Validator


class OwnershipSession:
    """Everything needed to answer ownership questions for one repository root.

    Build one session per logical run (one per test case, one per CLI call).
    ``files`` overrides the git-backed tracked-file listing.
    """

    def __init__(
        self,
        root: Path | str = ".",
        *,
        config_path: Path | None = None,
        files: Iterable[str] | None = None,
        registry: MapperRegistry | None = None,
    ):
        self.root = Path(root)
        self._config_path = config_path
        self._files_override = None if files is None else sorted(set(files))
        self._registry_override = registry
        self._tracked: list[str] | None = None
        self._build()

    def _build(self) -> None:
        self.config: Configuration = load_configuration(self.root, self._config_path)
        self.teams: TeamIndex = load_teams(self.root, self.config.team_file_glob)
        if self._registry_override is not None:
            self.registry: MapperRegistry = self._registry_override
        else:
            self.registry = default_registry(
                root=self.root,
                teams=self.teams,
                config=self.config,
                files=self.tracked_files,
            )
        self.resolver = Resolver(self.registry, root=self.root)
        self.attributor = BacktraceAttributor(self.resolver)
        self.validator = Validator(self.resolver, config=self.config, teams=self.teams)

    def tracked_files(self) -> list[str]:
        if self._files_override is not None:
            return list(self._files_override)
        if self._tracked is None:
            self._tracked = tracked_files(self.root, self.config.owned_globs)
        return list(self._tracked)

    def find_team(self, team: Team | str) -> Team:
        if isinstance(team, Team):
            return team
        return self.teams.require(team, source="team lookup")

    def for_file(self, path: str | Path) -> Team | None:
        return self.resolver.resolve(path)

    def for_class(self, obj: object) -> Team | None:
        return self.resolver.resolve_by_class(obj)

    def for_team(self, team: Team | str) -> str:
        return report_for_team(self.registry, self.find_team(team))

    def for_package(self, package_dir: str | Path) -> Team | None:
        mapper = self.registry.find(PackageOwnership)
        if not isinstance(mapper, PackageOwnership):
            return None
        return mapper.owner_for_package(package_dir)

    def for_backtrace(
        self,
        backtrace: Iterable[str] | None,
        *,
        excluded_teams: Iterable[Team | str] = (),
    ) -> Team | None:
        return self.attributor.owning_team(backtrace, excluded=excluded_teams)

    def first_owned_file_for_backtrace(
        self,
        backtrace: Iterable[str] | None,
        *,
        excluded_teams: Iterable[Team | str] = (),
    ) -> OwnedFrame | None:
        return self.attributor.first_owned_frame(backtrace, excluded=excluded_teams)

    def validate(
        self,
        files: Iterable[str] | None = None,
        *,
        autocorrect: bool = False,
        stage_changes: bool = False,
    ) -> ValidationResult:
        tracked = self.tracked_files()
        if files is not None:
            requested = {
                normalized
                for normalized in (self.resolver.normalize(path) for path in files)
                if normalized is not None
            }
            tracked = [path for path in tracked if path in requested]
        return self.validator.validate(
            tracked, autocorrect=autocorrect, stage_changes=stage_changes
        )

    def remove_file_annotation(self, path: str | Path) -> bool:
        normalized = self.resolver.normalize(path)
        mapper = self.registry.find(FileAnnotations)
        if normalized is None or not isinstance(mapper, FileAnnotations):
            return False
        removed = mapper.remove_file_annotation(normalized)
        if removed:
            self.resolver.reset()
        return removed

    def codeowners_content(self) -> str:
        return codeowners_content(self.registry)

    def write_codeowners(self) -> bool:
        return write_codeowners(self.root / self.config.codeowners_path, self.codeowners_content())

    def bust_caches(self) -> None:
        """Forget every cached answer and re-read configuration and teams."""
        self.resolver.reset()
        self._tracked = None
        self._build()
        logger.debug("session for {} rebuilt", self.root)
