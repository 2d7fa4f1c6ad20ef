"""Repository-wide ownership validation.

Each check returns a list of user facing messages. Offending files are
aggregated into one message per check so that a large repository does not
produce one error per file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from loguru import logger

from ownerscope.codeowners import codeowners_content, read_codeowners, write_codeowners
from ownerscope.config import Configuration
from ownerscope.exceptions import OwnershipValidationError
from ownerscope.paths import expand_globs
from ownerscope.resolver import Resolver
from ownerscope.teams import TeamIndex, teams_missing_github
from ownerscope.tracked_files import stage_files

StageFn = Callable[[Path, Iterable[str]], None]


@dataclass(frozen=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    unowned_files: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise OwnershipValidationError(self)


def _bullet_list(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


class Validator:
    def __init__(
        self,
        resolver: Resolver,
        *,
        config: Configuration,
        teams: TeamIndex | None = None,
        stage_fn: StageFn = stage_files,
    ):
        self._resolver = resolver
        self._config = config
        self._teams = teams
        self._stage_fn = stage_fn

    @property
    def root(self) -> Path:
        return self._resolver.root

    def allow_list(self) -> set[str]:
        return expand_globs(self.root, self._config.unowned_globs)

    def files_by_mapper(self, files: Iterable[str], *, owned_only: bool = False) -> dict[str, list[str]]:
        """Map each file to the descriptions of every mapper associating it."""
        ordered = list(dict.fromkeys(files))
        by_file: dict[str, list[str]] = {path: [] for path in ordered}
        for mapper in self._resolver.registry:
            for path, team in mapper.map_files_to_owners(ordered).items():
                if path not in by_file:
                    continue
                if owned_only and team is None:
                    continue
                by_file[path].append(mapper.description)
        return by_file

    def unmapped_files(self, files: Iterable[str]) -> list[str]:
        return [path for path, mappers in self.files_by_mapper(files).items() if not mappers]

    def unowned_files(self, files: Iterable[str]) -> list[str]:
        allow_list = self.allow_list()
        return sorted(path for path in self.unmapped_files(files) if path not in allow_list)

    def files_have_owners(
        self,
        files: Iterable[str],
        *,
        autocorrect: bool = False,
        stage_changes: bool = False,
    ) -> tuple[list[str], list[str]]:
        tracked = list(files)
        if autocorrect:
            self._fix_unmapped(tracked, stage_changes=stage_changes)
        unowned = self.unowned_files(tracked)
        errors: list[str] = []
        if unowned:
            errors.append(f"Some files are missing ownership:\n\n{_bullet_list(unowned)}\n")
        return errors, unowned

    def files_have_unique_owners(self, files: Iterable[str]) -> list[str]:
        conflicts = [
            f"{path} ({', '.join(mappers)})"
            for path, mappers in self.files_by_mapper(files, owned_only=True).items()
            if len(mappers) > 1
        ]
        if not conflicts:
            return []
        return [
            "Code ownership should only be defined for each file in one way. "
            "The following files have declared ownership in multiple ways.\n\n"
            f"{_bullet_list(sorted(conflicts))}\n"
        ]

    def codeowners_up_to_date(self, *, autocorrect: bool = False, stage_changes: bool = False) -> list[str]:
        if self._config.skip_codeowners_validation:
            return []
        path = self.root / self._config.codeowners_path
        expected = codeowners_content(self._resolver.registry)
        actual = read_codeowners(path)
        if actual == expected or (actual is None and not expected):
            return []
        if autocorrect:
            write_codeowners(path, expected)
            logger.info("rewrote {}", self._config.codeowners_path)
            if stage_changes:
                self._stage_fn(self.root, [self._config.codeowners_path])
            return []
        if actual is None:
            return [
                "CODEOWNERS file does not exist. "
                "Run `ownerscope validate --autocorrect` to generate it."
            ]
        return [
            "CODEOWNERS out of date. "
            "Run `ownerscope validate --autocorrect` to update the CODEOWNERS file."
        ]

    def teams_have_github_teams(self) -> list[str]:
        if not self._config.require_github_teams or self._teams is None:
            return []
        missing = teams_missing_github(self._teams)
        if not missing:
            return []
        return [
            "The following teams must define github.team in their YAML file:\n\n"
            f"{_bullet_list(missing)}\n"
        ]

    def validate(
        self,
        files: Iterable[str],
        *,
        autocorrect: bool = False,
        stage_changes: bool = False,
    ) -> ValidationResult:
        tracked = list(dict.fromkeys(files))
        errors, unowned = self.files_have_owners(
            tracked, autocorrect=autocorrect, stage_changes=stage_changes
        )
        errors.extend(self.files_have_unique_owners(tracked))
        errors.extend(self.teams_have_github_teams())
        errors.extend(
            self.codeowners_up_to_date(autocorrect=autocorrect, stage_changes=stage_changes)
        )
        logger.info(
            "validated {} file(s): {} error(s), {} unowned",
            len(tracked),
            len(errors),
            len(unowned),
        )
        return ValidationResult(errors=errors, unowned_files=unowned)

    def _fix_unmapped(self, files: list[str], *, stage_changes: bool) -> None:
        unmapped = self.unmapped_files(files)
        if not unmapped:
            return
        changed = False
        for mapper in self._resolver.registry:
            if mapper.fix(unmapped, stage_changes=stage_changes):
                logger.info("{} autocorrected ownership rules", mapper.description)
                changed = True
        if changed:
            self._resolver.reset()
