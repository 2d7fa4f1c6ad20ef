from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable

from ownerscope.mapper import Mapper, OwnershipAssociation
from ownerscope.paths import expand_globs
from ownerscope.teams import Team, TeamIndex

CODEOWNER_FILE = ".codeowner"


@dataclass(frozen=True)
class _DirectoryRule:
    directory: str
    team: Team | None


class DirectoryOwnership(Mapper):
    """A ``.codeowner`` file names the team owning its directory tree.

    The nearest ``.codeowner`` above a file wins. An empty ``.codeowner``
    marks the tree as deliberately unowned.
    """

    def __init__(self, *, root: Path, teams: TeamIndex):
        self._root = root
        self._teams = teams
        self._rules: dict[str, _DirectoryRule | None] = {}

    @property
    def description(self) -> str:
        return "Owner in .codeowner"

    def map_file_to_owner(self, path: str) -> Team | None:
        rule = self._nearest_rule(path)
        return rule.team if rule is not None else None

    def map_files_to_owners(self, files: Iterable[str]) -> dict[str, Team | None]:
        mapped: dict[str, Team | None] = {}
        for path in files:
            rule = self._nearest_rule(path)
            if rule is not None:
                mapped[path] = rule.team
        return mapped

    def owned_associations(self) -> list[OwnershipAssociation]:
        associations: list[OwnershipAssociation] = []
        for marker in sorted(expand_globs(self._root, [f"**/{CODEOWNER_FILE}"])):
            directory = PurePosixPath(marker).parent.as_posix()
            rule = self._rule_for_directory(directory)
            if rule is None:
                continue
            label = "**/**" if directory == "." else f"{directory}/**/**"
            associations.append(OwnershipAssociation(label=label, team=rule.team))
        return associations

    def reset_cache(self) -> None:
        self._rules.clear()
        self._teams.invalidate()

    def _nearest_rule(self, path: str) -> _DirectoryRule | None:
        for parent in PurePosixPath(path).parents:
            rule = self._rule_for_directory(parent.as_posix())
            if rule is not None:
                return rule
        return None

    def _rule_for_directory(self, directory: str) -> _DirectoryRule | None:
        if directory not in self._rules:
            self._rules[directory] = self._read_rule(directory)
        return self._rules[directory]

    def _read_rule(self, directory: str) -> _DirectoryRule | None:
        marker = self._root / directory / CODEOWNER_FILE
        if not marker.is_file():
            return None
        name = marker.read_text(encoding="utf-8").strip()
        if not name:
            return _DirectoryRule(directory=directory, team=None)
        rel_marker = PurePosixPath(directory, CODEOWNER_FILE).as_posix()
        return _DirectoryRule(
            directory=directory,
            team=self._teams.require(name, source=rel_marker),
        )
