from __future__ import annotations

from pathlib import Path
import re
from typing import Callable, Iterable

from loguru import logger

from ownerscope.mapper import Mapper, OwnershipAssociation
from ownerscope.teams import Team, TeamIndex

_ANNOTATION_RE = re.compile(r"\A(?:#|//)\s*@team\s+(?P<team>\S.*?)\s*\Z")


def annotation_team_name(first_line: str) -> str | None:
    match = _ANNOTATION_RE.match(first_line.rstrip("\r\n"))
    if match is None:
        return None
    return match.group("team")


class FileAnnotations(Mapper):
    """Ownership declared on the first line of a file, e.g. ``# @team Payments``."""

    def __init__(self, *, root: Path, teams: TeamIndex, files: Callable[[], Iterable[str]]):
        self._root = root
        self._teams = teams
        self._files = files
        self._owners: dict[str, Team | None] = {}
        self._associations: list[OwnershipAssociation] | None = None

    @property
    def description(self) -> str:
        return "Annotations at the top of file"

    def map_file_to_owner(self, path: str) -> Team | None:
        if path not in self._owners:
            self._owners[path] = self._annotated_owner(path)
        return self._owners[path]

    def owned_associations(self) -> list[OwnershipAssociation]:
        if self._associations is None:
            associations: list[OwnershipAssociation] = []
            for path in sorted(self._files()):
                team = self.map_file_to_owner(path)
                if team is not None:
                    associations.append(OwnershipAssociation(label=path, team=team))
            self._associations = associations
        return list(self._associations)

    def reset_cache(self) -> None:
        self._owners.clear()
        self._associations = None
        self._teams.invalidate()

    def remove_file_annotation(self, path: str) -> bool:
        full_path = self._root / path
        if not full_path.is_file():
            return False
        lines = full_path.read_text(encoding="utf-8").splitlines(keepends=True)
        if not lines or annotation_team_name(lines[0]) is None:
            return False
        remaining = lines[1:]
        if remaining and not remaining[0].strip():
            remaining = remaining[1:]
        full_path.write_text("".join(remaining), encoding="utf-8")
        logger.info("removed ownership annotation from {}", path)
        self.reset_cache()
        return True

    def _annotated_owner(self, path: str) -> Team | None:
        first_line = self._read_first_line(self._root / path)
        if first_line is None:
            return None
        name = annotation_team_name(first_line)
        if name is None:
            return None
        return self._teams.require(name, source=f"{path} @team annotation")

    @staticmethod
    def _read_first_line(full_path: Path) -> str | None:
        if not full_path.is_file():
            return None
        with full_path.open("r", encoding="utf-8", errors="replace") as handle:
            return handle.readline()
