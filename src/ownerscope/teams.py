from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping

from loguru import logger

from ownerscope.exceptions import InvalidOwnershipConfigurationError
from ownerscope.paths import expand_globs
from ownerscope.rule_io import load_yaml_mapping, optional_string, string_list


@dataclass(frozen=True, eq=False)
class Team:
    """An organizational owner. Two teams are equal when their names are."""

    name: str
    config_path: str | None = None
    github_team: str | None = None
    owned_globs: tuple[str, ...] = ()
    raw: Mapping[str, object] = field(default_factory=dict, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Team):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name


def team_from_mapping(payload: Mapping[str, object], *, config_path: str | None = None) -> Team:
    source = config_path or "team"
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidOwnershipConfigurationError(f"{source} invalid name: expected str")
    github_raw = payload.get("github")
    github_team: str | None = None
    if isinstance(github_raw, Mapping):
        github_team = optional_string(
            github_raw.get("team"), source=source, field_name="github.team"
        )
    elif github_raw is not None:
        raise InvalidOwnershipConfigurationError(f"{source} invalid github: expected mapping")
    return Team(
        name=name.strip(),
        config_path=config_path,
        github_team=github_team,
        owned_globs=string_list(
            payload.get("owned_globs"), source=source, field_name="owned_globs"
        ),
        raw=dict(payload),
    )


def _index_by_name(teams: Iterable[Team]) -> dict[str, Team]:
    by_name: dict[str, Team] = {}
    for team in teams:
        existing = by_name.get(team.name)
        if existing is not None:
            raise InvalidOwnershipConfigurationError(
                f"team {team.name!r} is defined in both "
                f"{existing.config_path} and {team.config_path}"
            )
        by_name[team.name] = team
    return by_name


class TeamIndex:
    """Teams in load order, addressable by name.

    An index built from a ``loader`` re-reads its teams on first use after
    :meth:`invalidate`, so mapper cache resets pick up edited team files.
    """

    def __init__(
        self,
        teams: Iterable[Team] = (),
        *,
        loader: Callable[[], Iterable[Team]] | None = None,
    ):
        self._loader = loader
        self._stale = False
        self._by_name = _index_by_name(loader() if loader is not None else teams)

    def invalidate(self) -> None:
        if self._loader is not None:
            self._stale = True

    def _teams(self) -> dict[str, Team]:
        if self._stale and self._loader is not None:
            self._by_name = _index_by_name(self._loader())
            self._stale = False
        return self._by_name

    def __iter__(self) -> Iterator[Team]:
        return iter(self._teams().values())

    def __len__(self) -> int:
        return len(self._teams())

    def __contains__(self, name: object) -> bool:
        return name in self._teams()

    def find(self, name: str) -> Team | None:
        return self._teams().get(name.strip())

    def require(self, name: str, *, source: str = "ownership rule") -> Team:
        team = self.find(name)
        if team is None:
            raise InvalidOwnershipConfigurationError(
                f"{source} names unknown team {name.strip()!r}"
            )
        return team

    def by_config_path(self) -> dict[str, Team]:
        return {
            team.config_path: team for team in self if team.config_path is not None
        }


def read_team_files(root: Path, team_file_globs: Iterable[str]) -> list[Team]:
    teams: list[Team] = []
    for rel_path in sorted(expand_globs(root, team_file_globs)):
        payload = load_yaml_mapping(root / rel_path)
        teams.append(team_from_mapping(payload, config_path=rel_path))
    logger.debug("loaded {} team(s) from {}", len(teams), root)
    return teams


def load_teams(root: Path, team_file_globs: Iterable[str]) -> TeamIndex:
    globs = tuple(team_file_globs)
    return TeamIndex(loader=lambda: read_team_files(root, globs))


def teams_missing_github(teams: TeamIndex) -> list[str]:
    return [team.name for team in teams if team.github_team is None]
