from __future__ import annotations

from ownerscope.mapper import Mapper, OwnershipAssociation
from ownerscope.teams import Team, TeamIndex


class TeamYmlOwnership(Mapper):
    """Each team owns the YAML file that defines it."""

    def __init__(self, *, teams: TeamIndex):
        self._teams = teams
        self._by_path: dict[str, Team] | None = None

    @property
    def description(self) -> str:
        return "Team YML ownership"

    def map_file_to_owner(self, path: str) -> Team | None:
        return self._index().get(path)

    def owned_associations(self) -> list[OwnershipAssociation]:
        return [
            OwnershipAssociation(label=path, team=team)
            for path, team in self._index().items()
        ]

    def reset_cache(self) -> None:
        self._by_path = None
        self._teams.invalidate()

    def _index(self) -> dict[str, Team]:
        if self._by_path is None:
            self._by_path = self._teams.by_config_path()
        return self._by_path
