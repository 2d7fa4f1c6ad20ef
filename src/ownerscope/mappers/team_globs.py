from __future__ import annotations

from ownerscope.mapper import Mapper, OwnershipAssociation
from ownerscope.paths import glob_matches
from ownerscope.teams import Team, TeamIndex


class TeamGlobs(Mapper):
    """``owned_globs`` listed in each team's YAML file.

    Within this mapper the first team (in team load order) whose glob matches
    wins.
    """

    def __init__(self, *, teams: TeamIndex):
        self._teams = teams
        self._globs: list[tuple[str, Team]] | None = None

    @property
    def description(self) -> str:
        return "Team-specific owned globs"

    def map_file_to_owner(self, path: str) -> Team | None:
        for pattern, team in self._index():
            if glob_matches(pattern, path):
                return team
        return None

    def owned_associations(self) -> list[OwnershipAssociation]:
        return [OwnershipAssociation(label=pattern, team=team) for pattern, team in self._index()]

    def reset_cache(self) -> None:
        self._globs = None
        self._teams.invalidate()

    def _index(self) -> list[tuple[str, Team]]:
        if self._globs is None:
            self._globs = [
                (pattern, team) for team in self._teams for pattern in team.owned_globs
            ]
        return self._globs
