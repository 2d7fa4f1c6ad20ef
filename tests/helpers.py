from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterable, Iterator, Mapping

from ownerscope.mapper import Mapper, OwnershipAssociation
from ownerscope.teams import Team


@contextmanager
def env_scope(values: Mapping[str, str | None]) -> Iterator[None]:
    previous = {key: os.environ.get(key) for key in values}
    try:
        for key, value in values.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        yield
    finally:
        for key, value in previous.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value


class StaticMapper(Mapper):
    """In-memory mapper whose rules tests mutate directly.

    ``rules`` maps a file path to a team, or to ``None`` for files the mapper
    explicitly leaves unowned. Every ``map_file_to_owner`` call is counted.
    """

    def __init__(self, name: str, rules: Mapping[str, Team | None] | None = None):
        self.name = name
        self.rules: dict[str, Team | None] = dict(rules or {})
        self.calls: list[str] = []
        self.resets = 0
        self.fixes: list[list[str]] = []
        self.fix_rules: dict[str, Team] = {}

    @property
    def description(self) -> str:
        return self.name

    def map_file_to_owner(self, path: str) -> Team | None:
        self.calls.append(path)
        return self.rules.get(path)

    def map_files_to_owners(self, files: Iterable[str]) -> dict[str, Team | None]:
        return {path: self.rules[path] for path in files if path in self.rules}

    def owned_associations(self) -> list[OwnershipAssociation]:
        return [OwnershipAssociation(label=path, team=team) for path, team in self.rules.items()]

    def reset_cache(self) -> None:
        self.resets += 1

    def fix(self, files: Iterable[str], *, stage_changes: bool) -> bool:
        targets = list(files)
        self.fixes.append(targets)
        changed = False
        for path in targets:
            team = self.fix_rules.get(path)
            if team is not None:
                self.rules[path] = team
                changed = True
        return changed
