"""Ownership strategies and their ordered registry.

A mapper answers "which team owns this file" from one rule source. The
registry keeps mappers in priority order; resolution asks them in that order
and the first answer wins. The registry never merges answers or detects
conflicts between mappers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator

from ownerscope.teams import Team


@dataclass(frozen=True)
class OwnershipAssociation:
    """One ``(label, team)`` pair a mapper knows about.

    The label granularity is mapper specific: a glob, a directory, a package
    or a single file. ``team`` is ``None`` when the rule explicitly marks the
    label as unowned.
    """

    label: str
    team: Team | None


class Mapper(ABC):
    """Contract every ownership strategy implements."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Stable human readable name, used as a report section header."""

    @abstractmethod
    def map_file_to_owner(self, path: str) -> Team | None:
        """Owner of repo-relative ``path`` under this strategy alone."""

    @abstractmethod
    def owned_associations(self) -> list[OwnershipAssociation]:
        """Every association this strategy knows, in rule-source order."""

    def map_files_to_owners(self, files: Iterable[str]) -> dict[str, Team | None]:
        """File-level associations among ``files``.

        A key mapped to ``None`` is a file this strategy explicitly leaves
        unowned; it still counts as handled for validation.
        """
        mapped: dict[str, Team | None] = {}
        for path in files:
            owner = self.map_file_to_owner(path)
            if owner is not None:
                mapped[path] = owner
        return mapped

    def reset_cache(self) -> None:
        """Drop derived indices so the next query re-reads the rule source."""

    def fix(self, files: Iterable[str], *, stage_changes: bool) -> bool:
        """Autocorrect the rule source for ``files``; ``True`` if anything changed."""
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r})"


class MapperRegistry:
    def __init__(self, mappers: Iterable[Mapper] = ()):
        self._mappers: list[Mapper] = list(mappers)

    def register(self, mapper: Mapper) -> Mapper:
        self._mappers.append(mapper)
        return mapper

    def insert(self, index: int, mapper: Mapper) -> Mapper:
        self._mappers.insert(index, mapper)
        return mapper

    def __iter__(self) -> Iterator[Mapper]:
        return iter(tuple(self._mappers))

    def __len__(self) -> int:
        return len(self._mappers)

    def __getitem__(self, index: int) -> Mapper:
        return self._mappers[index]

    def find(self, mapper_type: type[Mapper]) -> Mapper | None:
        for mapper in self._mappers:
            if isinstance(mapper, mapper_type):
                return mapper
        return None

    def reset_caches(self) -> None:
        for mapper in self._mappers:
            mapper.reset_cache()
