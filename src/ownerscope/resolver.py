"""First-match-wins ownership resolution with memoization.

The resolver owns two caches:

* the resolution cache, normalized path -> :class:`CachedOwner`;
* the class cache, ``id(obj)`` -> ``(obj, CachedOwner)``. The object is held
  so its id cannot be reused while the entry exists.

A missing key means "not computed yet"; ``CachedOwner(team=None)`` means
"computed, nobody owns it". Cached answers are returned until
:meth:`Resolver.reset` is called; rule-source changes on disk are not watched.
"""

from __future__ import annotations

from dataclasses import dataclass
import inspect
from pathlib import Path

from loguru import logger

from ownerscope.mapper import Mapper, MapperRegistry
from ownerscope.paths import normalize_path
from ownerscope.teams import Team


@dataclass(frozen=True)
class CachedOwner:
    team: Team | None


def class_identity(obj: object) -> str:
    if inspect.ismodule(obj):
        return obj.__name__
    module = getattr(obj, "__module__", None) or "<unknown>"
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if qualname is None:
        qualname = type(obj).__qualname__
    return f"{module}.{qualname}"


def source_file_for(obj: object) -> str | None:
    """Source file defining ``obj``, or ``None`` when it has no Python source."""
    try:
        return inspect.getsourcefile(obj)  # type: ignore[arg-type]
    except (TypeError, OSError):
        # Builtins, C extensions and interactively defined classes.
        return None


class Resolver:
    def __init__(self, registry: MapperRegistry, *, root: Path):
        self.registry = registry
        self.root = root
        self._for_file: dict[str, CachedOwner] = {}
        self._for_class: dict[int, tuple[object, CachedOwner]] = {}

    def normalize(self, path: str | Path) -> str | None:
        return normalize_path(path, root=self.root)

    def resolve(self, path: str | Path) -> Team | None:
        normalized = self.normalize(path)
        if normalized is None:
            return None
        cached = self._for_file.get(normalized)
        if cached is not None:
            return cached.team

        owner: Team | None = None
        for mapper in self.registry:
            owner = mapper.map_file_to_owner(normalized)
            if owner is not None:
                logger.debug("{} owned by {} via {}", normalized, owner.name, mapper.description)
                break
        self._for_file[normalized] = CachedOwner(team=owner)
        return owner

    def resolve_by_class(self, obj: object) -> Team | None:
        cached = self._for_class.get(id(obj))
        if cached is not None:
            return cached[1].team
        source = source_file_for(obj)
        owner: Team | None = None
        if source is None:
            logger.debug("{} has no Python source", class_identity(obj))
        else:
            owner = self.resolve(source)
        self._for_class[id(obj)] = (obj, CachedOwner(team=owner))
        return owner

    def mappers_for_file(self, path: str | Path) -> list[Mapper]:
        """Every mapper claiming ``path``; ignores the cache and priority."""
        normalized = self.normalize(path)
        if normalized is None:
            return []
        return [
            mapper
            for mapper in self.registry
            if normalized in mapper.map_files_to_owners([normalized])
        ]

    def is_cached(self, path: str | Path) -> bool:
        normalized = self.normalize(path)
        return normalized is not None and normalized in self._for_file

    def reset(self) -> None:
        self._for_file.clear()
        self._for_class.clear()
        self.registry.reset_caches()
        logger.debug("ownership caches reset")
