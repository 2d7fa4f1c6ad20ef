"""Attribute a stack trace to the team owning the first relevant frame.

Frames are expected one per line in the form::

    ./app/payments/charge.py:43:in `capture'

The header line of a Python traceback entry
(``File "app/payments/charge.py", line 43, in capture``) is accepted too.
In both forms the repository root prefix (absolute or resolved) and a leading
``./`` are stripped. Anything else is skipped.
"""

from __future__ import annotations

from pathlib import Path
import re
import traceback
from typing import Iterable, Iterator, NamedTuple

from ownerscope.resolver import Resolver
from ownerscope.teams import Team

_PYTHON_FRAME_RE = re.compile(
    r"""\A\s*File\ "(?P<file>.+)",\ line\ (?P<line>\d+),\ in\ (?P<function>.+?)\s*\Z""",
    re.VERBOSE,
)


class OwnedFrame(NamedTuple):
    team: Team | None
    file: str


def frame_pattern(root: Path) -> re.Pattern[str]:
    prefix = re.escape(root.absolute().as_posix())
    return re.compile(
        rf"""\A(?:{prefix}/|\./)?
        (?P<file>.+)            # app/payments/charge.py
        :
        (?P<line>\d+)           # 43
        :in\s
        [`'](?P<function>.*)'   # `capture'
        \Z""",
        re.VERBOSE,
    )


def format_frames(frames: Iterable[traceback.FrameSummary]) -> list[str]:
    return [f"{frame.filename}:{frame.lineno}:in `{frame.name}'" for frame in frames]


def backtrace_for_exception(exc: BaseException) -> list[str]:
    """Frames of ``exc`` innermost first, in the documented frame format."""
    frames = traceback.extract_tb(exc.__traceback__)
    return format_frames(reversed(frames))


def _excluded_names(excluded: Iterable[Team | str]) -> frozenset[str]:
    return frozenset(item.name if isinstance(item, Team) else str(item) for item in excluded)


class BacktraceAttributor:
    def __init__(self, resolver: Resolver):
        self._resolver = resolver
        self._pattern = frame_pattern(resolver.root)

    def parse_file(self, line: str) -> str | None:
        text = line.rstrip("\r\n")
        match = self._pattern.match(text) or _PYTHON_FRAME_RE.match(text)
        if match is None:
            return None
        path = match.group("file")
        return self._resolver.normalize(path) or path

    def frames_with_ownership(self, backtrace: Iterable[str] | None) -> Iterator[OwnedFrame]:
        """Lazily pair each parseable frame with its owner, in order."""
        if backtrace is None:
            return
        for line in backtrace:
            path = self.parse_file(line)
            if path is None:
                continue
            yield OwnedFrame(team=self._resolver.resolve(path), file=path)

    def first_owned_frame(
        self,
        backtrace: Iterable[str] | None,
        *,
        excluded: Iterable[Team | str] = (),
    ) -> OwnedFrame | None:
        excluded_names = _excluded_names(excluded)
        for frame in self.frames_with_ownership(backtrace):
            if frame.team is not None and frame.team.name not in excluded_names:
                return frame
        return None

    def owning_team(
        self,
        backtrace: Iterable[str] | None,
        *,
        excluded: Iterable[Team | str] = (),
    ) -> Team | None:
        frame = self.first_owned_frame(backtrace, excluded=excluded)
        return frame.team if frame is not None else None
