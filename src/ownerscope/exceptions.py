"""Exception hierarchy for ownership resolution and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ownerscope.validator import ValidationResult


class OwnershipError(Exception):
    """Base class for every error raised by ownerscope."""


class InvalidOwnershipConfigurationError(OwnershipError, ValueError):
    """A configuration file or ownership rule source could not be used.

    Raised for malformed YAML/TOML shapes, rules naming a team that does not
    exist, and duplicate team names. These are fatal for the resolution run:
    a broken rule source invalidates every answer derived from it.
    """


class OwnershipValidationError(OwnershipError):
    """Aggregated validation failure for a set of tracked files."""

    def __init__(self, result: ValidationResult):
        super().__init__("\n".join(result.errors))
        self.result = result

    @property
    def unowned_files(self) -> list[str]:
        return list(self.result.unowned_files)
