"""ownerscope package root."""

from loguru import logger

from ownerscope.backtrace import BacktraceAttributor, OwnedFrame
from ownerscope.exceptions import (
    InvalidOwnershipConfigurationError,
    OwnershipError,
    OwnershipValidationError,
)
from ownerscope.mapper import Mapper, MapperRegistry, OwnershipAssociation
from ownerscope.resolver import Resolver
from ownerscope.session import OwnershipSession
from ownerscope.teams import Team, TeamIndex
from ownerscope.validator import ValidationResult, Validator

logger.disable("ownerscope")

__all__ = [
    "__version__",
    "BacktraceAttributor",
    "InvalidOwnershipConfigurationError",
    "Mapper",
    "MapperRegistry",
    "OwnedFrame",
    "OwnershipAssociation",
    "OwnershipError",
    "OwnershipSession",
    "OwnershipValidationError",
    "Resolver",
    "Team",
    "TeamIndex",
    "ValidationResult",
    "Validator",
]

__version__ = "0.1.0"
