from __future__ import annotations

import logging

from loguru import logger

from ownerscope.logging_setup import (
    DEFAULT_LOG_LEVEL,
    LOG_LEVEL_ENV,
    resolve_log_level,
    setup_logging,
)
from tests.helpers import env_scope


def test_resolve_log_level_prefers_argument_over_env() -> None:
    with env_scope({LOG_LEVEL_ENV: "debug"}):
        assert resolve_log_level() == "DEBUG"
        assert resolve_log_level(" info ") == "INFO"


def test_resolve_log_level_defaults_and_rejects_unknown() -> None:
    with env_scope({LOG_LEVEL_ENV: None}):
        assert resolve_log_level() == DEFAULT_LOG_LEVEL
    assert resolve_log_level("chatty") == DEFAULT_LOG_LEVEL


def test_setup_logging_enables_package_records() -> None:
    assert setup_logging("info") == "INFO"
    messages: list[str] = []
    logger.add(lambda message: messages.append(message.record["message"]), level="INFO")
    logger.bind().info("from test")
    logging.getLogger("third.party").warning("intercepted")
    assert "from test" in messages
    assert "intercepted" in messages
