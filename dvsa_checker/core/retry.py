"""Retry strategies for network operations."""

import asyncio
import logging as stdlib_logging
from typing import Tuple, Type, Union

import aiohttp
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

# Stdlib logger needed for tenacity's before_sleep_log
_stdlib_logger = stdlib_logging.getLogger(__name__)


def _make_retry(
    attempts: int,
    wait_strategy: object,
    exception_types: Union[Type[BaseException], Tuple[Type[BaseException], ...]],
) -> object:
    """
    Factory for creating retry decorators with consistent configuration.

    Args:
        attempts: Maximum number of attempts
        wait_strategy: Tenacity wait strategy
        exception_types: Exception type(s) to retry on

    Returns:
        Configured retry decorator
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_strategy,
        retry=retry_if_exception_type(exception_types),
        before_sleep=before_sleep_log(_stdlib_logger, stdlib_logging.WARNING),
        reraise=True,
    )


def get_remote_config_retry():
    """Retry decorator for downloading the remote site config."""
    return _make_retry(
        attempts=3,
        wait_strategy=wait_exponential(multiplier=1, min=1, max=10) + wait_random(0, 1),
        exception_types=(aiohttp.ClientError, asyncio.TimeoutError),
    )


def get_telegram_retry():
    """Retry decorator for Telegram API calls (network errors only)."""
    from telegram.error import NetworkError

    return _make_retry(
        attempts=3,
        wait_strategy=wait_exponential(multiplier=1, min=1, max=10),
        exception_types=NetworkError,
    )
