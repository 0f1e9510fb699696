"""Helpers for concurrent fan-out where one failure must not stop its siblings."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def settle(aw: Awaitable[T], description: str) -> T | Exception:
    """Await and return the result, or log and return the exception instead of raising."""
    try:
        return await aw
    except Exception as e:
        logger.warning("%s failed: %s", description, e)
        return e


def failed(result: object) -> bool:
    """True when a settle() result is an exception."""
    return isinstance(result, Exception)
