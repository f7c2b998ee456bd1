"""Utility functions shared by the service layer."""

import logging
import math
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def similarity_score(distance: float | None) -> int:
    """Convert a cosine distance into an integer similarity percentage.

    A missing distance counts as 0. Distances outside [0, 1] are not clamped,
    so a distance above 1 gives a negative score. Halves round up.

    Args:
        distance: Cosine distance reported by the store (0 = identical)

    Returns:
        int: round((1 - distance) * 100)
    """
    if distance is None:
        distance = 0.0
    return math.floor((1 - distance) * 100 + 0.5)


def run_non_fatal(description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Run a side effect whose failure must not affect the caller.

    Any exception is logged with its traceback and discarded.

    Args:
        description: Short label used in the log message
        func: The callable to run
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func
    """
    try:
        func(*args, **kwargs)
    except Exception as e:
        logger.warning(f"⚠️ {description} failed: {e}", exc_info=True)
