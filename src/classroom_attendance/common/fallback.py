from __future__ import annotations

import logging
import warnings

from ..core.exceptions import LocalFallbackUsed

logger = logging.getLogger("classroom_attendance.fallback")


def signal_local_fallback(message: str) -> None:
    """Log and emit ``LocalFallbackUsed``: the data only reached the local cache."""

    logger.warning(message)
    warnings.warn(message, LocalFallbackUsed, stacklevel=3)
