"""
Clock helpers shared by the rate limiter and token service.

Services take a ``clock`` callable returning epoch seconds so tests can pin
"now" without patching the ``time`` module.
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], float]

system_clock: Clock = time.time


def utc_day(epoch_seconds: float) -> str:
    """Return the UTC calendar date of *epoch_seconds* as ``YYYY-MM-DD``."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime("%Y-%m-%d")


def format_retry_window(seconds: float) -> str:
    """Render a remaining wait as a short human string.

    Whole hours are rounded up (``"24h"``, ``"1h"``); waits under an hour are
    shown in minutes (``"15m"``), never below ``"1m"``.
    """
    if seconds >= 3600:
        return f"{math.ceil(seconds / 3600)}h"
    return f"{max(1, math.ceil(seconds / 60))}m"
