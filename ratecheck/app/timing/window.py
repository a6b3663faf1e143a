"""
Alignment of request emission to the start of a fixed-length rate window.

The gateway counts requests per wall-clock window and does not expose where
a window starts. The best the harness can do is wait for the next boundary
of its own clock, plus a small margin, and start the burst there. Clock skew
and network jitter can still split a burst across two windows, so callers
must treat alignment as best effort.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from shared.errors import ValidationError
from shared.logging import get_logger

from ..domain.models import WindowAlignment

Clock = Callable[[], int]
Sleeper = Callable[[float], Awaitable[None]]

logger = get_logger("ratecheck.window")


def wall_clock_ms() -> int:
    """Current wall-clock time in whole milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def compute_wait_ms(now_ms: int, window_ms: int, margin_ms: int) -> int:
    """Milliseconds to wait so that ``now_ms + wait`` lands ``margin_ms`` past the next boundary.

    >>> compute_wait_ms(1_700_000_000_250, 1000, 30)
    780
    >>> compute_wait_ms(1_700_000_000_000, 1000, 30)
    1030
    """
    if window_ms <= 0:
        raise ValidationError("window length must be positive", details={"window_ms": window_ms})
    if margin_ms < 0:
        raise ValidationError("margin must not be negative", details={"margin_ms": margin_ms})
    return window_ms - (now_ms % window_ms) + margin_ms


async def align_to_window_start(
    window_ms: int,
    margin_ms: int,
    clock: Clock = wall_clock_ms,
    sleep: Sleeper = asyncio.sleep,
) -> WindowAlignment:
    """Suspend until just after the next window boundary and describe the wait."""
    now_ms = clock()
    wait_ms = compute_wait_ms(now_ms, window_ms, margin_ms)
    alignment = WindowAlignment(now_ms=now_ms, window_ms=window_ms, margin_ms=margin_ms, wait_ms=wait_ms)
    logger.debug("Aligning to window start", now_ms=now_ms, wait_ms=wait_ms, window_ms=window_ms)
    await sleep(alignment.wait_seconds)
    return alignment


class WindowAligner:
    """Binds the window length, margin, clock and sleeper used by one scenario."""

    def __init__(
        self,
        window_ms: int = 1000,
        margin_ms: int = 30,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleeper] = None,
    ):
        # Fail at construction rather than halfway through a run
        compute_wait_ms(0, window_ms, margin_ms)
        self.window_ms = window_ms
        self.margin_ms = margin_ms
        self.clock = clock or wall_clock_ms
        self.sleep = sleep or asyncio.sleep

    async def align(self) -> WindowAlignment:
        return await align_to_window_start(self.window_ms, self.margin_ms, self.clock, self.sleep)
