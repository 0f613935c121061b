# =========  timing.py  =========
"""
Wall-clock helpers for time-driven playback.
All values are in *seconds*; frame math lives in playback.py.
"""

import math
import time


def wall_clock() -> float:
    """
    Monotonic seconds, unaffected by system clock changes.
    Default clock for FrameSequence.
    """
    return time.monotonic()


def loop_period(frame_count: int, fps: float) -> float:
    """Seconds needed to traverse *frame_count* frames at *fps*."""
    if fps <= 0:
        return 0.0
    return frame_count / fps


def loop_phase(elapsed: float, period: float) -> float:
    """
    Position inside a repeating period, in [0, period).
    Negative elapsed times (clock set before the time base) wrap forward.
    """
    if period <= 0:
        return 0.0

    p = math.fmod(elapsed, period)
    if p < 0:
        p += period
    return p
