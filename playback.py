"""
playback.py

Playback state and the pure transitions that drive it.

A PlaybackState is never mutated: every function here takes a state (plus
the environment / the current time where needed) and returns a new one.
FrameSequence owns the only live reference and swaps it on each tick.

Environment
-----------
Any object with ``scroll_offset()``, ``scrollable_height()`` and
``viewport_height()`` returning numbers.  host.PygameHost is the real one;
the tests use a scripted fake.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from timing import loop_period, loop_phase


class PlayMode(str, Enum):
    SCROLL = "SCROLL"   # progress bound to scroll position
    AUTO   = "AUTO"     # plays like a regular video, looping
    MANUAL = "MANUAL"   # owner drives progress through set_progress()

    @classmethod
    def parse(cls, value) -> "PlayMode":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"unknown play mode {value!r}") from None


SCROLL_BASES = ("document", "viewport")


@dataclass(frozen=True)
class PlaybackState:
    mode: PlayMode
    sequence_length: int
    sequence_end: int
    fps: float = 24
    play_once: bool = False
    scroll_basis: str = "document"

    progress: float = 0.0
    paused: bool = False
    start_time: Optional[float] = None   # AUTO time base, set on first tick
    loop_end: bool = False               # reached the last frame once
    previous_frame: int = 0
    current_frame: int = 0
    first_tick: bool = True


def new_state(mode, sequence_start: int, sequence_end: int, *, fps: float = 24,
              paused: bool = False, play_once: bool = False,
              scroll_basis: str = "document") -> PlaybackState:
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    if scroll_basis not in SCROLL_BASES:
        raise ValueError(f"scroll_basis must be one of {SCROLL_BASES}, got {scroll_basis!r}")
    return PlaybackState(
        mode=PlayMode.parse(mode),
        sequence_length=sequence_end - sequence_start,
        sequence_end=sequence_end,
        fps=fps,
        play_once=play_once,
        scroll_basis=scroll_basis,
        paused=paused,
    )


# ── frame selection ─────────────────────────────────────────────────────────
def select_frame(progress: float, sequence_length: int) -> int:
    """Round *progress* onto 0‥sequence_length, clamping out-of-range input."""
    if sequence_length <= 0:
        return 0
    if math.isnan(progress):
        return 0
    progress = min(1.0, max(0.0, progress))
    # half-up, ties move forward
    return min(sequence_length, math.floor(progress * sequence_length + 0.5))


# ── position sources ────────────────────────────────────────────────────────
def scroll_progress(offset: float, height: float) -> float:
    if height <= 0:
        return 0.0
    return offset / height


def auto_progress(now: float, start_time: float, sequence_length: int,
                  fps: float) -> float:
    period = loop_period(sequence_length, fps)
    if period <= 0:
        return 0.0
    return loop_phase(now - start_time, period) / period


def _read_scroll(state: PlaybackState, env) -> float:
    height = env.scrollable_height()
    if state.scroll_basis == "viewport":
        height -= env.viewport_height()
    return scroll_progress(env.scroll_offset(), height)


def sync(state: PlaybackState, env, now: float) -> PlaybackState:
    """Refresh ``progress`` from the signal that drives the active mode."""
    if state.mode is PlayMode.MANUAL:
        return state

    if state.mode is PlayMode.AUTO:
        if state.start_time is None:
            state = dataclasses.replace(state, start_time=now)
        if state.paused:
            return state
        return dataclasses.replace(
            state,
            progress=auto_progress(now, state.start_time,
                                   state.sequence_length, state.fps),
        )

    return dataclasses.replace(state, progress=_read_scroll(state, env))


# ── tick ────────────────────────────────────────────────────────────────────
def advance(state: PlaybackState, env, now: float) -> PlaybackState:
    """Sync progress, then honour play-once once the loop end was seen."""
    state = sync(state, env, now)
    if state.play_once and state.loop_end:
        state = pause(state)
    return state


def settle(state: PlaybackState) -> Tuple[PlaybackState, bool]:
    """
    Turn the synced progress into a frame.  Returns the new state and
    whether the frame must be (re)drawn.
    """
    previous = state.current_frame
    current = select_frame(state.progress, state.sequence_length)
    changed = current != previous or state.first_tick

    # compares against the absolute end index
    loop_end = state.loop_end or current == state.sequence_end - 1

    return dataclasses.replace(
        state,
        previous_frame=previous,
        current_frame=current,
        loop_end=loop_end,
        first_tick=False,
    ), changed


def tick(state: PlaybackState, env, now: float) -> Tuple[PlaybackState, bool]:
    return settle(advance(state, env, now))


# ── controller ──────────────────────────────────────────────────────────────
def pause(state: PlaybackState) -> PlaybackState:
    if state.paused:
        return state
    return dataclasses.replace(state, paused=True)


def resume(state: PlaybackState, now: float) -> PlaybackState:
    """
    Unpause, moving the time base so elapsed time lands on the frame
    that is currently shown.
    """
    if not state.paused:
        return state
    return dataclasses.replace(
        state,
        start_time=now - state.current_frame / state.fps,
        paused=False,
        loop_end=False,
    )


def set_progress(state: PlaybackState, value: float) -> PlaybackState:
    return dataclasses.replace(state, progress=float(value))
