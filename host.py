#!/usr/bin/env python3
"""
host.py – the pygame side of playback

Gives FrameSequence the three things a browser page would:

• a scroll position over a virtual document (moved by wheel / keys),
• a once-per-refresh callback scheduler that needs re-registering
  every frame, drained by the main loop,
• named drawing surfaces.

schedule_next_frame() is thread-safe so worker threads (the preloader)
can hand work back to the main loop.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Callable, Dict, Optional, Set

import pygame

log = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class PygameHost:
    def __init__(self, viewport_height: int, scrollable_height: int,
                 surfaces: Optional[Dict[str, pygame.Surface]] = None):
        self._viewport_h = max(0, int(viewport_height))
        self._scroll_h   = max(self._viewport_h, int(scrollable_height))
        self._offset     = 0.0

        self._surfaces: Dict[str, pygame.Surface] = dict(surfaces or {})

        self._fifo: "queue.Queue[tuple[int, FrameCallback]]" = queue.Queue()
        self._ids = itertools.count(1)
        self._cancelled: Set[int] = set()
        self._lock = threading.Lock()

    # ── environment reads ───────────────────────────────────────────────
    def scroll_offset(self) -> float:
        return self._offset

    def scrollable_height(self) -> float:
        return float(self._scroll_h)

    def viewport_height(self) -> float:
        return float(self._viewport_h)

    # ── scrolling ───────────────────────────────────────────────────────
    @property
    def max_offset(self) -> float:
        return float(max(0, self._scroll_h - self._viewport_h))

    def scroll_to(self, y: float) -> float:
        self._offset = min(self.max_offset, max(0.0, float(y)))
        return self._offset

    def scroll_by(self, dy: float) -> float:
        return self.scroll_to(self._offset + dy)

    def resize(self, viewport_height: int, scrollable_height: Optional[int] = None) -> None:
        self._viewport_h = max(0, int(viewport_height))
        if scrollable_height is not None:
            self._scroll_h = int(scrollable_height)
        self._scroll_h = max(self._viewport_h, self._scroll_h)
        self.scroll_to(self._offset)

    # ── surfaces ────────────────────────────────────────────────────────
    def register_surface(self, surface_id: str, surface: pygame.Surface) -> None:
        self._surfaces[surface_id] = surface

    def get_surface(self, surface_id: str) -> Optional[pygame.Surface]:
        return self._surfaces.get(surface_id)

    # ── per-refresh scheduler ───────────────────────────────────────────
    def schedule_next_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._fifo.put((handle, callback))
        return handle

    def cancel_frame(self, handle: int) -> None:
        with self._lock:
            self._cancelled.add(handle)

    def pending_callbacks(self) -> int:
        return self._fifo.qsize()

    def run_frame_callbacks(self) -> int:
        """
        Run the callbacks registered before this call.  Anything they
        schedule waits for the next refresh.  Returns how many ran.
        """
        ran = 0
        for _ in range(self._fifo.qsize()):
            try:
                handle, cb = self._fifo.get_nowait()
            except queue.Empty:
                break
            with self._lock:
                if handle in self._cancelled:
                    self._cancelled.discard(handle)
                    continue
            try:
                cb()
            except Exception:
                log.exception("frame callback failed")
            ran += 1
        return ran
