#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so *any* external source can inject
  the same actions (web remote, tests, scripts).
"""

from __future__ import annotations
import queue
from pygame.locals import *

import config

Action = dict      # alias for readability


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe

    # ── SDL / keyboard path ────────────────────────────────────────────
    @classmethod
    def handle(cls, event, page_height: float = 0.0) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls._translate_pygame(event, page_height)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type":"set_progress","value":0.5})
        """
        cls._fifo.put(action)

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def clear(cls) -> None:
        while cls.poll() is not None:
            pass

    # ── internal translator ───────────────────────────────────────────
    @staticmethod
    def _translate_pygame(event, page_height: float) -> Action | None:
        if event.type == QUIT:
            return {"type": "quit"}

        if event.type == MOUSEWHEEL:
            # wheel up (y > 0) scrolls toward the top
            return {"type": "scroll", "delta": -event.y * config.SCROLL_STEP}

        if event.type == KEYDOWN:
            if event.key in (K_ESCAPE, K_q):
                return {"type": "quit"}
            if event.key == K_SPACE:
                return {"type": "toggle_pause"}
            if event.key == K_i:
                return {"type": "toggle_overlay"}
            if event.key == K_f:
                return {"type": "toggle_fullscreen"}
            if event.key in (K_UP, K_DOWN):
                step = config.SCROLL_STEP
                return {"type": "scroll", "delta": -step if event.key == K_UP else step}
            if event.key in (K_PAGEUP, K_PAGEDOWN):
                page = page_height or config.SCROLL_STEP
                return {"type": "scroll", "delta": -page if event.key == K_PAGEUP else page}
            if event.key in (K_LEFT, K_RIGHT):
                step = config.PROGRESS_STEP
                return {"type": "nudge_progress",
                        "delta": -step if event.key == K_LEFT else step}
            if event.key == K_HOME:
                return {"type": "set_progress", "value": 0.0}
            if event.key == K_END:
                return {"type": "set_progress", "value": 1.0}

        return None
