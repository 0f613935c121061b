#!/usr/bin/env python3
"""
app.py – pygame shell around one FrameSequence

The sequence paints an offscreen canvas; every refresh the canvas is
letter-boxed onto the window and the overlay drawn on top.  Input is
dispatched by events.py; the host's frame callbacks run once per loop.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

import pygame

import config
from events    import EventManager
from host      import PygameHost
from overlays  import draw_overlay
from renderer  import present
from sequence  import FrameSequence, SequenceOptions

log = logging.getLogger(__name__)

CANVAS_ID = "canvas"


def options_from_config(**overrides) -> SequenceOptions:
    opts = SequenceOptions(
        surface_id=CANVAS_ID,
        sequence_path=config.SEQUENCE_PATH,
        sequence_start=config.SEQUENCE_START,
        sequence_end=config.SEQUENCE_END,
        file_extension=config.FILE_EXTENSION,
        mode=config.PLAY_MODE,
        fps=config.SEQUENCE_FPS,
        start_paused=config.START_PAUSED,
        play_once=config.PLAY_ONCE,
        scroll_basis=config.SCROLL_BASIS,
        fit=config.FRAME_FIT,
    )
    for key, value in overrides.items():
        setattr(opts, key, value)
    return opts


# ── main application ───────────────────────────────────────────────────────
class SequencePlayer:
    def __init__(self, options: Optional[SequenceOptions] = None):
        # window ----------------------------------------------------------
        pygame.init()
        self.screen = self._set_mode()
        self.clock = pygame.time.Clock()
        pygame.display.set_caption("seqplay")

        # canvas + host ---------------------------------------------------
        self.canvas = pygame.Surface(self.screen.get_size())
        self.host = PygameHost(
            viewport_height=self.screen.get_height(),
            scrollable_height=config.SCROLLABLE_HEIGHT,
            surfaces={CANVAS_ID: self.canvas},
        )

        # overlay ---------------------------------------------------------
        self.overlay_expire = time.time() + config.OVERLAY_DURATION
        self.force_overlay  = False
        self.running        = False

        options = options or options_from_config()
        options.on_all_loaded = self._chain(options.on_all_loaded, self._on_loaded)
        self.sequence = FrameSequence(options, self.host)

    @staticmethod
    def _set_mode() -> pygame.Surface:
        return pygame.display.set_mode(
            (0, 0) if config.FULLSCREEN else config.WINDOWED_SIZE,
            pygame.FULLSCREEN if config.FULLSCREEN else 0,
        )

    @staticmethod
    def _chain(first, second):
        if first is None:
            return second

        def both():
            first()
            second()
        return both

    def _on_loaded(self) -> None:
        log.info("all %d frames loaded", len(self.sequence.store))
        self.overlay_expire = time.time() + config.OVERLAY_DURATION

    # ── actions ------------------------------------------------------------
    def dispatch(self, act: dict) -> None:
        t   = act["type"]
        seq = self.sequence
        if t == "quit":
            self.running = False
        elif t == "toggle_pause":
            seq.toggle_pause()
        elif t == "pause":
            seq.pause()
        elif t == "resume":
            seq.resume()
        elif t == "scroll":
            self.host.scroll_by(act.get("delta", 0.0))
        elif t == "set_progress":
            seq.set_progress(act["value"])
        elif t == "nudge_progress":
            seq.set_progress(min(1.0, max(0.0, seq.progress + act.get("delta", 0.0))))
        elif t == "toggle_overlay":
            self.force_overlay ^= True
        elif t == "toggle_fullscreen":
            config.FULLSCREEN ^= True
            self.screen = self._set_mode()
            self.host.resize(self.screen.get_height())
        else:
            log.warning("ignoring unknown action %r", t)
            return
        self.overlay_expire = time.time() + config.OVERLAY_DURATION

    # ── main loop ---------------------------------------------------------
    def step(self) -> None:
        for e in pygame.event.get():
            EventManager.handle(e, self.host.viewport_height())

        # drain external queue (non-blocking)
        while (act := EventManager.poll()):
            self.dispatch(act)

        self.host.run_frame_callbacks()

        present(self.screen, self.canvas)
        if self.force_overlay or time.time() < self.overlay_expire:
            draw_overlay(self.screen, self.sequence, self.host.scroll_offset())

        pygame.display.flip()

    def run(self):
        self.running = True
        while self.running:
            self.step()
            self.clock.tick(config.FPS)

        self.sequence.stop()
        pygame.quit()


if __name__ == "__main__":
    SequencePlayer().run()
