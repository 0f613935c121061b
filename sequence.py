"""
sequence.py – numbered still images played back as an animation

FrameSequence loads every frame of a sequence, then redraws a drawing
surface whenever the frame picked for the current progress changes.
What drives progress is fixed per instance:

    SCROLL  scroll position of the host's (virtual) document
    AUTO    elapsed time at ``fps``, looping
    MANUAL  whatever the owner passes to set_progress()

Usage
-----
    host = PygameHost(viewport_height=540, scrollable_height=6000,
                      surfaces={"canvas": canvas})
    seq  = FrameSequence(SequenceOptions(
        surface_id="canvas", sequence_path="frames/frame_",
        sequence_start=0, sequence_end=120, mode="AUTO"), host)
    # main loop: host.run_frame_callbacks() once per display refresh
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping, Optional

import playback
from frame_store import FrameStore, Loader
from playback import PlayMode, PlaybackState
from preloader import Preloader, PreloadResult
from renderer import FITS, draw_frame
from timing import wall_clock

log = logging.getLogger(__name__)

FrameChange = Callable[[int, int], None]

# camelCase option names accepted by SequenceOptions.from_mapping()
_ALIASES = {
    "surfaceId": "surface_id",
    "canvas": "surface_id",
    "sequencePath": "sequence_path",
    "sequenceStart": "sequence_start",
    "sequenceEnd": "sequence_end",
    "fileExtension": "file_extension",
    "fileType": "file_extension",
    "onAllLoaded": "on_all_loaded",
    "loadCallback": "on_all_loaded",
    "onFrameChange": "on_frame_change",
    "onDraw": "on_frame_change",
    "startPaused": "start_paused",
    "isPaused": "start_paused",
    "playOnce": "play_once",
    "autoPlay": "auto_play",
    "scrollBasis": "scroll_basis",
}


@dataclass
class SequenceOptions:
    surface_id: str
    sequence_path: str
    sequence_start: int
    sequence_end: int
    file_extension: str = ".png"
    on_all_loaded: Optional[Callable[[], None]] = None
    on_frame_change: Optional[FrameChange] = None
    mode: Any = PlayMode.SCROLL
    fps: float = 24
    start_paused: bool = False
    play_once: bool = False
    auto_play: Optional[bool] = None
    scroll_basis: str = "document"
    fit: str = "stretch"

    @classmethod
    def from_mapping(cls, opts: Mapping[str, Any]) -> "SequenceOptions":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in opts.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"unknown sequence option {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @property
    def play_mode(self) -> PlayMode:
        if self.auto_play is not None:
            return PlayMode.AUTO if self.auto_play else PlayMode.SCROLL
        return PlayMode.parse(self.mode)


# ────────────────────────────────────────────────────────────────────────────
class FrameSequence:
    def __init__(self, options: SequenceOptions, host,
                 loader: Optional[Loader] = None,
                 clock: Callable[[], float] = wall_clock):
        if options.fit not in FITS:
            raise ValueError(f"fit must be one of {FITS}, got {options.fit!r}")

        self.options = options
        self.host = host
        self._clock = clock
        self._on_all_loaded = options.on_all_loaded or (lambda: None)
        self._on_frame_change = (options.on_frame_change
                                 if callable(options.on_frame_change) else None)

        self.state: PlaybackState = playback.new_state(
            options.play_mode,
            options.sequence_start,
            options.sequence_end,
            fps=options.fps,
            paused=options.start_paused,
            play_once=options.play_once,
            scroll_basis=options.scroll_basis,
        )

        self.surface = host.get_surface(options.surface_id)
        if self.surface is None:
            log.error("drawing surface %r not found; sequence will not draw",
                      options.surface_id)

        self.store = FrameStore(options.sequence_path, options.sequence_start,
                                options.sequence_end, options.file_extension,
                                loader)

        self._handle: Optional[int] = None
        self._running = False
        self._stopped = False

        self.preload: PreloadResult = Preloader(self.store.frames).start()
        self.preload.add_done_callback(self._on_settled)

    # ── read-only view ──────────────────────────────────────────────────
    @property
    def mode(self) -> PlayMode:
        return self.state.mode

    @property
    def progress(self) -> float:
        return self.state.progress

    @property
    def current_frame(self) -> int:
        return self.state.current_frame

    @property
    def previous_frame(self) -> int:
        return self.state.previous_frame

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def running(self) -> bool:
        return self._running

    @property
    def loaded(self) -> bool:
        return self.preload.settled and not self.preload.failed

    @property
    def sequence_length(self) -> int:
        return self.state.sequence_length

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until the preload settled.  True only if every frame loaded."""
        return self.preload.wait(timeout) and not self.preload.failed

    # ── controls ────────────────────────────────────────────────────────
    def pause(self) -> None:
        self.state = playback.pause(self.state)

    def resume(self) -> None:
        self.state = playback.resume(self.state, self._clock())

    play = resume

    def toggle_pause(self) -> None:
        if self.paused:
            self.resume()
        else:
            self.pause()

    def set_progress(self, value: float) -> None:
        if self.mode is not PlayMode.MANUAL:
            log.debug("set_progress(%s) in %s mode is overwritten next tick",
                      value, self.mode.value)
        self.state = playback.set_progress(self.state, value)

    def stop(self) -> None:
        """Drop the scheduler registration; the loop does not restart."""
        self._stopped = True
        self._running = False
        if self._handle is not None:
            self.host.cancel_frame(self._handle)
            self._handle = None
        log.info("sequence %s stopped at frame %d",
                 self.options.sequence_path, self.current_frame)

    # ── preload → first render ──────────────────────────────────────────
    def _on_settled(self, result: PreloadResult) -> None:
        # may run on a loader thread; continue on the host's loop
        self.host.schedule_next_frame(lambda: self._start(result))

    def _start(self, result: PreloadResult) -> None:
        if result.failed:
            log.error("not starting %s: %s", self.options.sequence_path, result.error)
            return
        if self._stopped:
            return
        self._running = True
        log.info("starting %s in %s mode (%d frames)", self.options.sequence_path,
                 self.mode.value, len(self.store))
        self.render_frame()
        self._on_all_loaded()

    # ── render loop ─────────────────────────────────────────────────────
    def render_frame(self) -> None:
        if self._stopped:
            return

        self.state = playback.advance(self.state, self.host, self._clock())
        self._handle = self.host.schedule_next_frame(self.render_frame)

        self.state, changed = playback.settle(self.state)
        if changed:
            self.draw_image(self.state.current_frame)
            self._notify(self.state.previous_frame, self.state.current_frame)

    def draw_image(self, frame: int) -> None:
        if self.surface is None or not 0 <= frame < len(self.store):
            return
        image = self.store[frame]
        if not image.complete:
            log.warning("frame %d is not loaded yet; keeping previous contents", frame)
            return
        draw_frame(self.surface, image.surface, self.options.fit)

    def _notify(self, previous: int, current: int) -> None:
        if self._on_frame_change is None:
            return
        try:
            self._on_frame_change(previous, current)
        except Exception:
            log.exception("frame change callback failed (%d → %d)", previous, current)
