# =========  preloader.py  =========
"""
Concurrent frame preloading with an all-settled barrier.

Public API
----------
Preloader(frames).start()  → PreloadResult
PreloadResult.wait(timeout)         block until every load settled
PreloadResult.add_done_callback(fn) fn(result) once settled (any thread)
Properties
----------
.settled  → every frame either loaded or failed
.failed   → at least one frame failed
.outcomes → per-frame LoadOutcome, in frame order
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from frame_store import FrameImage

log = logging.getLogger(__name__)


class FrameLoadError(RuntimeError):
    """One or more frames of a sequence could not be decoded."""

    def __init__(self, failures: Sequence["LoadOutcome"]):
        self.failures = list(failures)
        names = ", ".join(f.path for f in self.failures[:3])
        more = f" (+{len(self.failures) - 3} more)" if len(self.failures) > 3 else ""
        super().__init__(f"{len(self.failures)} frame(s) failed to load: {names}{more}")


@dataclass(frozen=True)
class LoadOutcome:
    index: int
    path: str
    ok: bool
    error: Optional[BaseException] = None


# ────────────────────────────────────────────────────────────────────────────
class PreloadResult:
    """Aggregate of N independent loads; settles once all N have reported."""

    def __init__(self, total: int):
        self.total = total
        self._outcomes: Dict[int, LoadOutcome] = {}
        self._lock = threading.Lock()
        self._complete = total == 0      # every outcome reported
        self._done = threading.Event()   # set once callbacks have run
        self._callbacks: List[Callable[["PreloadResult"], None]] = []
        if self._complete:
            self._done.set()

    # ── state ───────────────────────────────────────────────────────────────
    @property
    def settled(self) -> bool:
        with self._lock:
            return self._complete

    @property
    def outcomes(self) -> List[LoadOutcome]:
        with self._lock:
            return [self._outcomes[i] for i in sorted(self._outcomes)]

    @property
    def failures(self) -> List[LoadOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def failed(self) -> bool:
        return self.settled and bool(self.failures)

    @property
    def error(self) -> Optional[FrameLoadError]:
        fails = self.failures
        return FrameLoadError(fails) if self.settled and fails else None

    @property
    def pending(self) -> int:
        with self._lock:
            return self.total - len(self._outcomes)

    # ── joining ─────────────────────────────────────────────────────────────
    def wait(self, timeout: Optional[float] = None) -> bool:
        """True once settled; False if *timeout* elapsed first."""
        return self._done.wait(timeout)

    def add_done_callback(self, fn: Callable[["PreloadResult"], None]) -> None:
        with self._lock:
            if not self._complete:
                self._callbacks.append(fn)
                return
        fn(self)

    # ── producer side ───────────────────────────────────────────────────────
    def _report(self, outcome: LoadOutcome) -> None:
        with self._lock:
            if outcome.index in self._outcomes:
                return
            self._outcomes[outcome.index] = outcome
            if len(self._outcomes) < self.total:
                return
            self._complete = True
            callbacks, self._callbacks = self._callbacks, []

        for fn in callbacks:
            try:
                fn(self)
            except Exception:
                log.exception("preload callback failed")
        self._done.set()


# ────────────────────────────────────────────────────────────────────────────
class Preloader:
    """One daemon thread per frame; no concurrency limit and no timeout."""

    def __init__(self, frames: Sequence[FrameImage]):
        self.frames = list(frames)
        self.result: Optional[PreloadResult] = None

    def start(self) -> PreloadResult:
        if self.result is not None:
            return self.result

        result = PreloadResult(len(self.frames))
        self.result = result
        result.add_done_callback(self._log_summary)

        log.info("preloading %d frame(s)", len(self.frames))
        for frame in self.frames:
            threading.Thread(
                target=self._load_one,
                args=(frame, result),
                name=f"preload-{frame.index}",
                daemon=True,
            ).start()
        return result

    # ── internals ───────────────────────────────────────────────────────────
    @staticmethod
    def _load_one(frame: FrameImage, result: PreloadResult) -> None:
        try:
            frame.load()
        except Exception as exc:
            log.error("frame %d failed to load from %s: %s", frame.index, frame.path, exc)
            result._report(LoadOutcome(frame.index, frame.path, False, exc))
        else:
            result._report(LoadOutcome(frame.index, frame.path, True))

    @staticmethod
    def _log_summary(result: PreloadResult) -> None:
        if result.failures:
            log.error("preload failed: %s", result.error)
        else:
            log.info("preloaded %d frame(s)", result.total)
