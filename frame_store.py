"""
frame_store.py

Owns the ordered list of frame images for one sequence and the mapping
from a frame index to the file that holds it.

File names
----------
    <path><zero-padded index><extension>

The pad width is the digit count of the *last* index, so a 0‥120 sequence
reads frame_000.png … frame_120.png.  Negative indices keep their sign in
front of the padded magnitude and the sign counts toward the width.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

import pygame

log = logging.getLogger(__name__)

Loader = Callable[[str], pygame.Surface]


# ── naming ──────────────────────────────────────────────────────────────────
def add_leading_zeros(n: int, sequence_end: int) -> str:
    width = len(str(sequence_end))
    if n >= 0:
        return str(n).zfill(width)
    return "-" + str(-n).zfill(width - 1)


def frame_filename(path: str, n: int, sequence_end: int,
                   extension: str = ".png") -> str:
    return f"{path}{add_leading_zeros(n, sequence_end)}{extension}"


# ── one frame ───────────────────────────────────────────────────────────────
class FrameImage:
    """A single decoded (or not yet decoded) frame."""

    def __init__(self, index: int, path: str, loader: Optional[Loader] = None):
        self.index = index
        self.path = path
        self.surface: Optional[pygame.Surface] = None
        self.complete = False
        self.error: Optional[BaseException] = None
        self._loader = loader or pygame.image.load

    def load(self) -> pygame.Surface:
        """
        Decode the file.  Sets ``complete`` on success; on failure records
        the exception in ``error`` and re-raises it for the caller.
        """
        try:
            surf = self._loader(self.path)
        except Exception as exc:
            self.error = exc
            raise
        self.surface = surf
        self.complete = True
        return surf

    def __repr__(self) -> str:
        state = "loaded" if self.complete else ("failed" if self.error else "pending")
        return f"<FrameImage {self.index} {self.path!r} {state}>"


# ── the store ───────────────────────────────────────────────────────────────
class FrameStore:
    """Frames ``start``‥``end`` (inclusive), addressed by 0-based offset."""

    def __init__(
        self,
        path: str,
        start: int,
        end: int,
        extension: str = ".png",
        loader: Optional[Loader] = None,
    ) -> None:
        if start > end:
            raise ValueError(f"sequence start {start} is after end {end}")

        self.path = path
        self.start = start
        self.end = end
        self.extension = extension
        self._frames: List[FrameImage] = [
            FrameImage(i - start, frame_filename(path, i, end, extension), loader)
            for i in range(start, end + 1)
        ]

    @property
    def length(self) -> int:
        """Highest valid frame offset (end - start)."""
        return self.end - self.start

    @property
    def frames(self) -> List[FrameImage]:
        return list(self._frames)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self._frames]

    def path_for(self, frame: int) -> str:
        return self._frames[frame].path

    def is_loaded(self, frame: int) -> bool:
        return 0 <= frame < len(self._frames) and self._frames[frame].complete

    def loaded_count(self) -> int:
        return sum(1 for f in self._frames if f.complete)

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, frame: int) -> FrameImage:
        return self._frames[frame]

    def __iter__(self):
        return iter(self._frames)
