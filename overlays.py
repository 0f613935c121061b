"""
overlays.py

Pygame overlay renderer for the sequence player.
"""

from __future__ import annotations

import os
import pygame

import config
from playback import PlayMode

# ── colours ────────────────────────────────────────────────────────────────
WHITE = (255, 255, 255)
GREEN = (0, 255, 0)
YEL   = (200, 200, 50)
BG    = (0, 0, 0, 180)

pygame.font.init()


# ── helpers ────────────────────────────────────────────────────────────────
def _compute_font_sizes(h: int) -> tuple[int, int, int]:
    return max(12, h // 60), max(16, h // 45), max(24, h // 15)


def _fmt_hmsf(sec: float, fps: float) -> str:
    fps    = max(1, int(round(fps)))
    tf     = int(max(0.0, sec) * fps + 1e-4)
    frame  = tf % fps
    s_int  = tf // fps
    m, s   = divmod(s_int, 60)
    h, m   = divmod(m, 60)
    return f"{h:02d}:{m:02d}:{s:02d}:{frame:02d}"


def _badge(font: pygame.font.Font, text: str, colour, pad: int) -> pygame.Surface:
    txt = font.render(text, True, colour)
    bg  = pygame.Surface((txt.get_width() + pad * 2, txt.get_height() + pad),
                         pygame.SRCALPHA)
    bg.fill(BG)
    bg.blit(txt, (pad, pad // 2))
    return bg


def overlay_lines(seq, scroll_offset: float = 0.0) -> list[str]:
    """Text of the info panel; shared with the web remote."""
    store = seq.store
    lines = [
        f"Sequence  {os.path.basename(store.path) or store.path}"
        f"{store.start}..{store.end}{store.extension}",
        f"Mode      {seq.mode.value}{'  (paused)' if seq.paused else ''}",
        f"Progress  {seq.progress:6.3f}",
        f"Frame     {seq.current_frame} / {seq.sequence_length}",
        f"Loaded    {store.loaded_count()} / {len(store)}",
    ]
    if seq.mode is PlayMode.AUTO:
        lines.append(f"Time      {_fmt_hmsf(seq.current_frame / seq.options.fps, seq.options.fps)}")
    if seq.mode is PlayMode.SCROLL:
        lines.append(f"Scroll    {scroll_offset:.0f}px")
    if seq.preload.failed:
        lines.append(f"Preload failed: {len(seq.preload.failures)} frame(s)")
    elif not seq.preload.settled:
        lines.append(f"Preloading… {seq.preload.pending} left")
    return lines


# ── main entry point ───────────────────────────────────────────────────────
def draw_overlay(surface: pygame.Surface, seq, scroll_offset: float = 0.0) -> None:
    sw, sh = surface.get_width(), surface.get_height()
    tiny_pt, small_pt, large_pt = _compute_font_sizes(sh)
    FT = pygame.font.SysFont("monospace", tiny_pt)
    FL = pygame.font.SysFont("monospace", large_pt)

    # ── frame badge (always) ─────────────────────────────────────────────
    width = len(str(seq.sequence_length))
    badge = _badge(FL, f"{seq.current_frame:0{width}d}", GREEN if not seq.paused else YEL,
                   large_pt // 6)
    surface.blit(badge, (sw - badge.get_width() - 10, 10))

    if not config.SHOW_OVERLAYS:
        return

    # ── info panel ──────────────────────────────────────────────────────
    lines  = overlay_lines(seq, scroll_offset)
    widest = max(FT.size(t)[0] for t in lines)
    pbg = pygame.Surface(
        (widest + 20, len(lines) * (FT.get_linesize() + 2) + 10),
        pygame.SRCALPHA,
    )
    pbg.fill(BG)
    y = 5
    for t in lines:
        pbg.blit(FT.render(t, True, WHITE), (10, y))
        y += FT.get_linesize() + 2
    surface.blit(pbg, (10, 10))
