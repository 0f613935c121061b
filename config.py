# config.py
"""
Configuration settings for the image-sequence player.
"""

# ── Basic Application Settings ──────────────────────────────────────────────

# Display refresh cap for the main loop (one scheduler tick per refresh)
FPS = 60

SHOW_OVERLAYS = True

# Display settings
FULLSCREEN = False
WINDOWED_SIZE = (960, 540)

# ── Sequence ───────────────────────────────────────────────────────────────

# Path prefix for frame assets: SEQUENCE_PATH + zero-padded index + extension
SEQUENCE_PATH = "frames/frame_"

# Inclusive frame index bounds
SEQUENCE_START = 0
SEQUENCE_END   = 120

FILE_EXTENSION = ".png"

# "SCROLL" | "AUTO" | "MANUAL"
PLAY_MODE = "SCROLL"

# Playback rate for AUTO mode (frames per second of the sequence itself)
SEQUENCE_FPS = 24

START_PAUSED = False
PLAY_ONCE    = False

# "stretch" fills the canvas, "contain" letter-/pillar-boxes
FRAME_FIT = "stretch"

# ── Virtual scroll (SCROLL mode) ───────────────────────────────────────────

# Height of the pretend document the wheel scrolls through, in pixels
SCROLLABLE_HEIGHT = 6000

# Pixels moved per wheel notch / arrow key; page keys move one viewport
SCROLL_STEP = 120

# "document" → offset / height, "viewport" → offset / (height - viewport)
SCROLL_BASIS = "viewport"

# ── Manual progress ────────────────────────────────────────────────────────

PROGRESS_STEP = 0.01

# ── Overlay durations ──────────────────────────────────────────────────────

OVERLAY_DURATION = 4.0   # seconds to show overlay after a control action

# ── Web remote ─────────────────────────────────────────────────────────────

WEB_REMOTE = True
WEB_PORT   = 8080
DIAG_REFRESH_INTERVAL = 1.0

# ── Logging ────────────────────────────────────────────────────────────────

LOG_FILE  = "runtime.log"
LOG_LEVEL = "INFO"

# ── Demo frame generator defaults ──────────────────────────────────────────

GEN_SIZE         = (640, 360)
GEN_GAUSS_SIGMA  = 24.0
GEN_SCANLINE_INTENSITY = 0.85
