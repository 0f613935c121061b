"""pytest configuration: headless SDL, deterministic clock, in-memory frames."""

import os
import sys
import threading

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pygame
import pytest

from host import PygameHost


class ManualClock:
    """Stands in for timing.wall_clock; advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> float:
        self.now += dt
        return self.now


class ScriptedEnv:
    """Environment reader with fixed scroll numbers."""

    def __init__(self, offset=0.0, height=1000.0, viewport=0.0):
        self.offset = offset
        self.height = height
        self.viewport = viewport

    def scroll_offset(self):
        return self.offset

    def scrollable_height(self):
        return self.height

    def viewport_height(self):
        return self.viewport


class SolidLoader:
    """
    Loader that builds a small solid-colour surface per path instead of
    touching the disk.  Paths listed in *fail* raise; paths in *block* wait
    on ``release`` (which tests may never set).
    """

    def __init__(self, size=(8, 6), fail=(), block=()):
        self.size = size
        self.fail = set(fail)
        self.block = set(block)
        self.release = threading.Event()
        self.requested = []
        self._lock = threading.Lock()

    def __call__(self, path):
        with self._lock:
            self.requested.append(path)
        if path in self.block:
            self.release.wait()
        if path in self.fail:
            raise FileNotFoundError(path)
        surf = pygame.Surface(self.size)
        surf.fill((len(path) % 256, 0, 0))
        return surf


@pytest.fixture(scope="session", autouse=True)
def _pygame():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def clock():
    return ManualClock(100.0)


@pytest.fixture
def env():
    return ScriptedEnv()


@pytest.fixture
def canvas():
    return pygame.Surface((40, 30))


@pytest.fixture
def host(canvas):
    return PygameHost(viewport_height=30, scrollable_height=330,
                      surfaces={"canvas": canvas})


@pytest.fixture
def loader():
    return SolidLoader()
