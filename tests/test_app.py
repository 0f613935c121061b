"""SequencePlayer end to end on the dummy SDL driver."""

import pytest

import config
from app import CANVAS_ID, SequencePlayer, options_from_config
from events import EventManager
from make_frames import make_frames
from playback import PlayMode


@pytest.fixture
def frames(tmp_path):
    prefix = str(tmp_path / "frame_")
    make_frames(prefix, 0, 4, size=(32, 18), seed=0)
    return prefix


@pytest.fixture
def player(frames, monkeypatch):
    monkeypatch.setattr(config, "WINDOWED_SIZE", (64, 36))
    monkeypatch.setattr(config, "FULLSCREEN", False)
    EventManager.clear()
    loaded = []
    opts = options_from_config(sequence_path=frames, sequence_start=0,
                               sequence_end=4, mode="MANUAL")
    opts.on_all_loaded = lambda: loaded.append(True)
    p = SequencePlayer(opts)
    p.loaded_calls = loaded
    assert p.sequence.wait_until_loaded(timeout=5)
    p.step()
    yield p
    p.sequence.stop()
    EventManager.clear()


def test_options_from_config_defaults():
    opts = options_from_config()
    assert opts.surface_id == CANVAS_ID
    assert opts.sequence_path == config.SEQUENCE_PATH
    assert opts.sequence_end == config.SEQUENCE_END
    assert opts.play_mode is PlayMode.parse(config.PLAY_MODE)


def test_starts_after_preload(player):
    assert player.sequence.running
    assert player.loaded_calls == [True]
    assert player.canvas.get_size() == (64, 36)


def test_actions_drive_the_sequence(player):
    EventManager.post({"type": "set_progress", "value": 0.5})
    player.step()
    assert player.sequence.current_frame == 2

    EventManager.post({"type": "nudge_progress", "delta": 0.25})
    player.step()
    assert player.sequence.current_frame == 3

    EventManager.post({"type": "nudge_progress", "delta": 5})
    player.step()
    assert player.sequence.progress == 1.0


def test_pause_toggle_and_quit(player):
    EventManager.post({"type": "toggle_pause"})
    player.running = True
    player.step()
    assert player.sequence.paused

    EventManager.post({"type": "resume"})
    EventManager.post({"type": "quit"})
    player.step()
    assert not player.sequence.paused
    assert not player.running


def test_scroll_action_moves_host(player):
    EventManager.post({"type": "scroll", "delta": 200})
    player.step()
    assert player.host.scroll_offset() == 200


def test_unknown_action_is_ignored(player, caplog):
    player.dispatch({"type": "warp"})
    assert "unknown action" in caplog.text


def test_overlay_lines_describe_playback(player):
    from overlays import overlay_lines

    lines = overlay_lines(player.sequence)
    assert any("MANUAL" in ln for ln in lines)
    assert any(ln.startswith("Loaded") and "5 / 5" in ln for ln in lines)
    assert any(ln.startswith("Frame") for ln in lines)


def test_web_state_snapshot(player):
    from web_remote import state_dict

    st = state_dict(player)
    assert st["mode"] == "MANUAL"
    assert st["total"] == 5 and st["loaded"] == 5
    assert st["running"] and not st["preload_failed"]
