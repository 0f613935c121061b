"""Position sync, frame selection and the pause/resume/play-once bookkeeping."""

import dataclasses

import pytest

import playback
from conftest import ScriptedEnv
from playback import PlayMode, select_frame


def auto_state(start=0, end=24, fps=24, **kw):
    return playback.new_state(PlayMode.AUTO, start, end, fps=fps, **kw)


class TestSelectFrame:
    def test_endpoints_exact(self):
        for length in (1, 7, 24, 120):
            assert select_frame(0.0, length) == 0
            assert select_frame(1.0, length) == length

    def test_bounded_and_monotonic(self):
        length = 37
        frames = [select_frame(i / 1000, length) for i in range(1001)]
        assert all(0 <= f <= length for f in frames)
        assert frames == sorted(frames)

    def test_rounds_rather_than_truncates(self):
        assert select_frame(0.49 / 10, 10) == 0
        assert select_frame(0.51 / 10, 10) == 1
        assert select_frame(0.96, 10) == 10

    def test_half_rounds_up(self):
        assert select_frame(0.25, 2) == 1
        assert select_frame(0.125, 4) == 1

    def test_clamps_out_of_range_progress(self):
        assert select_frame(-0.4, 10) == 0
        assert select_frame(3.2, 10) == 10

    def test_zero_length(self):
        assert select_frame(0.7, 0) == 0

    def test_non_finite_progress(self):
        assert select_frame(float("inf"), 10) == 10
        assert select_frame(float("-inf"), 10) == 0
        assert select_frame(float("nan"), 10) == 0


class TestScroll:
    def test_document_basis(self):
        state = playback.new_state("scroll", 0, 10)
        state = playback.sync(state, ScriptedEnv(offset=250, height=1000), now=0)
        assert state.progress == pytest.approx(0.25)

    def test_viewport_basis(self):
        state = playback.new_state("SCROLL", 0, 10, scroll_basis="viewport")
        env = ScriptedEnv(offset=400, height=1000, viewport=200)
        state = playback.sync(state, env, now=0)
        assert state.progress == pytest.approx(0.5)

    def test_reads_live_every_tick(self):
        env = ScriptedEnv(offset=0, height=100)
        state = playback.new_state(PlayMode.SCROLL, 0, 10)
        state, _ = playback.tick(state, env, 0)
        env.offset = 70
        state, changed = playback.tick(state, env, 0)
        assert changed
        assert state.current_frame == 7

    def test_overscroll_clamped_at_selection(self):
        env = ScriptedEnv(offset=1500, height=1000)
        state, _ = playback.tick(playback.new_state(PlayMode.SCROLL, 0, 10), env, 0)
        assert state.progress == pytest.approx(1.5)
        assert state.current_frame == 10

    def test_zero_height(self):
        assert playback.scroll_progress(50, 0) == 0.0


class TestAuto:
    def test_time_base_set_lazily_on_first_sync(self, env):
        state = playback.sync(auto_state(), env, now=42.0)
        assert state.start_time == 42.0
        assert state.progress == 0.0

    def test_loop_wraps(self, env):
        state = playback.sync(auto_state(), env, now=0.0)
        at_500 = playback.sync(state, env, now=0.5).progress
        at_1500 = playback.sync(state, env, now=1.5).progress
        assert at_500 == pytest.approx(0.5)
        assert at_1500 == pytest.approx(at_500)

    def test_progress_follows_fps(self, env):
        state = playback.sync(auto_state(end=48, fps=24), env, now=10.0)
        state, _ = playback.tick(state, env, now=11.0)
        assert state.progress == pytest.approx(0.5)
        assert state.current_frame == 24

    def test_paused_holds_progress(self, env):
        state = playback.sync(auto_state(), env, now=0.0)
        state = playback.sync(state, env, now=0.25)
        frozen = playback.pause(state)
        assert playback.sync(frozen, env, now=0.9).progress == pytest.approx(0.25)

    def test_start_paused_still_anchors_time_base(self, env):
        state = playback.sync(auto_state(paused=True), env, now=5.0)
        assert state.start_time == 5.0
        assert state.progress == 0.0

    def test_zero_length_sequence_stays_at_zero(self, env):
        state = playback.sync(auto_state(start=3, end=3), env, now=0.0)
        state = playback.sync(state, env, now=7.3)
        assert state.progress == 0.0


class TestManual:
    def test_progress_only_changes_via_set_progress(self, env):
        state = playback.new_state(PlayMode.MANUAL, 0, 10)
        state, _ = playback.tick(state, env, 0)
        assert state.current_frame == 0

        env.offset = 900
        state = playback.set_progress(state, 0.3)
        state, changed = playback.tick(state, env, 50)
        assert changed
        assert state.progress == 0.3
        assert state.current_frame == 3

        state, changed = playback.tick(state, env, 99)
        assert not changed
        assert state.progress == 0.3


class TestController:
    def test_pause_is_idempotent(self):
        state = playback.pause(auto_state())
        assert playback.pause(state) is state
        assert state.paused

    def test_resume_when_running_is_noop(self):
        state = auto_state()
        assert playback.resume(state, now=3.0) is state

    def test_resume_continues_from_shown_frame(self, env):
        state = playback.sync(auto_state(), env, now=0.0)
        state, _ = playback.tick(state, env, now=0.5)
        assert state.current_frame == 12

        state = playback.pause(state)
        state, _ = playback.tick(state, env, now=2.2)
        assert state.current_frame == 12

        state = playback.resume(state, now=3.7)
        assert not state.paused
        assert state.start_time == pytest.approx(3.7 - 12 / 24)

        state, changed = playback.tick(state, env, now=3.7)
        assert not changed
        assert state.current_frame == 12
        assert state.progress == pytest.approx(0.5)

    def test_resume_clears_loop_end(self):
        state = dataclasses.replace(auto_state(paused=True), loop_end=True)
        assert not playback.resume(state, now=1.0).loop_end

    def test_new_state_validation(self):
        with pytest.raises(ValueError):
            playback.new_state("sideways", 0, 10)
        with pytest.raises(ValueError):
            playback.new_state("AUTO", 0, 10, fps=0)
        with pytest.raises(ValueError):
            playback.new_state("SCROLL", 0, 10, scroll_basis="page")


class TestSettle:
    def test_first_tick_always_draws(self):
        state = playback.new_state(PlayMode.MANUAL, 0, 10)
        state, changed = playback.settle(state)
        assert changed
        assert (state.previous_frame, state.current_frame) == (0, 0)
        assert not state.first_tick

        state, changed = playback.settle(state)
        assert not changed

    def test_change_sequence(self):
        state = playback.new_state(PlayMode.MANUAL, 0, 10)
        draws = []
        for frame in [0, 0, 1, 1, 2]:
            state = playback.set_progress(state, frame / 10)
            state, changed = playback.settle(state)
            if changed:
                draws.append((state.previous_frame, state.current_frame))
        assert draws == [(0, 0), (0, 1), (1, 2)]

    def test_loop_end_flag_at_end_minus_one(self):
        state = playback.new_state(PlayMode.MANUAL, 0, 10)
        state, _ = playback.settle(playback.set_progress(state, 0.8))
        assert not state.loop_end
        state, _ = playback.settle(playback.set_progress(state, 0.9))
        assert state.loop_end
        # sticks until resume
        state, _ = playback.settle(playback.set_progress(state, 0.1))
        assert state.loop_end


class TestPlayOnce:
    def test_pauses_on_tick_after_reaching_end(self, env):
        state = auto_state(play_once=True)
        state, _ = playback.tick(state, env, now=0.0)

        state, _ = playback.tick(state, env, now=23 / 24)
        assert state.current_frame == 23
        assert state.loop_end
        assert not state.paused

        state, _ = playback.tick(state, env, now=0.99)
        assert state.paused
        held = state.current_frame

        state, changed = playback.tick(state, env, now=1.6)
        assert not changed
        assert state.current_frame == held

    def test_without_play_once_keeps_looping(self, env):
        state = auto_state()
        state, _ = playback.tick(state, env, now=0.0)
        state, _ = playback.tick(state, env, now=23 / 24)
        state, _ = playback.tick(state, env, now=1.25)
        assert not state.paused
        assert state.current_frame == 6
