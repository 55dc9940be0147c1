"""Tests for the fade engine."""

from __future__ import annotations

import pytest

from focusvoid.clock import ManualClock
from focusvoid.fade import (
    DONE_IDLE_MS,
    GLOW_HOLD_MS,
    POST_THRESHOLD_IDLE_MS,
    UI_IDLE_MS,
    DoneButtonFade,
    FadeEngine,
    FadeState,
    GlowPulse,
    opacity_for,
)


class TestOpacity:
    @pytest.mark.parametrize(
        ("words", "expected"),
        [(0, 1.0), (1, 0.95), (10, 0.5), (19, 0.05), (20, 0.0), (25, 0.0)],
    )
    def test_linear_with_floor(self, words: int, expected: float) -> None:
        assert opacity_for(words) == pytest.approx(expected)


class TestFadeState:
    def test_words_fade(self) -> None:
        state = FadeState(ManualClock())
        state.record_words_added(4)
        state.record_words_added(6)
        assert state.activity_counter == 10
        assert state.current_opacity() == pytest.approx(0.5)

    def test_non_positive_ignored(self) -> None:
        clock = ManualClock()
        state = FadeState(clock)
        state.record_words_added(0)
        state.record_words_added(-3)
        assert state.activity_counter == 0
        assert clock.pending_count == 0

    def test_counter_not_clamped(self) -> None:
        state = FadeState(ManualClock())
        state.record_words_added(30)
        assert state.activity_counter == 30
        assert state.current_opacity() == 0.0

    def test_idle_timeout_resets_to_half(self) -> None:
        clock = ManualClock()
        state = FadeState(clock)
        state.record_words_added(18)
        clock.advance(UI_IDLE_MS)
        assert state.activity_counter == 10
        assert state.current_opacity() == pytest.approx(0.5)

    def test_superseded_timer_never_fires(self) -> None:
        clock = ManualClock()
        state = FadeState(clock)
        state.record_words_added(15)
        clock.advance(UI_IDLE_MS - 1)
        state.record_words_added(5)
        clock.advance(1)
        # the first timer would have fired here
        assert state.activity_counter == 20
        assert clock.pending_count == 1
        clock.advance(UI_IDLE_MS)
        assert state.activity_counter == 10

    def test_force_visible_keeps_counter(self) -> None:
        state = FadeState(ManualClock())
        state.record_words_added(20)
        state.force_visible(True)
        assert state.current_opacity() == 1.0
        assert state.activity_counter == 20
        state.force_visible(False)
        assert state.current_opacity() == 0.0

    def test_cancel(self) -> None:
        clock = ManualClock()
        state = FadeState(clock)
        state.record_words_added(12)
        state.cancel()
        clock.advance(UI_IDLE_MS * 2)
        assert state.activity_counter == 12


class TestDoneButtonFade:
    def test_starts_hidden(self) -> None:
        done = DoneButtonFade(ManualClock())
        assert done.activity_counter == 20
        assert done.current_opacity() == 0.0
        assert not done.visible
        assert not done.shown

    def test_idle_makes_visible_at_half(self) -> None:
        clock = ManualClock()
        done = DoneButtonFade(clock)
        done.schedule_idle()
        clock.advance(DONE_IDLE_MS)
        assert done.visible
        assert done.current_opacity() == pytest.approx(0.5)

    def test_hover_shows_without_latching(self) -> None:
        done = DoneButtonFade(ManualClock())
        done.force_visible(True)
        assert done.shown
        done.force_visible(False)
        assert not done.shown


class TestGlowPulse:
    def test_pulse(self) -> None:
        clock = ManualClock()
        glow = GlowPulse(clock)
        glow.trigger()
        assert glow.opacity == 1.0
        clock.advance(GLOW_HOLD_MS - 1)
        assert glow.opacity == 1.0
        clock.advance(1)
        assert glow.opacity == 0.0

    def test_one_shot(self) -> None:
        clock = ManualClock()
        glow = GlowPulse(clock)
        glow.trigger()
        clock.advance(GLOW_HOLD_MS)
        glow.trigger()
        assert glow.opacity == 0.0

    def test_cancel_settles(self) -> None:
        clock = ManualClock()
        glow = GlowPulse(clock)
        glow.trigger()
        glow.cancel()
        assert glow.opacity == 0.0
        assert clock.pending_count == 0


class TestFadeEngine:
    def test_done_button_ignores_words_before_threshold(self) -> None:
        engine = FadeEngine(ManualClock())
        engine.record_words_added(5)
        assert engine.ui.activity_counter == 5
        assert engine.done_button.activity_counter == 20

    def test_pre_threshold_ui_idle_is_slow(self) -> None:
        clock = ManualClock()
        engine = FadeEngine(clock)
        engine.record_words_added(16)
        clock.advance(POST_THRESHOLD_IDLE_MS)
        assert engine.ui.activity_counter == 16
        clock.advance(UI_IDLE_MS - POST_THRESHOLD_IDLE_MS)
        assert engine.ui.activity_counter == 10

    def test_threshold_switches_timings(self) -> None:
        clock = ManualClock()
        engine = FadeEngine(clock)
        engine.on_threshold_reached()
        assert engine.glow.opacity == 1.0
        engine.record_words_added(16)
        assert engine.done_button.activity_counter == 36
        clock.advance(POST_THRESHOLD_IDLE_MS)
        assert engine.ui.activity_counter == 10
        assert engine.done_button.visible
        assert engine.done_button.activity_counter == 10

    def test_threshold_edge_leaves_one_exit_timer(self) -> None:
        clock = ManualClock()
        engine = FadeEngine(clock)
        engine.on_threshold_reached()
        engine.record_words_added(3)
        # ui idle, done idle, glow decay
        assert clock.pending_count == 3

    def test_threshold_alone_schedules_exit(self) -> None:
        clock = ManualClock()
        engine = FadeEngine(clock)
        engine.on_threshold_reached()
        clock.advance(DONE_IDLE_MS)
        assert engine.done_button.visible

    def test_force_visible_applies_to_both(self) -> None:
        engine = FadeEngine(ManualClock())
        engine.record_words_added(20)
        engine.force_visible(True)
        assert engine.ui.current_opacity() == 1.0
        assert engine.done_button.current_opacity() == 1.0

    def test_shutdown_cancels_everything(self) -> None:
        clock = ManualClock()
        engine = FadeEngine(clock)
        engine.on_threshold_reached()
        engine.record_words_added(12)
        engine.shutdown()
        assert clock.pending_count == 0
        clock.advance(UI_IDLE_MS)
        assert engine.ui.activity_counter == 12
        assert not engine.done_button.visible
