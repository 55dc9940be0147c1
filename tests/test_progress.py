"""Tests for the progress tracker."""

from __future__ import annotations

from focusvoid.models import Session, SessionSettings, TrackingMode
from focusvoid.progress import ProgressTracker, bonus_words, percent_complete


def _words_session(target: int, words: int) -> Session:
    return Session(
        settings=SessionSettings(tracking_mode=TrackingMode.WORDS, target_words=target),
        content=" ".join(["w"] * words),
    )


def _time_session(minutes: int, elapsed: int, words: int = 0) -> Session:
    return Session(
        settings=SessionSettings(tracking_mode=TrackingMode.TIME, target_minutes=minutes),
        elapsed_seconds=elapsed,
        content=" ".join(["w"] * words),
    )


class TestPercent:
    def test_words(self) -> None:
        assert percent_complete(_words_session(200, 50)) == 25.0

    def test_words_capped(self) -> None:
        assert percent_complete(_words_session(100, 150)) == 100.0

    def test_time(self) -> None:
        assert percent_complete(_time_session(5, 150)) == 50.0

    def test_time_capped(self) -> None:
        assert percent_complete(_time_session(5, 900)) == 100.0

    def test_empty(self) -> None:
        assert percent_complete(_words_session(500, 0)) == 0.0


class TestBonus:
    def test_over_target(self) -> None:
        assert bonus_words(_words_session(500, 560)) == 60

    def test_under_target(self) -> None:
        assert bonus_words(_words_session(500, 400)) == 0

    def test_time_mode_has_no_bonus(self) -> None:
        assert bonus_words(_time_session(5, 600, words=2000)) == 0


class TestProgressTracker:
    def test_edge_fires_once(self) -> None:
        tracker = ProgressTracker()
        results = [
            tracker.update(_words_session(100, words)).threshold_just_reached
            for words in (99, 101, 99, 101)
        ]
        assert results == [False, True, False, False]
        assert tracker.reached

    def test_latch_survives_drop(self) -> None:
        tracker = ProgressTracker()
        tracker.update(_words_session(100, 100))
        update = tracker.update(_words_session(100, 10))
        assert tracker.reached
        assert update.percent == 10.0
        assert not update.threshold_just_reached

    def test_exactly_at_target_fires(self) -> None:
        update = ProgressTracker().update(_words_session(100, 100))
        assert update.threshold_just_reached
        assert update.percent == 100.0

    def test_time_mode_edge(self) -> None:
        tracker = ProgressTracker()
        assert not tracker.update(_time_session(5, 299)).threshold_just_reached
        assert tracker.update(_time_session(5, 300)).threshold_just_reached
        assert not tracker.update(_time_session(5, 301)).threshold_just_reached

    def test_update_reports_bonus(self) -> None:
        update = ProgressTracker().update(_words_session(500, 560))
        assert update.bonus == 60
