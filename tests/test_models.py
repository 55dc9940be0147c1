"""Tests for Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from focusvoid.models import (
    AppConfig,
    ProgressUpdate,
    Session,
    SessionSettings,
    SessionSummary,
    Stage,
    TrackingMode,
)


class TestEnums:
    def test_stage_values(self) -> None:
        assert Stage.SETUP.value == "setup"
        assert Stage.FOCUS.value == "focus"
        assert Stage.COMPLETE.value == "complete"

    def test_mode_from_string(self) -> None:
        assert TrackingMode("time") is TrackingMode.TIME


class TestSessionSettings:
    def test_defaults(self) -> None:
        settings = SessionSettings()
        assert settings.tracking_mode == TrackingMode.WORDS
        assert settings.target == 500

    def test_target_follows_mode(self) -> None:
        settings = SessionSettings(tracking_mode=TrackingMode.TIME, target_minutes=45)
        assert settings.target == 45

    @pytest.mark.parametrize("words", [0, 99, 2001])
    def test_word_bounds(self, words: int) -> None:
        with pytest.raises(ValidationError):
            SessionSettings(target_words=words)

    @pytest.mark.parametrize("minutes", [0, 4, 121])
    def test_minute_bounds(self, minutes: int) -> None:
        with pytest.raises(ValidationError):
            SessionSettings(target_minutes=minutes)


class TestSession:
    def test_fresh(self) -> None:
        session = Session()
        assert session.stage == Stage.SETUP
        assert session.content == ""
        assert session.elapsed_seconds == 0
        assert session.previous_word_count == 0

    def test_negative_elapsed_rejected(self) -> None:
        session = Session()
        with pytest.raises(ValidationError):
            session.elapsed_seconds = -1


class TestProgressUpdate:
    def test_frozen(self) -> None:
        update = ProgressUpdate(percent=50.0)
        with pytest.raises(ValidationError):
            update.percent = 60.0  # type: ignore[misc]

    def test_percent_bounded(self) -> None:
        with pytest.raises(ValidationError):
            ProgressUpdate(percent=101.0)


class TestSessionSummary:
    def test_create(self) -> None:
        summary = SessionSummary(
            commitment="Essay",
            tracking_mode=TrackingMode.WORDS,
            target=100,
            word_count=120,
            elapsed_seconds=0,
            bonus_words=20,
            threshold_reached=True,
            content="...",
        )
        assert summary.bonus_words == 20


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.default_mode == TrackingMode.WORDS
        assert config.default_target_words == 500
        assert config.default_target_minutes == 30

    def test_session_settings(self) -> None:
        config = AppConfig(default_mode=TrackingMode.TIME, default_target_minutes=60)
        settings = config.session_settings()
        assert settings.tracking_mode == TrackingMode.TIME
        assert settings.target == 60

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(default_target_words=5000)
