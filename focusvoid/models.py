"""Pydantic models -- single source of truth for all data types."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

WORD_TARGET_MIN: int = 100
WORD_TARGET_MAX: int = 2000
MINUTE_TARGET_MIN: int = 5
MINUTE_TARGET_MAX: int = 120


class Stage(str, enum.Enum):
    """Session lifecycle stages."""

    SETUP = "setup"
    FOCUS = "focus"
    COMPLETE = "complete"


class TrackingMode(str, enum.Enum):
    """What the release threshold is measured in."""

    WORDS = "words"
    TIME = "time"


class SessionSettings(BaseModel):
    """Targets chosen during setup. Both are kept so switching mode is lossless."""

    tracking_mode: TrackingMode = TrackingMode.WORDS
    target_words: int = Field(default=500, ge=WORD_TARGET_MIN, le=WORD_TARGET_MAX)
    target_minutes: int = Field(default=30, ge=MINUTE_TARGET_MIN, le=MINUTE_TARGET_MAX)

    @property
    def target(self) -> int:
        if self.tracking_mode == TrackingMode.WORDS:
            return self.target_words
        return self.target_minutes


class Session(BaseModel):
    """The root aggregate. Only the state machine mutates it."""

    model_config = {"validate_assignment": True}

    stage: Stage = Stage.SETUP
    commitment: str = ""
    settings: SessionSettings = Field(default_factory=SessionSettings)
    content: str = ""
    elapsed_seconds: int = Field(default=0, ge=0)
    previous_word_count: int = Field(default=0, ge=0)

    @property
    def tracking_mode(self) -> TrackingMode:
        return self.settings.tracking_mode

    @property
    def target(self) -> int:
        return self.settings.target


class ProgressUpdate(BaseModel):
    """Result of feeding the current session through the progress tracker."""

    model_config = {"frozen": True}

    percent: float = Field(ge=0, le=100)
    threshold_just_reached: bool = False
    bonus: int = Field(default=0, ge=0)


class SessionSummary(BaseModel):
    """Read-only export of a completed session."""

    model_config = {"frozen": True}

    commitment: str
    tracking_mode: TrackingMode
    target: int = Field(gt=0)
    word_count: int = Field(ge=0)
    elapsed_seconds: int = Field(ge=0)
    bonus_words: int = Field(ge=0)
    threshold_reached: bool
    content: str


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/focusvoid/config.json)."""

    default_mode: TrackingMode = TrackingMode.WORDS
    default_target_words: int = Field(default=500, ge=WORD_TARGET_MIN, le=WORD_TARGET_MAX)
    default_target_minutes: int = Field(
        default=30, ge=MINUTE_TARGET_MIN, le=MINUTE_TARGET_MAX
    )

    def session_settings(self) -> SessionSettings:
        """Fresh setup targets built from the configured defaults."""
        return SessionSettings(
            tracking_mode=self.default_mode,
            target_words=self.default_target_words,
            target_minutes=self.default_target_minutes,
        )
