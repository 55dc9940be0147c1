"""Session state machine: Setup -> Focus -> Complete.

``SessionMachine`` owns the ``Session`` aggregate together with its progress
tracker, fade engine and every timer. Presentation adapters (the terminal
command, the Tk window) never touch those directly: they send commands,
forward platform notifications, and read the accessors to render.

All commands return ``True`` when they changed something and ``False`` when
they were rejected (wrong stage, blank commitment, target out of range).
Nothing here raises for bad input, and failures of the presentation port
(fullscreen, clipboard) are logged and swallowed.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

from pydantic import ValidationError

from focusvoid import wordcount
from focusvoid.clock import Scheduler, TimerSlot, Ticker
from focusvoid.encouragement import get_encouragement
from focusvoid.fade import FadeEngine
from focusvoid.models import (
    AppConfig,
    Session,
    SessionSettings,
    SessionSummary,
    Stage,
    TrackingMode,
)
from focusvoid.progress import ProgressTracker, bonus_words, percent_complete

log = logging.getLogger(__name__)

TICK_MS: int = 1_000
EXIT_WARNING_MS: int = 3_000
FULLSCREEN_HINT_MS: int = 5_000
COPIED_MS: int = 2_000

_TRANSITIONS: dict[Stage, Stage] = {
    Stage.SETUP: Stage.FOCUS,
    Stage.FOCUS: Stage.COMPLETE,
    Stage.COMPLETE: Stage.SETUP,
}


class Presentation(Protocol):
    """What the core asks of the screen it is shown on."""

    def request_fullscreen(self) -> None: ...

    def exit_fullscreen(self) -> None: ...

    def copy_text(self, text: str) -> None: ...


class NullPresentation:
    """Presentation port that does nothing (tests, headless use)."""

    def request_fullscreen(self) -> None:
        pass

    def exit_fullscreen(self) -> None:
        pass

    def copy_text(self, text: str) -> None:
        pass


class SessionMachine:
    """Drives one writing session at a time."""

    def __init__(
        self,
        scheduler: Scheduler,
        presentation: Optional[Presentation] = None,
        *,
        config: Optional[AppConfig] = None,
        auto_tick: bool = True,
    ) -> None:
        self._scheduler = scheduler
        self._presentation: Presentation = presentation or NullPresentation()
        self._config = config or AppConfig()
        self._auto_tick = auto_tick

        self._warning_slot = TimerSlot(scheduler)
        self._hint_slot = TimerSlot(scheduler)
        self._copied_slot = TimerSlot(scheduler)
        self._ticker: Optional[Ticker] = None
        self._fresh_session()

    def _fresh_session(self) -> None:
        self._session = Session(settings=self._config.session_settings())
        self._tracker = ProgressTracker()
        self._fade = FadeEngine(self._scheduler)
        self._hovering: bool = False
        self._exit_warning: bool = False
        self._fullscreen_hint: bool = False
        self._copied: bool = False

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def stage(self) -> Stage:
        return self._session.stage

    @property
    def commitment(self) -> str:
        return self._session.commitment

    @property
    def tracking_mode(self) -> TrackingMode:
        return self._session.tracking_mode

    @property
    def target(self) -> int:
        return self._session.target

    @property
    def target_words(self) -> int:
        return self._session.settings.target_words

    @property
    def target_minutes(self) -> int:
        return self._session.settings.target_minutes

    @property
    def content(self) -> str:
        return self._session.content

    @property
    def elapsed_seconds(self) -> int:
        return self._session.elapsed_seconds

    @property
    def word_count(self) -> int:
        return wordcount.count(self._session.content)

    @property
    def word_count_baseline(self) -> int:
        """Word count as of the last edit; new words are measured against it."""
        return self._session.previous_word_count

    @property
    def progress_percent(self) -> float:
        return percent_complete(self._session)

    @property
    def threshold_reached(self) -> bool:
        return self._tracker.reached

    @property
    def bonus_words(self) -> int:
        return bonus_words(self._session)

    @property
    def ui_opacity(self) -> float:
        return self._fade.ui.current_opacity()

    @property
    def progress_opacity(self) -> float:
        """Progress bar and encouragement: gone after the threshold unless hovering."""
        if self.threshold_reached:
            return 1.0 if self._hovering else 0.0
        return self.ui_opacity

    @property
    def title_opacity(self) -> float:
        return self.progress_opacity

    @property
    def ui_activity_counter(self) -> int:
        return self._fade.ui.activity_counter

    @property
    def done_button_activity_counter(self) -> int:
        return self._fade.done_button.activity_counter

    @property
    def done_button_opacity(self) -> float:
        return self._fade.done_button.current_opacity()

    @property
    def done_button_visible(self) -> bool:
        return self.threshold_reached and self._fade.done_button.shown

    @property
    def glow_opacity(self) -> float:
        return self._fade.glow.opacity

    @property
    def hovering_done(self) -> bool:
        return self._hovering

    @property
    def exit_warning_visible(self) -> bool:
        return self._exit_warning

    @property
    def fullscreen_hint_visible(self) -> bool:
        return self._fullscreen_hint

    @property
    def copied(self) -> bool:
        return self._copied

    @property
    def encouragement(self) -> str:
        return get_encouragement(self.progress_percent, self.threshold_reached)

    # ------------------------------------------------------------------
    # Setup commands
    # ------------------------------------------------------------------

    def set_commitment(self, text: str) -> bool:
        if not self._expect(Stage.SETUP, "set_commitment"):
            return False
        self._session.commitment = text
        return True

    def set_tracking_mode(self, mode: Union[TrackingMode, str]) -> bool:
        if not self._expect(Stage.SETUP, "set_tracking_mode"):
            return False
        try:
            mode = TrackingMode(mode)
        except ValueError:
            log.debug("Unknown tracking mode %r", mode)
            return False
        return self._update_settings(tracking_mode=mode)

    def set_target(self, value: int) -> bool:
        """Set the target for the current mode (words or minutes)."""
        if not self._expect(Stage.SETUP, "set_target"):
            return False
        if self.tracking_mode == TrackingMode.WORDS:
            return self._update_settings(target_words=value)
        return self._update_settings(target_minutes=value)

    def _update_settings(self, **changes: object) -> bool:
        data = self._session.settings.model_dump()
        data.update(changes)
        try:
            settings = SessionSettings.model_validate(data)
        except ValidationError as exc:
            log.debug("Rejected settings change %s: %s", changes, exc)
            return False
        self._session.settings = settings
        return True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin(self) -> bool:
        """Enter focus. Needs a commitment that is not blank."""
        if not self._expect(Stage.SETUP, "begin"):
            return False
        commitment = self._session.commitment.strip()
        if not commitment:
            log.debug("begin() ignored: empty commitment")
            return False

        self._best_effort("request_fullscreen")
        self._session.commitment = commitment
        self._session.elapsed_seconds = 0
        self._session.previous_word_count = wordcount.count(self._session.content)
        self._tracker = ProgressTracker()
        self._fade.shutdown()
        self._fade = FadeEngine(self._scheduler)
        self._move_to(Stage.FOCUS)

        if self._auto_tick and self.tracking_mode == TrackingMode.TIME:
            self._ticker = self._scheduler.call_every(TICK_MS, self.tick)
        log.info(
            "Focus started: %r, %d %s",
            commitment,
            self.target,
            "words" if self.tracking_mode == TrackingMode.WORDS else "minutes",
        )
        return True

    def finish(self) -> bool:
        """Leave focus. Only offered once the threshold has been reached."""
        if not self._expect(Stage.FOCUS, "finish"):
            return False
        if not self.threshold_reached:
            log.debug("finish() ignored: threshold not reached")
            return False

        self._stop_timers()
        self._hovering = False
        self._exit_warning = False
        self._fullscreen_hint = False
        self._best_effort("exit_fullscreen")
        self._move_to(Stage.COMPLETE)
        log.info("Session complete: %d words, %ds", self.word_count, self.elapsed_seconds)
        return True

    def new_session(self) -> bool:
        """Discard the current session and return to setup with default targets."""
        if self.stage == Stage.FOCUS:
            log.debug("new_session() ignored during focus")
            return False
        self._stop_timers()
        self._fresh_session()
        return True

    # ------------------------------------------------------------------
    # Focus events
    # ------------------------------------------------------------------

    def set_content(self, text: str) -> bool:
        if not self._expect(Stage.FOCUS, "set_content"):
            return False
        session = self._session
        session.content = text
        new_count = wordcount.count(text)
        words_added = new_count - session.previous_word_count
        session.previous_word_count = new_count

        self._refresh_progress()
        if words_added > 0:
            self._fade.record_words_added(words_added)
            self._hide_fullscreen_hint()
        return True

    def tick(self) -> bool:
        """Advance the time-mode clock by one second."""
        if self.stage != Stage.FOCUS or self.tracking_mode != TrackingMode.TIME:
            return False
        self._session.elapsed_seconds += 1
        self._refresh_progress()
        return True

    def set_hovering_done(self, hovering: bool) -> bool:
        if self.stage != Stage.FOCUS:
            return False
        if hovering and not self.threshold_reached:
            return False
        self._hovering = hovering
        self._fade.force_visible(hovering)
        return True

    def _refresh_progress(self) -> None:
        update = self._tracker.update(self._session)
        if update.threshold_just_reached:
            log.info("Threshold reached")
            self._fade.on_threshold_reached()

    # ------------------------------------------------------------------
    # Platform notifications
    # ------------------------------------------------------------------

    def notify_interrupt_attempt(self) -> bool:
        """Close/quit/escape pressed. Returns True when the attempt is suppressed."""
        if self.stage != Stage.FOCUS:
            return False
        self._exit_warning = True
        self._warning_slot.schedule(EXIT_WARNING_MS, self._clear_exit_warning)
        return True

    def _clear_exit_warning(self) -> None:
        self._exit_warning = False

    def notify_presentation_lost(self) -> bool:
        if self.stage != Stage.FOCUS:
            return False
        self._fullscreen_hint = True
        self._hint_slot.schedule(FULLSCREEN_HINT_MS, self._hide_fullscreen_hint)
        return True

    def notify_presentation_regained(self) -> bool:
        self._hide_fullscreen_hint()
        return True

    def reacquire_presentation(self) -> bool:
        """Ask for fullscreen again (double-click on the void)."""
        if self.stage != Stage.FOCUS:
            return False
        self._best_effort("request_fullscreen")
        self._hide_fullscreen_hint()
        return True

    def _hide_fullscreen_hint(self) -> None:
        self._hint_slot.cancel()
        self._fullscreen_hint = False

    # ------------------------------------------------------------------
    # Complete
    # ------------------------------------------------------------------

    def export(self) -> Optional[SessionSummary]:
        """Summary of the finished session, or None before it is complete."""
        if self.stage != Stage.COMPLETE:
            return None
        return SessionSummary(
            commitment=self.commitment,
            tracking_mode=self.tracking_mode,
            target=self.target,
            word_count=self.word_count,
            elapsed_seconds=self.elapsed_seconds,
            bonus_words=self.bonus_words,
            threshold_reached=self.threshold_reached,
            content=self.content,
        )

    def copy_to_clipboard(self) -> bool:
        if not self._expect(Stage.COMPLETE, "copy_to_clipboard"):
            return False
        try:
            self._presentation.copy_text(self._session.content)
        except Exception:
            log.warning("Could not copy to clipboard", exc_info=True)
            return False
        self._copied = True
        self._copied_slot.schedule(COPIED_MS, self._clear_copied)
        return True

    def _clear_copied(self) -> None:
        self._copied = False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _expect(self, stage: Stage, command: str) -> bool:
        if self.stage != stage:
            log.debug("%s ignored in %s stage", command, self.stage.value)
            return False
        return True

    def _move_to(self, stage: Stage) -> None:
        if _TRANSITIONS[self.stage] != stage:
            raise RuntimeError(f"illegal transition {self.stage.value} -> {stage.value}")
        self._session.stage = stage

    def _stop_timers(self) -> None:
        self._fade.shutdown()
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None
        self._warning_slot.cancel()
        self._hint_slot.cancel()
        self._copied_slot.cancel()

    def _best_effort(self, action: str) -> None:
        """Call a fullscreen action on the presentation, ignoring failure."""
        try:
            getattr(self._presentation, action)()
        except Exception:
            log.debug("%s failed", action, exc_info=True)
