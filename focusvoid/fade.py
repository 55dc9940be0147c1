"""Word-count-driven fade of the focus screen.

Each fading element keeps an activity counter: words typed since it was
last brought back into view. Opacity drops 5% per counted word, so ten
words leave an element at half strength and twenty hide it. When typing
stops for long enough, an idle timer puts the counter back to ten (50%).

Before the threshold the UI waits 20 seconds before resurfacing; after it,
both the UI and the "I'm done" button come back after 5 seconds so the way
out is never far away.
"""

from __future__ import annotations

import logging
from typing import Optional

from focusvoid.clock import Scheduler, TimerSlot

log = logging.getLogger(__name__)

FADE_PER_WORD: float = 0.05
HIDDEN_COUNTER: int = 20
IDLE_RESET_COUNTER: int = 10

UI_IDLE_MS: int = 20_000
POST_THRESHOLD_IDLE_MS: int = 5_000
DONE_IDLE_MS: int = 5_000
GLOW_HOLD_MS: int = 1_200


def opacity_for(activity_counter: int) -> float:
    """Opacity for a given activity counter, floored at 0."""
    return max(0.0, 1.0 - FADE_PER_WORD * activity_counter)


class FadeState:
    """Activity counter and idle timer for one fading element."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        idle_ms: int = UI_IDLE_MS,
        initial_counter: int = 0,
        name: str = "ui",
    ) -> None:
        self.name = name
        self.idle_ms = idle_ms
        self.activity_counter: int = initial_counter
        self.forced_visible: bool = False
        self._idle = TimerSlot(scheduler)

    @property
    def idle_pending(self) -> bool:
        return self._idle.pending

    def current_opacity(self) -> float:
        if self.forced_visible:
            return 1.0
        return opacity_for(self.activity_counter)

    def record_words_added(self, n: int) -> None:
        """Count ``n`` new words and restart the idle timer. Ignored if n <= 0."""
        if n <= 0:
            return
        self.activity_counter += n
        self.schedule_idle()

    def schedule_idle(self, delay_ms: Optional[int] = None) -> None:
        delay = self.idle_ms if delay_ms is None else delay_ms
        self._idle.schedule(delay, self.on_idle_timeout)

    def on_idle_timeout(self) -> None:
        log.debug("%s fade idle timeout (counter was %d)", self.name, self.activity_counter)
        self.activity_counter = IDLE_RESET_COUNTER

    def force_visible(self, flag: bool) -> None:
        """Hover override. Leaves the counter untouched."""
        self.forced_visible = flag

    def cancel(self) -> None:
        self._idle.cancel()


class DoneButtonFade(FadeState):
    """The exit control: hidden outright until its first idle timeout."""

    def __init__(self, scheduler: Scheduler) -> None:
        super().__init__(
            scheduler,
            idle_ms=DONE_IDLE_MS,
            initial_counter=HIDDEN_COUNTER,
            name="done-button",
        )
        self.visible: bool = False

    @property
    def shown(self) -> bool:
        return self.visible or self.forced_visible

    def on_idle_timeout(self) -> None:
        super().on_idle_timeout()
        self.visible = True


class GlowPulse:
    """One-shot highlight when the threshold is crossed."""

    def __init__(self, scheduler: Scheduler) -> None:
        self.opacity: float = 0.0
        self.triggered: bool = False
        self._decay = TimerSlot(scheduler)

    def trigger(self) -> None:
        if self.triggered:
            return
        self.triggered = True
        self.opacity = 1.0
        self._decay.schedule(GLOW_HOLD_MS, self._fade_out)

    def _fade_out(self) -> None:
        self.opacity = 0.0

    def cancel(self) -> None:
        """Drop any pending decay and settle at 0."""
        self._decay.cancel()
        self.opacity = 0.0


class FadeEngine:
    """All fading state for one focus session."""

    def __init__(self, scheduler: Scheduler) -> None:
        self.ui = FadeState(scheduler)
        self.done_button = DoneButtonFade(scheduler)
        self.glow = GlowPulse(scheduler)
        self.threshold_reached: bool = False

    def record_words_added(self, n: int) -> None:
        if n <= 0:
            return
        self.ui.record_words_added(n)
        if self.threshold_reached:
            self.done_button.record_words_added(n)

    def on_threshold_reached(self) -> None:
        """Switch to post-threshold timings, pulse the glow, start the exit timer."""
        if self.threshold_reached:
            return
        self.threshold_reached = True
        self.ui.idle_ms = POST_THRESHOLD_IDLE_MS
        self.glow.trigger()
        # Replaced by the next word, so the edit that crosses the line
        # leaves exactly one pending exit timer.
        self.done_button.schedule_idle()

    def force_visible(self, flag: bool) -> None:
        self.ui.force_visible(flag)
        self.done_button.force_visible(flag)

    def shutdown(self) -> None:
        """Cancel every timer this engine owns."""
        self.ui.cancel()
        self.done_button.cancel()
        self.glow.cancel()
