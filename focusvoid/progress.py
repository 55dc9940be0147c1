"""Progress against the release threshold.

The tracker owns the one-way ``reached`` latch. ``update`` is called by the
session state machine after every edit and every tick; it reports the
threshold edge exactly once per session, however often progress dips back
below 100% afterwards.
"""

from __future__ import annotations

from focusvoid import wordcount
from focusvoid.models import ProgressUpdate, Session, TrackingMode


def percent_complete(session: Session) -> float:
    """Completion in percent, capped at 100."""
    target = session.target
    if session.tracking_mode == TrackingMode.WORDS:
        value = 100 * wordcount.count(session.content) / target
    else:
        value = 100 * session.elapsed_seconds / (target * 60)
    return min(100.0, value)


def bonus_words(session: Session) -> int:
    """Words written beyond the target. Always 0 when tracking time."""
    if session.tracking_mode != TrackingMode.WORDS:
        return 0
    return max(0, wordcount.count(session.content) - session.target)


class ProgressTracker:
    """Edge-triggered threshold detection for one session."""

    def __init__(self) -> None:
        self.reached: bool = False

    def update(self, session: Session) -> ProgressUpdate:
        percent = percent_complete(session)
        just_reached = False
        if percent >= 100 and not self.reached:
            self.reached = True
            just_reached = True
        return ProgressUpdate(
            percent=percent,
            threshold_just_reached=just_reached,
            bonus=bonus_words(session),
        )
