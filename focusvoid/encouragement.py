"""Quiet messages shown under the writing area, chosen by progress."""

from __future__ import annotations

THRESHOLD_MESSAGE: str = "You've done what you came to do."
EXIT_WARNING: str = "Not yet. Finish what you started."
FULLSCREEN_HINT: str = "Double-click to return to the void"

# (upper bound in percent, message), checked in order.
_BANDS: list[tuple[float, str]] = [
    (25, "The hardest part is starting. You're already here."),
    (50, "You're finding your rhythm."),
    (75, "Halfway there. Keep going."),
]
_FINAL_STRETCH: str = "Almost. Don't stop now."


def get_encouragement(percent: float, threshold_reached: bool = False) -> str:
    """Return the message for the current progress."""
    if threshold_reached:
        return THRESHOLD_MESSAGE
    for upper, message in _BANDS:
        if percent < upper:
            return message
    return _FINAL_STRETCH


def format_time(seconds: int) -> str:
    """Format seconds as ``M:SS``."""
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"
