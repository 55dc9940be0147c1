"""focusvoid -- name your commitment, then write until it is done."""

__version__ = "0.1.0"
