"""call-cal-bot: daily group check-in tracking."""

__version__ = "0.1.0"
