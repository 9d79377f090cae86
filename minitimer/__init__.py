"""MiniTimer: a single-screen countdown timer with a looping alarm."""

__version__ = "0.1.0"
