"""availctl — asset availability control."""

__version__ = "0.1.0"
