"""Task manager API: personal task tracking behind email/password auth."""

__version__ = "1.0.0"
