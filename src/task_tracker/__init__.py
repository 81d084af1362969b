# src/task_tracker/__init__.py

"""Command-line task tracker with JSON storage and token-based sign-in."""

__version__ = "1.0.0"
