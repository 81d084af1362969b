# src/task_tracker/cli/__init__.py
