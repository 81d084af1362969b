# src/task_tracker/auth/__init__.py
