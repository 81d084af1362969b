# src/task_tracker/tasks/__init__.py
