# src/task_tracker/users/__init__.py
