# src/task_tracker/storage/__init__.py
