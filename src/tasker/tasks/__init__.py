"""
Task subsystem.

Components:
- task_models.py: the Task record
- task_store.py: SQLite-backed storage (add/list/complete/delete)
"""
