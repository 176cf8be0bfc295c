"""
Task subsystem.

Components:
- task_models.py: data structures (Task) and the task error types
- task_format.py: the `[ ]` / `[x]` line format (parse + serialize)
- task_store.py: file-backed ordered list with write-through mutations
"""
