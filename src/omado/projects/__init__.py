"""
Project grouping and list filters.

Components:
- project_index.py: per-project counts, recomputed from the task list
- project_filters.py: status / project / search filters and the project picker
"""
