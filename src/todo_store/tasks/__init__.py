"""
Task subsystem.

Components:
- record.py: on-disk block format (parse, render, display)
- task_models.py: Task, TaskStatus, SystemField, common_task
- task_list.py: directory-backed TaskList (cache, create, write, scans, search)
- query.py: query compiler (typed terms)
- sorting.py: result orderings
- registry.py: ListRegistry and PathResolver
- task_api.py: small high-level helpers (done / mute / snooze / listings)
"""
