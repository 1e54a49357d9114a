"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Note, TaskState)
- task_codec.py: task file encode/decode + field resolution
- overrides.py: States/ and Ordering/ override files
- ordering.py: reconciliation of unassigned orderings
- task_store.py: directory-backed store used by the rest of the app
"""
