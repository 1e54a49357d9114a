"""
Storage plumbing.

Components:
- layout.py: directory layout of a task list + root marker detection
- fs.py: local filesystem primitives
"""
