"""
Text layer.

Components:
- escaping.py: reversible escaping of Content fields
- paragraphs.py: paragraph splitting and key-value parsing
"""
