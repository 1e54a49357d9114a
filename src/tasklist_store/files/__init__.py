"""
Attachment subsystem.

Components:
- file_models.py: FileAttachment
- ledger.py: Files/Info.txt parsing and formatting
- file_store.py: copying payloads + appending ledger entries
"""
