"""
Editing subsystem.

Components:
- documents.py: editable task documents (parse, apply, create)
- bulk.py: bulk edit protocol
- session.py: editor / document host driven flows
"""
