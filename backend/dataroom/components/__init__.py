"""DataRoom components.

This package contains the core domain components:
- workspace: Rooms, folders and files, their store, views and operations
"""
