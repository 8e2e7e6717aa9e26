"""
Storage subsystem.

Components:
- local_store.py: SQLite-backed key -> JSON document store + well-known keys
"""
