"""Append-only, directory-backed personal task store."""
