"""Utility helpers (text, url, resources)."""
