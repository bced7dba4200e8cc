"""Zannime: Stremio addon for the Wajik anime API."""

__version__ = "1.0.0"
