"""Scribe blogging API."""
