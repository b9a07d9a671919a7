"""Textual UI for editing plugin settings."""
