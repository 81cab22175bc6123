"""Presentation of panel state."""
