"""Adapters between the panel and its host."""
