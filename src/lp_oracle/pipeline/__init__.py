"""Snapshot pipeline stages."""
