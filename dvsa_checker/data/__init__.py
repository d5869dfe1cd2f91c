"""Bundled reference data."""
