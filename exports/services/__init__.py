"""Flattening and export orchestration services."""
