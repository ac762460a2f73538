"""Workflows combining parsing, generation and snapshots."""
