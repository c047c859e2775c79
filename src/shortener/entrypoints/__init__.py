"""Entrypoints: the outer boundary that drives the service (currently the CLI)."""
