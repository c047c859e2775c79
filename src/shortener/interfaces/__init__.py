"""Ports (abstract interfaces) implemented by `shortener.adapters`."""
