"""Concrete implementations of the ports in `shortener.interfaces`."""
