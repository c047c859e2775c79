"""SHORTENER command-line interface."""
