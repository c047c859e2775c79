"""SHORTENER

An event-sourced URL shortening service.
Every change (a link created, a redirect served) is recorded as an immutable
event, and the current mapping and redirect counts are always derived by
replaying that log.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
