"""Bootstrap (composition root) for SHORTENER.

Assembles the application at runtime: wires concrete adapters to service-layer
handlers (queries/commands), composes shared services (message bus, unit of
work, snapshot store), restores saved state, and exposes a small facade for
entrypoints.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
  The errors entry points report are re-exported here for that reason.
- This package may import: `shortener.adapters`, `shortener.service_layer`,
  `shortener.interfaces`, `shortener.domain`, and `shortener.config`.
- Inner layers must not import `shortener.bootstrap`.

Public surface:
- Re-export composition factories from this module; keep wiring helpers internal.
- No business rules live here; this is assembly and lifecycle only.
"""

from shortener.domain.errors import DomainError
from shortener.interfaces.snapshot_store import SnapshotError, SnapshotLockedError

from .bootstrap import AppContainer, bootstrap, exclusive_app

__all__ = [
    "AppContainer",
    "DomainError",
    "SnapshotError",
    "SnapshotLockedError",
    "bootstrap",
    "exclusive_app",
]
