"""Port for identifier sources.

Two kinds of identifiers flow through the service: event ids (26-character
ULIDs stamped on every envelope) and slugs (public tokens naming a short
link). Both are produced behind this one interface so tests can swap in
predictable sequences.
"""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Source of fresh string identifiers."""

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return an identifier never returned before by this instance."""
