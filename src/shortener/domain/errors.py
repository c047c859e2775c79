"""Reasons the service refuses a request.

Each error carries a message fit for showing to the person who made the
request; callers report it and carry on.
"""


class DomainError(Exception):
    """A request that cannot be honoured as asked."""


class InvalidUrlError(DomainError):
    """Raised when a url is empty or does not use an http(s) scheme."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid url {url!r}: expected an http(s) url.")
        self.url = url


class SlugAlreadyInUseError(DomainError):
    """Raised when an explicit slug already maps to a url."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug '{slug}' is already in use.")
        self.slug = slug


class SlugNotFoundError(DomainError):
    """Raised when a slug does not map to any short link."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug '{slug}' not found.")
        self.slug = slug
