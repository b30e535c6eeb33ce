"""Error taxonomy for the shortlink service.

Every failure the allocation and resolution paths can raise derives from
``ShortlinkError`` and carries the HTTP status and client-facing message it
maps to. Routes do not translate these by hand; ``shortlink.main`` installs a
single exception handler for the base class.
"""

__all__ = [
    "ShortlinkError",
    "InvalidRequestError",
    "SlugConflictError",
    "AllocationExhaustedError",
    "StoreError",
    "SlugTakenError",
    "UnauthorizedError",
    "RecordNotFoundError",
]


class ShortlinkError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidRequestError(ShortlinkError):
    """The request was rejected before reaching the store (e.g. empty URL)."""

    status_code = 400
    message = "URL is required"


class SlugConflictError(ShortlinkError):
    """A caller-supplied slug is already taken. Never retried."""

    status_code = 409
    message = "Slug already exists"


class AllocationExhaustedError(ShortlinkError):
    """Every generated candidate collided with an existing slug."""

    status_code = 500
    message = "Failed to generate unique slug"


class StoreError(ShortlinkError):
    """The store failed for a reason other than a uniqueness violation."""

    status_code = 500
    message = "Database error"


class SlugTakenError(Exception):
    """Raised by the store when an insert violates the slug UNIQUE constraint."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"slug '{slug}' already exists")
        self.slug = slug


class UnauthorizedError(ShortlinkError):
    """The request carries no usable admin session."""

    status_code = 401
    message = "Unauthorized"


class RecordNotFoundError(ShortlinkError):
    """An admin operation targeted a record id that does not exist."""

    status_code = 404
    message = "URL not found"
