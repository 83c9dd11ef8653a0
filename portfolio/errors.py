"""Exceptions raised by the content layer.

Read accessors never let these reach a caller; the write path raises them and
the admin routers turn them into ``ActionResult`` responses.
"""


class ContentError(Exception):
    """Base class for content-layer failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ContentError):
    """The requested id or slug does not resolve to a record."""


class OperationFailedError(ContentError):
    """The underlying store rejected or failed a write."""


class DocumentError(ContentError):
    """A stored document cannot be turned into an entity."""
