"""Error types raised by the wiki core.

Every error carries a client-facing ``message``. The HTTP layer turns any
``WikiError`` into a ``{"status": "error", "message": ...}`` envelope.
"""


class WikiError(Exception):
    """Base class for wiki core errors."""

    message = "Unexpected wiki error."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail


class PageNotFound(WikiError):
    """Raised when a page cannot be read."""

    message = "Page does not exist."


class WriteFailure(WikiError):
    """Raised when a page cannot be written."""

    message = "Could not write page."


class MalformedInput(WikiError):
    """Raised when a write request is missing its body or is otherwise invalid."""

    message = "Could not write page."


class InvalidSlug(MalformedInput):
    """Raised for slugs that would escape the page directory."""
