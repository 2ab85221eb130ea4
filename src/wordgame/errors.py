"""Domain error taxonomy.

Services raise these; ``middleware.error_handler`` turns them into JSON
responses using ``status_code``.
"""

from __future__ import annotations


class WordGameError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidInput(WordGameError, ValueError):
    """Malformed or out-of-range arguments. Raised before any write."""

    status_code = 400


class NotFound(WordGameError, LookupError):
    """A referenced user, word or session id does not exist."""

    status_code = 404


class Conflict(WordGameError):
    """Duplicate unique key (email, word text)."""

    status_code = 409


class Unavailable(WordGameError):
    """The backing store could not be reached. Nothing was written."""

    status_code = 503
