"""Custom exception classes for trellokit.

This module defines the exception hierarchy for Trello API errors and for
failures parsing user-edited card text.
"""

from __future__ import annotations


class TrelloError(Exception):
    """Base exception for everything raised by trellokit"""

    pass


class CardParseError(TrelloError):
    """Raised when an edited card buffer cannot be split into name and description.

    This happens when no line made entirely of '=' characters separates the
    card name from its description.

    Resolution:
        Add a delimiter line (e.g. '====') below the card name and try again.
    """

    pass


class TrelloAPIError(TrelloError):
    """Base exception for Trello API errors"""

    def __init__(
        self, message: str, status_code: int | None = None, response_text: str | None = None
    ):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)


class TrelloAuthenticationError(TrelloAPIError):
    """Raised when API credentials are invalid or expired (401/403)"""

    pass


class TrelloNotFoundError(TrelloAPIError):
    """Raised when a board, list, card, or other resource is not found (404)"""

    pass


class TrelloRateLimitError(TrelloAPIError):
    """Raised when rate limit is exceeded (429) after retries"""

    pass


class TrelloServerError(TrelloAPIError):
    """Raised when Trello's servers return an error (500/502/503/504)"""

    pass


class TrelloDecodeError(TrelloAPIError):
    """Raised when a response body is not JSON or does not match the expected record.

    Attributes:
        status_code: HTTP status of the response that could not be decoded
        response_text: Raw body (or the offending JSON fragment)
    """

    pass
