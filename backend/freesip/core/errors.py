"""Errors surfaced to API clients.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Internal details stay in the server log.
"""

from __future__ import annotations

from typing import Optional

INVALID_FORM_DATA = "Invalid form data. Please check your inputs and try again."
GENERIC_FAILURE = "Something went wrong. Please try again later."


class ContactAPIError(Exception):
    status_code = 500
    message = GENERIC_FAILURE

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ClientValidationError(ContactAPIError):
    status_code = 400
    message = INVALID_FORM_DATA


class RateLimitExceeded(ContactAPIError):
    status_code = 429
    message = "Too many requests from this IP, please try again later."

    def __init__(self, message: Optional[str] = None, *, retry_after: Optional[int] = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class StoreWriteRejected(ContactAPIError):
    status_code = 400
    message = INVALID_FORM_DATA


class StoreUnavailable(ContactAPIError):
    status_code = 500
    message = GENERIC_FAILURE


class Unauthorized(ContactAPIError):
    status_code = 401
    message = "Unauthorized"
