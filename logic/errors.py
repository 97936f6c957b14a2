# logic/errors.py

"""
Error types raised while mapping user requests onto the key-value store.

Each error carries the HTTP status it maps to and a public message that is
safe to return to the caller. Internal detail (the underlying exception) is
kept on ``detail`` / ``__cause__`` and only ever logged.
"""

from typing import Optional


class UserStoreError(Exception):
    """Base class for every error the user routes translate into a response."""

    status_code = 500
    default_message = "An error occurred. Please try again later."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class NotFound(UserStoreError):
    status_code = 404
    default_message = "User not found"


class AlreadyExists(UserStoreError):
    status_code = 400
    default_message = "User already exists"


class InvalidRequestBody(UserStoreError):
    status_code = 400
    default_message = "Request body must be a JSON object"


class StoreUnavailable(UserStoreError):
    """The store call itself failed (connection, timeout, protocol error)."""

    status_code = 500
    default_message = "Error talking to the key-value store"


class MalformedData(UserStoreError):
    """A stored value could not be deserialized into a user record."""

    status_code = 500
    default_message = "Stored user data is malformed"
