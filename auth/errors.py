"""
Authentication error taxonomy.

Every ``AuthError`` carries the HTTP status it maps to; the exception
handlers in ``api.errors`` turn them into ``{"message": ...}`` responses.
Server-side (5xx) errors are logged and answered with a generic message.
"""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A required process-wide setting is missing or unusable."""


class DuplicateIdentifier(Exception):
    """The storage layer rejected an insert on a unique login identifier."""

    def __init__(self, field: str):
        super().__init__(f"duplicate {field}")
        self.field = field


class AuthError(Exception):
    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AuthError):
    status_code = 400
    default_message = "Invalid input"


class PasswordMismatch(AuthError):
    status_code = 400
    default_message = "Passwords do not match"


class EmailInUse(AuthError):
    status_code = 409
    default_message = "Email already in use"


class UsernameInUse(AuthError):
    status_code = 409
    default_message = "Username already taken"


class InvalidCredentials(AuthError):
    status_code = 401
    default_message = "Invalid credentials"


class NoToken(AuthError):
    status_code = 401
    default_message = "No token, authorization denied"


class TokenMalformed(AuthError):
    status_code = 401
    default_message = "Token is not valid"


class TokenExpired(AuthError):
    status_code = 401
    default_message = "Token has expired"


class CorruptCredential(AuthError):
    status_code = 500
    default_message = "Stored credential is corrupt"


class StorageUnavailable(AuthError):
    status_code = 500
    default_message = "Storage unavailable"

