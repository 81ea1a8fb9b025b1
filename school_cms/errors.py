"""
Error types raised by the CMS backend and translated into HTTP responses.
"""

from __future__ import annotations

from typing import Optional


class CmsError(Exception):
    """Base error carrying the HTTP status and message sent to the client."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def as_dict(self) -> dict:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class NotFoundError(CmsError):
    status_code = 404


class BadRequestError(CmsError):
    status_code = 400


class StorageError(CmsError):
    """Object storage upload/delete failure."""

    status_code = 500


class AuthError(CmsError):
    status_code = 401


class MissingTokenError(AuthError):
    status_code = 401

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "Token expired, please log in again"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    status_code = 401

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)
