"""Error taxonomy for the json-updates gateway.

Each request-level error maps to one HTTP status in app.py.
ConfigError is startup-only and never reaches a handler.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for request-level gateway errors."""

    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class UnauthorizedError(GatewayError):
    status_code = 401
    message = "Provide access token"


class ForbiddenError(GatewayError):
    """Target collection is outside the allowed namespace."""

    status_code = 400
    message = "Can not write to this db collection"


class WriteRejectedError(GatewayError):
    """The bulk write failed for a reason other than duplicate keys.

    `cause` is for the server log only. Callers get the generic message.
    """

    status_code = 500
    message = "Failed to write update to db"

    def __init__(self, cause: str):
        super().__init__()
        self.cause = cause


class ConfigError(Exception):
    """Required configuration is missing or malformed."""
