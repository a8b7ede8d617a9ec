from __future__ import annotations


class AzboxClientError(Exception):
    """Base client error."""


class ConfigurationError(AzboxClientError):
    """Required client settings are missing or empty."""


class ApiError(AzboxClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class UnexpectedResponseShapeError(AzboxClientError):
    """The API answered with something other than a list of keywords."""
