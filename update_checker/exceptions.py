"""Exception hierarchy for the update checker."""

from __future__ import annotations


class UpdateCheckError(Exception):
    """Base exception for all recoverable update check errors."""


class ConfigurationError(UpdateCheckError):
    """Raised by a loader's ``validate()`` before any I/O is attempted."""


class UrlNotSetError(ConfigurationError):
    """Raised when a network loader has no URL to fetch."""


class TransportError(UpdateCheckError):
    """Raised when loading the policy document fails.

    Attributes:
        status_code: HTTP status of the response, or ``None`` when the
            failure happened before a response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LoadCancelledError(UpdateCheckError):
    """Raised by ``load()`` once it observes a cancellation request."""


class MalformedDocumentError(UpdateCheckError):
    """Raised when the policy document cannot be turned into a policy.

    Attributes:
        reason: Human-readable description of what is wrong.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidVersionFormatError(UpdateCheckError, ValueError):
    """Raised when a version token is not dot-separated non-negative integers."""

    def __init__(self, version: object) -> None:
        super().__init__(f"Invalid version format: {version!r}")
        self.version = version


class UnsupportedResultAccessError(AssertionError):
    """Raised when a :class:`~update_checker.models.CheckResult` is asked
    for data its status does not carry.

    This signals a programming error in the caller and is deliberately not an
    :class:`UpdateCheckError`.
    """
