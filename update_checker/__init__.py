"""Update checker: decide whether an installed version needs an update."""

from update_checker.checker import CheckHandle, CheckState, UpdateChecker, UpdaterCallback
from update_checker.config import CheckerSettings
from update_checker.engine import decide
from update_checker.exceptions import (
    ConfigurationError,
    InvalidVersionFormatError,
    LoadCancelledError,
    MalformedDocumentError,
    TransportError,
    UnsupportedResultAccessError,
    UpdateCheckError,
    UrlNotSetError,
)
from update_checker.loaders import (
    CancellationToken,
    NetworkLoader,
    ResourceLoader,
    StaticLoader,
    UpdateConfigLoader,
)
from update_checker.models import CheckResult, NotificationType, UpdatePolicy, UpdateStatus
from update_checker.parsers import JsonPolicyParser, PolicyParser
from update_checker.version import compare_versions, is_newer, parse_version

__all__ = [
    "UpdateChecker",
    "CheckHandle",
    "CheckState",
    "UpdaterCallback",
    "CheckerSettings",
    "UpdateConfigLoader",
    "CancellationToken",
    "NetworkLoader",
    "ResourceLoader",
    "StaticLoader",
    "AsyncNetworkLoader",
    "PolicyParser",
    "JsonPolicyParser",
    "UpdatePolicy",
    "CheckResult",
    "UpdateStatus",
    "NotificationType",
    "decide",
    "check_for_updates_async",
    "parse_version",
    "compare_versions",
    "is_newer",
    "UpdateCheckError",
    "ConfigurationError",
    "UrlNotSetError",
    "TransportError",
    "LoadCancelledError",
    "MalformedDocumentError",
    "InvalidVersionFormatError",
    "UnsupportedResultAccessError",
]


def __getattr__(name: str) -> object:
    """Lazy-import async helpers so ``httpx`` is optional at import time."""
    if name == "AsyncNetworkLoader":
        from update_checker.async_loader import AsyncNetworkLoader

        return AsyncNetworkLoader
    if name == "check_for_updates_async":
        from update_checker.async_checker import check_for_updates_async

        return check_for_updates_async
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
