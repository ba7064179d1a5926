"""Data models for update policies and check results."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from update_checker.exceptions import MalformedDocumentError, UnsupportedResultAccessError
from update_checker.version import compare_versions, parse_version


class UpdateStatus(enum.Enum):
    """Outcome of comparing the installed version against a policy."""

    NO_UPDATE = "NO_UPDATE"
    OPTIONAL = "OPTIONAL"
    MANDATORY = "MANDATORY"


class NotificationType(enum.Enum):
    """How often an optional update should be announced to the user."""

    ONCE = "ONCE"
    ALWAYS = "ALWAYS"


def _freeze(metadata: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(metadata or {}))


@dataclass(frozen=True, slots=True)
class UpdatePolicy:
    """Parsed policy document.

    Attributes:
        latest_available_version: Newest version the document advertises.
        minimum_required_version: Versions below this must update; ``None``
            means there is no mandatory floor.
        notification_type: Cadence for announcing an optional update.
        metadata: Opaque key/value pairs forwarded to the result untouched.

    Raises:
        MalformedDocumentError: If the minimum version orders after the
            latest version, or the notification type is not a
            :class:`NotificationType`.
        InvalidVersionFormatError: If either version token cannot be parsed.
    """

    latest_available_version: str
    minimum_required_version: str | None = None
    notification_type: NotificationType = NotificationType.ONCE
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))
        if not isinstance(self.notification_type, NotificationType):
            raise MalformedDocumentError(f"Invalid notification type {self.notification_type!r}")
        parse_version(self.latest_available_version)
        minimum = self.minimum_required_version
        if minimum is not None and compare_versions(minimum, self.latest_available_version) > 0:
            raise MalformedDocumentError(
                f"Minimum required version {minimum} is higher than "
                f"latest available version {self.latest_available_version}"
            )

    def __hash__(self) -> int:
        return hash(
            (
                self.latest_available_version,
                self.minimum_required_version,
                self.notification_type,
                frozenset(self.metadata.items()),
            )
        )


class CheckResult:
    """Immutable outcome of a single update check.

    Build instances with :meth:`mandatory_update`, :meth:`optional_update` or
    :meth:`no_update`; each one fixes the status and the fields valid for it.

    Example::

        result = CheckResult.optional_update("1.3.0", NotificationType.ALWAYS, {})
        if result.has_update() and result.is_optional():
            print(result.update_version, result.notification_type)
    """

    __slots__ = ("_status", "_update_version", "_notification_type", "_metadata")

    def __init__(
        self,
        status: UpdateStatus,
        update_version: str,
        notification_type: NotificationType | None,
        metadata: Mapping[str, str] | None,
    ) -> None:
        if (status is UpdateStatus.OPTIONAL) != (notification_type is not None):
            raise ValueError(
                f"notification_type must be set for OPTIONAL results only, got {status.name} "
                f"with {notification_type!r}"
            )
        object.__setattr__(self, "_status", status)
        object.__setattr__(self, "_update_version", update_version)
        object.__setattr__(self, "_notification_type", notification_type)
        object.__setattr__(self, "_metadata", _freeze(metadata))

    @classmethod
    def mandatory_update(cls, version: str, metadata: Mapping[str, str] | None = None) -> CheckResult:
        return cls(UpdateStatus.MANDATORY, version, None, metadata)

    @classmethod
    def optional_update(
        cls,
        version: str,
        notification_type: NotificationType,
        metadata: Mapping[str, str] | None = None,
    ) -> CheckResult:
        if notification_type is None:
            raise ValueError("An optional update requires a notification type")
        return cls(UpdateStatus.OPTIONAL, version, notification_type, metadata)

    @classmethod
    def no_update(cls, version: str, metadata: Mapping[str, str] | None = None) -> CheckResult:
        return cls(UpdateStatus.NO_UPDATE, version, None, metadata)

    @property
    def status(self) -> UpdateStatus:
        return self._status

    @property
    def update_version(self) -> str:
        """Version the policy recommends (its latest available version)."""
        return self._update_version

    @property
    def metadata(self) -> Mapping[str, str]:
        return self._metadata

    @property
    def notification_type(self) -> NotificationType:
        """Notification cadence of an optional update.

        Raises:
            UnsupportedResultAccessError: If the status is not ``OPTIONAL``.
        """
        if not self.is_optional():
            raise UnsupportedResultAccessError("There is no optional update available.")
        return self._notification_type  # type: ignore[return-value]

    def has_update(self) -> bool:
        return self._status in (UpdateStatus.MANDATORY, UpdateStatus.OPTIONAL)

    def is_optional(self) -> bool:
        """Tell an optional update apart from a mandatory one.

        Raises:
            UnsupportedResultAccessError: If there is no update at all.
        """
        if not self.has_update():
            raise UnsupportedResultAccessError("There is no update available.")
        return self._status is UpdateStatus.OPTIONAL

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CheckResult):
            return NotImplemented
        return (
            self._status is other._status
            and self._update_version == other._update_version
            and self._notification_type is other._notification_type
            and self._metadata == other._metadata
        )

    def __hash__(self) -> int:
        return hash(
            (
                self._status,
                self._update_version,
                self._notification_type,
                frozenset(self._metadata.items()),
            )
        )

    def __repr__(self) -> str:
        return (
            f"CheckResult(status={self._status.name}, update_version={self._update_version!r}, "
            f"notification_type={self._notification_type and self._notification_type.name}, "
            f"metadata={dict(self._metadata)!r})"
        )
