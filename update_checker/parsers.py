"""Parsers turning raw policy documents into :class:`UpdatePolicy` values."""

from __future__ import annotations

import json
from typing import Any, Protocol, Union, runtime_checkable

from update_checker.exceptions import InvalidVersionFormatError, MalformedDocumentError
from update_checker.models import NotificationType, UpdatePolicy
from update_checker.version import parse_version

MINIMUM_VERSION = "minimum_version"
LATEST_VERSION = "latest_version"
VERSION = "version"
NOTIFICATION_TYPE = "notification_type"
META = "meta"


@runtime_checkable
class PolicyParser(Protocol):
    """Pure strategy converting document content into a policy."""

    def parse(self, content: Union[str, bytes]) -> UpdatePolicy:
        """Raise :class:`MalformedDocumentError` if *content* is not a valid policy."""


class JsonPolicyParser:
    """Parse JSON policy documents.

    The document looks like::

        {
          "android": {
            "minimum_version": "1.1.0",
            "latest_version": {"version": "2.0.0", "notification_type": "ALWAYS"},
            "meta": {"channel": "beta"}
          },
          "meta": {"title": "Update available"}
        }

    Args:
        section: Name of the object holding the version keys (for example a
            platform name). When *None* the keys are read from the top level.
    """

    def __init__(self, section: str | None = None) -> None:
        self._section = section

    def parse(self, content: Union[str, bytes]) -> UpdatePolicy:
        try:
            document = json.loads(content)
        except (TypeError, ValueError) as exc:
            raise MalformedDocumentError(f"Document is not valid JSON: {exc}") from exc
        if not isinstance(document, dict):
            raise MalformedDocumentError("Document root must be a JSON object")

        body = document
        if self._section is not None:
            body = document.get(self._section)
            if not isinstance(body, dict):
                raise MalformedDocumentError(f"Section {self._section!r} is missing or not an object")

        latest, notification = self._parse_latest(body.get(LATEST_VERSION))
        minimum = body.get(MINIMUM_VERSION)
        if minimum is not None:
            minimum = self._version_token(minimum, MINIMUM_VERSION)

        metadata = self._parse_meta(document.get(META), META)
        if body is not document:
            metadata.update(self._parse_meta(body.get(META), f"{self._section}.{META}"))

        return UpdatePolicy(
            latest_available_version=latest,
            minimum_required_version=minimum,
            notification_type=notification,
            metadata=metadata,
        )

    def _parse_latest(self, raw: Any) -> tuple[str, NotificationType]:
        if raw is None:
            raise MalformedDocumentError(f"Missing required field {LATEST_VERSION!r}")
        if isinstance(raw, dict):
            version = self._version_token(raw.get(VERSION), f"{LATEST_VERSION}.{VERSION}")
            return version, self._notification_type(raw.get(NOTIFICATION_TYPE))
        return self._version_token(raw, LATEST_VERSION), NotificationType.ONCE

    @staticmethod
    def _version_token(raw: Any, name: str) -> str:
        if raw is None:
            raise MalformedDocumentError(f"Missing required field {name!r}")
        if not isinstance(raw, str):
            raise MalformedDocumentError(f"Field {name!r} must be a string, got {type(raw).__name__}")
        try:
            parse_version(raw)
        except InvalidVersionFormatError as exc:
            raise MalformedDocumentError(f"Field {name!r} has an unparsable version {raw!r}") from exc
        return raw.strip()

    @staticmethod
    def _notification_type(raw: Any) -> NotificationType:
        if raw is None:
            return NotificationType.ONCE
        if isinstance(raw, str):
            try:
                return NotificationType[raw.strip().upper()]
            except KeyError:
                pass
        raise MalformedDocumentError(f"Invalid notification type {raw!r}")

    @staticmethod
    def _parse_meta(raw: Any, name: str) -> dict[str, str]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise MalformedDocumentError(f"Field {name!r} must be an object")
        meta: dict[str, str] = {}
        for key, value in raw.items():
            if isinstance(value, (dict, list)):
                raise MalformedDocumentError(f"Metadata value for {key!r} must be a scalar")
            if isinstance(value, bool):
                value = "true" if value else "false"
            meta[key] = value if isinstance(value, str) else json.dumps(value)
        return meta
