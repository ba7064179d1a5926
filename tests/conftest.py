"""Shared test fixtures."""

from __future__ import annotations

import json
import threading

import pytest

from update_checker.models import CheckResult


@pytest.fixture()
def policy_json() -> str:
    return json.dumps(
        {
            "minimum_version": "1.1.0",
            "latest_version": {"version": "2.0.0", "notification_type": "ALWAYS"},
            "meta": {"title": "New release"},
        }
    )


class RecordingCallback:
    """Callback that records every notification it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.event = threading.Event()

    def on_success(self, result: CheckResult) -> None:
        self.calls.append(("success", result))
        self.event.set()

    def on_error(self, error: Exception) -> None:
        self.calls.append(("error", error))
        self.event.set()

    def on_cancelled(self) -> None:
        self.calls.append(("cancelled", None))
        self.event.set()


@pytest.fixture()
def callback() -> RecordingCallback:
    return RecordingCallback()
