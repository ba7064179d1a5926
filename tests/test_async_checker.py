"""Tests for check_for_updates_async."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest
import respx

from update_checker.async_checker import check_for_updates_async
from update_checker.async_loader import AsyncNetworkLoader
from update_checker.exceptions import MalformedDocumentError, UrlNotSetError
from update_checker.loaders import StaticLoader
from update_checker.models import CheckResult, NotificationType, UpdateStatus
from update_checker.parsers import JsonPolicyParser

URL = "https://updates.example.com/policy.json"


class TestCheck:
    @respx.mock
    async def test_optional_over_network(self):
        respx.get(URL).respond(
            json={"latest_version": {"version": "1.3.0", "notification_type": "ALWAYS"}, "meta": {"k": "v"}}
        )
        async with AsyncNetworkLoader(URL) as loader:
            result = await check_for_updates_async("1.2.0", loader, JsonPolicyParser())
        assert result == CheckResult.optional_update("1.3.0", NotificationType.ALWAYS, {"k": "v"})

    async def test_sync_loader(self):
        loader = StaticLoader('{"minimum_version": "1.1.0", "latest_version": "2.0.0"}')
        result = await check_for_updates_async("1.0.0", loader, JsonPolicyParser())
        assert result.status is UpdateStatus.MANDATORY
        assert result.update_version == "2.0.0"

    async def test_validation_error(self):
        async with AsyncNetworkLoader("") as loader:
            with pytest.raises(UrlNotSetError):
                await check_for_updates_async("1.0", loader, JsonPolicyParser())

    async def test_malformed(self):
        with pytest.raises(MalformedDocumentError):
            await check_for_updates_async("1.0", StaticLoader("[]"), JsonPolicyParser())


class TestTaskCancellation:
    async def test_cancel_while_loading(self):
        started = asyncio.Event()

        class SlowLoader:
            def __init__(self) -> None:
                self.cancel = MagicMock()

            def validate(self) -> None:
                pass

            async def load(self) -> str:
                started.set()
                await asyncio.sleep(60)
                return '{"latest_version": "2.0"}'

        loader = SlowLoader()
        parser = MagicMock(spec=JsonPolicyParser)
        task = asyncio.create_task(check_for_updates_async("1.0", loader, parser))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        loader.cancel.assert_called_once()
        parser.parse.assert_not_called()
