"""Awaitable update check for asyncio applications."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from update_checker.engine import decide
from update_checker.models import CheckResult
from update_checker.parsers import PolicyParser

logger = logging.getLogger(__name__)


async def check_for_updates_async(current_version: str, loader: Any, parser: PolicyParser) -> CheckResult:
    """Validate, load, parse and decide, returning the :class:`CheckResult`.

    *loader* may be an :class:`~update_checker.async_loader.AsyncNetworkLoader`
    or any synchronous loader; a blocking ``load()`` runs in the default
    executor. Cancelling the awaiting task cancels the loader and re-raises
    :class:`asyncio.CancelledError`; nothing is parsed after a cancellation.

    Raises:
        ConfigurationError: If the loader is misconfigured.
        LoadCancelledError: If the loader was cancelled by someone else.
        TransportError: If the document could not be loaded.
        MalformedDocumentError: If the document is not a valid policy.
        InvalidVersionFormatError: If *current_version* cannot be parsed.
    """
    loader.validate()
    try:
        if inspect.iscoroutinefunction(loader.load):
            content = await loader.load()
        else:
            content = await asyncio.get_running_loop().run_in_executor(None, loader.load)
    except asyncio.CancelledError:
        logger.debug("Update check task cancelled while loading")
        loader.cancel()
        raise
    return decide(current_version, parser.parse(content))
