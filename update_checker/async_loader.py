"""Asynchronous network loader (requires ``httpx``)."""

from __future__ import annotations

import logging

import httpx

from update_checker.exceptions import (
    ConfigurationError,
    TransportError,
    UrlNotSetError,
)
from update_checker.loaders import DEFAULT_CHUNK_SIZE, DEFAULT_TIMEOUT, CancellationToken

logger = logging.getLogger(__name__)


class AsyncNetworkLoader:
    """Fetch the policy document with :class:`httpx.AsyncClient`.

    Requires the ``httpx`` package (install with ``pip install update-checker[async]``).

    Args:
        url: Location of the policy document.
        timeout: Request timeout in seconds.
        username: Basic authentication user name.
        password: Basic authentication password.
        client: Optional pre-configured :class:`httpx.AsyncClient`.
        chunk_size: Number of bytes read between cancellation checks.

    Example::

        async with AsyncNetworkLoader("https://example.com/update.json") as loader:
            content = await loader.load()
    """

    def __init__(
        self,
        url: str | None,
        timeout: float = DEFAULT_TIMEOUT,
        username: str | None = None,
        password: str | None = None,
        client: httpx.AsyncClient | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._auth = httpx.BasicAuth(username, password) if username is not None and password is not None else None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._chunk_size = chunk_size
        self._token = CancellationToken()

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def validate(self) -> None:
        if not self._url or not self._url.strip():
            raise UrlNotSetError("Url is not set.")
        if self._timeout is not None and self._timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self._timeout}")

    async def load(self) -> str:
        """Download the document.

        Raises:
            LoadCancelledError: If :meth:`cancel` was called before or during
                the transfer.
            TransportError: On connection failures, timeouts and non-2xx
                responses.
        """
        self._token.raise_if_cancelled()
        logger.debug("Fetching update policy from %s", self._url)
        try:
            async with self._client.stream(
                "GET",
                self._url,  # type: ignore[arg-type]
                auth=self._auth or httpx.USE_CLIENT_DEFAULT,
                timeout=self._timeout,
            ) as resp:
                self._token.raise_if_cancelled()
                if not resp.is_success:
                    raise TransportError(
                        f"Unexpected HTTP status {resp.status_code} for {resp.url}",
                        status_code=resp.status_code,
                    )
                buf = bytearray()
                async for chunk in resp.aiter_bytes(self._chunk_size):
                    self._token.raise_if_cancelled()
                    buf.extend(chunk)
                self._token.raise_if_cancelled()
                encoding = resp.encoding or "utf-8"
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc)) from exc

        logger.debug("Read %d bytes", len(buf))
        try:
            return buf.decode(encoding)
        except UnicodeDecodeError as exc:
            raise TransportError(f"Response is not valid {encoding}: {exc}") from exc

    def cancel(self) -> None:
        self._token.cancel()

    async def close(self) -> None:
        """Close the underlying HTTP client if owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncNetworkLoader:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
