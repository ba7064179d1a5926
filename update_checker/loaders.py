"""Loaders that fetch the raw policy document.

Every loader satisfies :class:`UpdateConfigLoader`: ``validate()`` checks the
configuration without I/O, ``load()`` blocks until the document is read and
``cancel()`` may be called from any thread while ``load()`` runs.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, Protocol, Union, runtime_checkable

import requests

from update_checker.exceptions import (
    ConfigurationError,
    LoadCancelledError,
    TransportError,
    UrlNotSetError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60
DEFAULT_CHUNK_SIZE = 1024


@runtime_checkable
class UpdateConfigLoader(Protocol):
    """Capability every transport provides to the update checker."""

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the loader cannot run."""

    def load(self) -> str:
        """Return the document content, or raise ``LoadCancelledError`` / ``TransportError``."""

    def cancel(self) -> None:
        """Request cancellation of a running or future ``load()``."""


class CancellationToken:
    """One-way cancellation flag shared between a loader and its canceller."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise LoadCancelledError("Loading was cancelled")


def _declared_charset(content_type: str) -> str | None:
    """Return the charset declared in a Content-Type header, or ``None``."""
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip().strip("\"'") or None
    return None


def _read_chunks(chunks: Iterable[bytes], token: CancellationToken, encoding: str) -> str:
    buf = bytearray()
    for chunk in chunks:
        token.raise_if_cancelled()
        buf.extend(chunk)
    token.raise_if_cancelled()
    logger.debug("Read %d bytes", len(buf))
    try:
        return buf.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise TransportError(f"Response is not valid {encoding}: {exc}") from exc


class NetworkLoader:
    """Fetch the policy document over HTTP(S) with :mod:`requests`.

    Args:
        url: Location of the policy document.
        timeout: Connect and read timeout in seconds.
        username: Basic authentication user name.
        password: Basic authentication password. Credentials are only sent
            when both *username* and *password* are set.
        session: Optional pre-configured :class:`requests.Session` for
            connection pooling or custom headers.
        chunk_size: Number of bytes read between cancellation checks.

    Example::

        loader = NetworkLoader("https://example.com/update.json", timeout=10)
        loader.validate()
        content = loader.load()
    """

    def __init__(
        self,
        url: str | None,
        timeout: float = DEFAULT_TIMEOUT,
        username: str | None = None,
        password: str | None = None,
        session: requests.Session | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._auth = (username, password) if username is not None and password is not None else None
        self._session = session or requests.Session()
        self._chunk_size = chunk_size
        self._token = CancellationToken()

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def validate(self) -> None:
        if not self._url or not self._url.strip():
            raise UrlNotSetError("Url is not set.")
        if self._timeout is not None and self._timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self._timeout}")

    def load(self) -> str:
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
            resp = self._session.get(
                self._url,
                auth=self._auth,
                timeout=self._timeout,
                stream=True,
            )
        except requests.Timeout as exc:
            raise TransportError(f"Request timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc

        try:
            # headers are in, body not consumed yet
            self._token.raise_if_cancelled()
            self._raise_for_status(resp)
            encoding = _declared_charset(resp.headers.get("content-type", "")) or "utf-8"
            try:
                return _read_chunks(resp.iter_content(self._chunk_size), self._token, encoding)
            except requests.RequestException as exc:
                raise TransportError(str(exc)) from exc
        finally:
            resp.close()

    def cancel(self) -> None:
        self._token.cancel()

    @staticmethod
    def _raise_for_status(resp: requests.Response) -> None:
        if 200 <= resp.status_code < 300:
            return
        raise TransportError(
            f"Unexpected HTTP status {resp.status_code} for {resp.url}",
            status_code=resp.status_code,
        )


class ResourceLoader:
    """Read the policy document from a file bundled with the application.

    Args:
        path: Path to the document.
        encoding: Text encoding of the file.
        chunk_size: Number of bytes read between cancellation checks.
    """

    def __init__(
        self,
        path: Union[str, Path, None],
        encoding: str = "utf-8",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._path = Path(path) if path else None
        self._encoding = encoding
        self._chunk_size = chunk_size
        self._token = CancellationToken()

    def validate(self) -> None:
        if self._path is None:
            raise ConfigurationError("Resource path is not set.")

    def load(self) -> str:
        self._token.raise_if_cancelled()
        logger.debug("Reading update policy from %s", self._path)
        try:
            with open(self._path, "rb") as fh:  # type: ignore[arg-type]
                self._token.raise_if_cancelled()
                chunks = iter(lambda: fh.read(self._chunk_size), b"")
                return _read_chunks(chunks, self._token, self._encoding)
        except OSError as exc:
            raise TransportError(f"Cannot read {self._path}: {exc}") from exc

    def cancel(self) -> None:
        self._token.cancel()


class StaticLoader:
    """Serve a document already held in memory, e.g. from a content store."""

    def __init__(self, content: str | None) -> None:
        self._content = content
        self._token = CancellationToken()

    def validate(self) -> None:
        if self._content is None:
            raise ConfigurationError("Content is not set.")

    def load(self) -> str:
        self._token.raise_if_cancelled()
        return self._content  # type: ignore[return-value]

    def cancel(self) -> None:
        self._token.cancel()
