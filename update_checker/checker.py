"""Check orchestration: validate, load, parse and decide as one cancellable unit."""

from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Protocol, Union

from update_checker.engine import decide
from update_checker.exceptions import LoadCancelledError, UnsupportedResultAccessError
from update_checker.loaders import UpdateConfigLoader
from update_checker.models import CheckResult
from update_checker.parsers import PolicyParser

logger = logging.getLogger(__name__)


class CheckState(enum.Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    LOADING = "LOADING"
    PARSING = "PARSING"
    DECIDING = "DECIDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"

    @property
    def terminal(self) -> bool:
        return self in (CheckState.COMPLETED, CheckState.CANCELLED, CheckState.FAILED)


class UpdaterCallback(Protocol):
    """Receiver of exactly one of the three notifications per check."""

    def on_success(self, result: CheckResult) -> None: ...

    def on_error(self, error: Exception) -> None: ...

    def on_cancelled(self) -> None: ...


def _run_pipeline(
    current_version: str,
    loader: UpdateConfigLoader,
    parser: PolicyParser,
    enter: Callable[[CheckState], None],
) -> CheckResult:
    enter(CheckState.VALIDATING)
    loader.validate()
    enter(CheckState.LOADING)
    content = loader.load()
    enter(CheckState.PARSING)
    policy = parser.parse(content)
    enter(CheckState.DECIDING)
    return decide(current_version, policy)


class CheckHandle:
    """Handle to one running check, returned by :meth:`UpdateChecker.start`.

    ``cancel()`` may be called from any thread. Once it has been called the
    callback receives ``on_cancelled()``, even if the document finished
    loading before the loader noticed.
    """

    def __init__(self, loader: UpdateConfigLoader, callback: UpdaterCallback) -> None:
        self._loader = loader
        self._callback = callback
        self._lock = threading.Lock()
        self._state = CheckState.IDLE
        self._cancel_requested = threading.Event()
        self._done = threading.Event()
        self._future: Future | None = None

    @property
    def state(self) -> CheckState:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested.is_set()

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the callback has been notified; return ``False`` on timeout."""
        return self._done.wait(timeout)

    def cancel(self) -> None:
        """Request cancellation. Idempotent and never blocks on the worker."""
        if self._cancel_requested.is_set():
            return
        self._cancel_requested.set()
        logger.debug("Cancellation requested in state %s", self._state.name)
        self._loader.cancel()
        future = self._future
        if future is not None and future.cancel():
            # the worker never started, so nobody else will notify
            self._finish(CheckState.CANCELLED, self._callback.on_cancelled)

    def _attach(self, future: Future) -> None:
        self._future = future

    def _enter(self, state: CheckState) -> None:
        with self._lock:
            logger.debug("Update check %s -> %s", self._state.name, state.name)
            self._state = state
        if self._cancel_requested.is_set():
            raise LoadCancelledError("Check was cancelled")

    def _finish(self, state: CheckState, notify: Callable[..., None], *args: object) -> None:
        with self._lock:
            if self._state.terminal:
                return
            self._state = state
        try:
            notify(*args)
        except Exception:
            logger.warning("Update check callback raised", exc_info=True)
        finally:
            self._done.set()

    def _run(self, current_version: str, parser: PolicyParser) -> None:
        try:
            result = _run_pipeline(current_version, self._loader, parser, self._enter)
        except LoadCancelledError:
            logger.debug("Update check cancelled")
            self._finish(CheckState.CANCELLED, self._callback.on_cancelled)
        except UnsupportedResultAccessError as exc:
            # programming error in a collaborator: still exactly one notification
            logger.error("Update check hit a programming error", exc_info=True)
            self._finish(CheckState.FAILED, self._callback.on_error, exc)
        except Exception as exc:
            if self._cancel_requested.is_set():
                self._finish(CheckState.CANCELLED, self._callback.on_cancelled)
            else:
                logger.debug("Update check failed: %s", exc)
                self._finish(CheckState.FAILED, self._callback.on_error, exc)
        else:
            if self._cancel_requested.is_set():
                logger.debug("Discarding result computed after cancellation")
                self._finish(CheckState.CANCELLED, self._callback.on_cancelled)
            else:
                self._finish(CheckState.COMPLETED, self._callback.on_success, result)


class UpdateChecker:
    """Run update checks in the background or on the calling thread.

    Args:
        executor: Executor running background checks. When *None* a
            single-worker :class:`~concurrent.futures.ThreadPoolExecutor` is
            created and shut down by :meth:`close`.

    Example::

        with UpdateChecker() as checker:
            handle = checker.start("1.2.0", NetworkLoader(url), JsonPolicyParser(), callback)
            ...
            handle.cancel()
    """

    def __init__(self, executor: Union[Executor, None] = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="update-check")

    def start(
        self,
        current_version: str,
        loader: UpdateConfigLoader,
        parser: PolicyParser,
        callback: UpdaterCallback,
    ) -> CheckHandle:
        """Schedule a check and return its :class:`CheckHandle`.

        *callback* is notified exactly once, on the worker thread, unless the
        check is cancelled before the worker picks it up, in which case
        ``on_cancelled()`` runs on the thread calling ``cancel()``.
        """
        handle = CheckHandle(loader, callback)
        handle._attach(self._executor.submit(handle._run, current_version, parser))
        return handle

    def check(self, current_version: str, loader: UpdateConfigLoader, parser: PolicyParser) -> CheckResult:
        """Run a check on the calling thread.

        Raises:
            ConfigurationError: If the loader is misconfigured.
            LoadCancelledError: If the loader was cancelled.
            TransportError: If the document could not be loaded.
            MalformedDocumentError: If the document is not a valid policy.
            InvalidVersionFormatError: If *current_version* cannot be parsed.
        """
        return _run_pipeline(
            current_version,
            loader,
            parser,
            lambda state: logger.debug("Update check -> %s", state.name),
        )

    def close(self) -> None:
        """Shut down the executor if owned by this instance."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def __enter__(self) -> UpdateChecker:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
