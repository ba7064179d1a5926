"""Environment-driven settings for building a checker pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from update_checker.exceptions import ConfigurationError
from update_checker.loaders import DEFAULT_TIMEOUT, NetworkLoader
from update_checker.parsers import JsonPolicyParser

ENV_PREFIX = "UPDATE_CHECKER_"


@dataclass(frozen=True)
class CheckerSettings:
    url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    username: str | None = None
    password: str | None = None
    section: str | None = None

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "CheckerSettings":
        """Read ``UPDATE_CHECKER_URL``, ``_TIMEOUT``, ``_USERNAME``, ``_PASSWORD`` and ``_SECTION``.

        Blank values count as unset. A missing URL is left for the loader's
        ``validate()`` to report.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            raw = (env.get(ENV_PREFIX + name) or "").strip()
            return raw or None

        timeout_raw = get("TIMEOUT")
        timeout: float = DEFAULT_TIMEOUT
        if timeout_raw is not None:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ConfigurationError(f"{ENV_PREFIX}TIMEOUT must be a number, got {timeout_raw!r}") from None
            if timeout <= 0:
                raise ConfigurationError(f"{ENV_PREFIX}TIMEOUT must be positive, got {timeout_raw!r}")

        return CheckerSettings(
            url=get("URL"),
            timeout=timeout,
            username=get("USERNAME"),
            password=get("PASSWORD"),
            section=get("SECTION"),
        )

    def build_loader(self) -> NetworkLoader:
        return NetworkLoader(self.url, timeout=self.timeout, username=self.username, password=self.password)

    def build_parser(self) -> JsonPolicyParser:
        return JsonPolicyParser(section=self.section)

    def __repr__(self) -> str:
        password = "***" if self.password is not None else None
        return (
            f"CheckerSettings(url={self.url!r}, timeout={self.timeout!r}, username={self.username!r}, "
            f"password={password!r}, section={self.section!r})"
        )
