"""Errors raised while talking to the recognition provider."""

from __future__ import annotations

from typing import Any


class UpstreamError(Exception):
    """The provider call failed (HTTP error status or transport failure)."""

    def __init__(self, message: str, *, status_code: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and 500 <= self.status_code < 600

    @property
    def provider_message(self) -> str | None:
        """The provider's own ``status.text``, when the body carries one."""
        if isinstance(self.body, dict):
            status = self.body.get("status")
            if isinstance(status, dict) and status.get("text"):
                return str(status["text"])
        return None


class MalformedPayloadError(UpstreamError):
    """The provider answered with JSON of an unexpected shape."""


class ProviderNotConfiguredError(RuntimeError):
    """Provider credentials are missing from the environment."""
