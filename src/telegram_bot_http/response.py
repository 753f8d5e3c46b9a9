"""Bot API response wrapper."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future
import json
from typing import Any

from telegram_bot_http.exceptions import TelegramResponseError
from telegram_bot_http.request import TelegramRequest


class TelegramResponse:
    """Result of one request: status, raw body and the decoded Bot API payload.

    A response produced by an asynchronous send wraps a pending future; its
    fields resolve (blocking if needed) on first access.
    """

    def __init__(
        self,
        request: TelegramRequest,
        status_code: int | None = None,
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
        *,
        pending: Future[TelegramResponse] | None = None,
    ) -> None:
        """Wrap a completed response, or a pending one via ``pending``."""
        self.request = request
        self._status_code = status_code
        self._body = body
        self._headers = dict(headers or {})
        self._pending = pending
        self._decoded: dict[str, Any] | None = None

    def _resolve(self) -> None:
        if self._pending is None:
            return
        completed = self._pending.result()
        self._status_code = completed.status_code
        self._body = completed.body
        self._headers = dict(completed.headers)
        self._pending = None

    @property
    def is_pending(self) -> bool:
        """True while an asynchronous send has not completed."""
        return self._pending is not None and not self._pending.done()

    @property
    def status_code(self) -> int | None:
        """HTTP status code."""
        self._resolve()
        return self._status_code

    @property
    def body(self) -> bytes:
        """Raw response body."""
        self._resolve()
        return self._body

    @property
    def headers(self) -> Mapping[str, str]:
        """Response headers."""
        self._resolve()
        return self._headers

    @property
    def decoded_body(self) -> dict[str, Any]:
        """JSON payload; empty when the body is not a JSON object."""
        if self._decoded is None:
            try:
                decoded = json.loads(self.body or b"null")
            except ValueError:
                decoded = None
            self._decoded = decoded if isinstance(decoded, dict) else {}
        return self._decoded

    @property
    def ok(self) -> bool:
        """The Bot API ``ok`` flag."""
        return self.decoded_body.get("ok") is True

    @property
    def is_error(self) -> bool:
        """True unless the Bot API reported success."""
        return not self.ok

    @property
    def result(self) -> Any:  # noqa: ANN401
        """The ``result`` field of a successful call."""
        return self.decoded_body.get("result")

    @property
    def description(self) -> str | None:
        """Error description sent by the Bot API."""
        return self.decoded_body.get("description")

    @property
    def error_code(self) -> int | None:
        """Error code sent by the Bot API, falling back to the HTTP status."""
        return self.decoded_body.get("error_code", self.status_code if self.is_error else None)

    def raise_for_error(self) -> TelegramResponse:
        """Raise ``TelegramResponseError`` if the call failed, else return self."""
        if self.is_error:
            raise TelegramResponseError(
                self.description or f"Unexpected response (HTTP {self.status_code})",
                self.error_code,
            )
        return self

    def __repr__(self) -> str:
        """Short representation without resolving pending responses."""
        if self._pending is not None:
            return f"TelegramResponse(endpoint={self.request.endpoint!r}, pending=True)"
        return (
            f"TelegramResponse(endpoint={self.request.endpoint!r}, "
            f"status_code={self._status_code!r})"
        )
