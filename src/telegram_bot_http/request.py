"""The outbound request envelope handed to a transport."""

from __future__ import annotations

import dataclasses

from telegram_bot_http.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from telegram_bot_http.types import FormBody, RequestBody


@dataclasses.dataclass(frozen=True, slots=True)
class TelegramRequest:
    """Everything a transport needs to perform one Bot API call.

    Built by ``TelegramHttp`` for each send and discarded once the response
    is returned. The access token is excluded from ``repr``.
    """

    access_token: str = dataclasses.field(repr=False)
    method: str
    endpoint: str
    body: RequestBody = dataclasses.field(default_factory=lambda: FormBody({}))
    is_async: bool = False
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self) -> None:
        """Normalize the HTTP method and validate timeouts."""
        object.__setattr__(self, "method", self.method.upper())
        if self.timeout <= 0 or self.connect_timeout <= 0:
            raise ValueError("timeout and connect_timeout must be positive")

    def url(self, base_url: str) -> str:
        """Full method URL, ``{base_url}/bot{token}/{endpoint}``."""
        return f"{base_url.rstrip('/')}/bot{self.access_token}/{self.endpoint.lstrip('/')}"
