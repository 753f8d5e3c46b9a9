"""Request dispatching for the Telegram Bot API.

``TelegramHttp`` is the caller-facing surface: ``get``, ``post`` and
``upload_file`` turn call parameters into a request body, wrap it in a
``TelegramRequest`` together with the access token and timeouts, and hand it
to the configured transport.

The most recent response is kept in :attr:`TelegramHttp.last_response`. The
slot is overwritten on every send (last write wins) and is not safe to read
while another send is in flight on the same instance; use one instance per
concurrent caller.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from telegram_bot_http.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from telegram_bot_http.exceptions import InvalidArgumentError
from telegram_bot_http.multipart import (
    iter_input_files,
    prepare_multipart_params,
    requires_multipart,
    validate_input_file_field,
)
from telegram_bot_http.params import normalize_params, reply_markup_to_string
from telegram_bot_http.request import TelegramRequest
from telegram_bot_http.transport import HttpTransport, HttpxTransport
from telegram_bot_http.types import FormBody, RequestBody

if TYPE_CHECKING:
    from telegram_bot_http.config import FrozenConfig, ResolvedConfig
    from telegram_bot_http.response import TelegramResponse

log = logging.getLogger(__name__)


def _reject_input_files(endpoint: str, params: Mapping[str, Any]) -> None:
    """Form bodies have no way to carry file bytes."""
    for name, value in params.items():
        if next(iter_input_files(value), None) is not None:
            raise InvalidArgumentError(
                f"'{name}' holds an InputFile; send {endpoint} with upload_file()"
            )


class TelegramHttp:
    """Builds and dispatches Bot API requests."""

    def __init__(
        self,
        access_token: str,
        transport: HttpTransport | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        is_async: bool = False,
    ) -> None:
        """Create a client.

        Args:
            access_token: Bot token used for every request.
            transport: Transport to dispatch through. Defaults to
                ``HttpxTransport`` against the public Bot API server.
            timeout: Per-request timeout in seconds.
            connect_timeout: Connection timeout in seconds.
            is_async: Ask the transport to send without blocking.
        """
        self.access_token = access_token
        self._transport = transport
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.is_async = is_async
        self.last_response: TelegramResponse | None = None

    @classmethod
    def from_config(
        cls,
        config: FrozenConfig | ResolvedConfig,
        transport: HttpTransport | None = None,
    ) -> TelegramHttp:
        """Build a client from resolved configuration.

        Raises:
            InvalidArgumentError: If the configuration has no bot token.
        """
        if not config.bot_token:
            raise InvalidArgumentError(
                "bot_token is required. Set TELEGRAM_BOT_TOKEN or pass it programmatically."
            )
        return cls(
            config.bot_token,
            transport or HttpxTransport(base_url=config.base_url),
            timeout=config.timeout,
            connect_timeout=config.connect_timeout,
            is_async=config.async_requests,
        )

    # --- Settings ---

    @property
    def transport(self) -> HttpTransport:
        """The transport requests are dispatched through, created on first use."""
        if self._transport is None:
            self._transport = HttpxTransport()
        return self._transport

    def set_transport(self, transport: HttpTransport) -> TelegramHttp:
        """Replace the transport."""
        self._transport = transport
        return self

    def set_access_token(self, access_token: str) -> TelegramHttp:
        """Replace the bot token used for subsequent requests."""
        self.access_token = access_token
        return self

    def set_async_request(self, is_async: bool) -> TelegramHttp:
        """Make subsequent requests (non-)blocking."""
        self.is_async = is_async
        return self

    def set_timeout(self, timeout: float) -> TelegramHttp:
        """Set the per-request timeout in seconds."""
        self.timeout = timeout
        return self

    def set_connect_timeout(self, connect_timeout: float) -> TelegramHttp:
        """Set the connection timeout in seconds."""
        self.connect_timeout = connect_timeout
        return self

    # --- Calls ---

    def get(self, endpoint: str, params: Mapping[str, Any] | None = None) -> TelegramResponse:
        """Send a GET request with ``params`` as the query string.

        Raises:
            InvalidArgumentError: If a parameter holds an ``InputFile``.
        """
        params = params or {}
        _reject_input_files(endpoint, params)
        body = FormBody(reply_markup_to_string(params))
        return self.send_request("GET", endpoint, body)

    def post(
        self,
        endpoint: str,
        params: Any = None,  # noqa: ANN401
        file_upload: bool = False,
    ) -> TelegramResponse:
        """Send a POST request.

        Args:
            endpoint: Bot API method name, e.g. ``"sendMessage"``.
            params: Field mapping, or a multipart part list when ``file_upload``.
            file_upload: Send as multipart/form-data.

        Raises:
            InvalidArgumentError: If a form parameter holds an ``InputFile``;
                files have to go through :meth:`upload_file`.
        """
        params = params or {}
        if not file_upload:
            _reject_input_files(endpoint, params)
        body = normalize_params(params, file_upload)
        return self.send_request("POST", endpoint, body)

    def upload_file(
        self, endpoint: str, params: Mapping[str, Any], input_file_field: str
    ) -> TelegramResponse:
        """Send a call whose ``input_file_field`` holds files.

        Calls where the field only holds file identifiers the platform already
        knows, and no other parameter holds an ``InputFile``, are sent as a
        plain form POST. Otherwise the parameters are turned into a multipart
        body.

        Raises:
            MissingUploadParamError: If ``input_file_field`` is missing.
            InvalidInputFileEntityError: If the field holds something that is
                neither a file identifier nor an ``InputFile``.
        """
        candidates = validate_input_file_field(params, input_file_field)
        if not requires_multipart(candidates, params):
            log.debug("'%s' holds file ids only; sending %s as a form", input_file_field, endpoint)
            return self.post(endpoint, params)

        parts = prepare_multipart_params(params, input_file_field, candidates)
        return self.post(endpoint, parts, file_upload=True)

    def send_request(
        self, method: str, endpoint: str, body: RequestBody | None = None
    ) -> TelegramResponse:
        """Dispatch one request and record its response as ``last_response``.

        Raises:
            TransportError: If the transport fails. No retry is attempted.
        """
        request = self.resolve_request(method, endpoint, body)
        log.debug(
            "Dispatching %s %s (%s, async=%s)",
            request.method,
            endpoint,
            type(request.body).__name__,
            request.is_async,
        )
        self.last_response = self.transport.send(request)
        return self.last_response

    def resolve_request(
        self, method: str, endpoint: str, body: RequestBody | None = None
    ) -> TelegramRequest:
        """Build the request envelope from the current client settings."""
        return TelegramRequest(
            access_token=self.access_token,
            method=method,
            endpoint=endpoint,
            body=body if body is not None else FormBody({}),
            is_async=self.is_async,
            timeout=self.timeout,
            connect_timeout=self.connect_timeout,
        )

    # --- Files ---

    def get_file(self, file_id: str) -> dict[str, Any]:
        """Call ``getFile`` and return its result.

        Raises:
            TelegramResponseError: If the Bot API rejects the call.
        """
        response = self.get("getFile", {"file_id": file_id}).raise_for_error()
        result = response.result
        if not isinstance(result, dict):
            raise InvalidArgumentError(f"getFile returned no file for {file_id!r}")
        return result

    def resolve_file_path(self, file_id: str) -> str:
        """Remote ``file_path`` of a previously uploaded file."""
        file_path = self.get_file(file_id).get("file_path")
        if not file_path:
            raise InvalidArgumentError(f"File {file_id!r} has no downloadable file_path")
        return file_path

    def download_file(
        self, file: str | Mapping[str, Any], filename: str | os.PathLike[str]
    ) -> Path:
        """Download a file by id, or from a ``File``-like mapping.

        Args:
            file: A file id, or a mapping with ``file_id`` and optionally
                ``file_path`` and ``file_name``.
            filename: Destination file, or a directory when it has no
                extension; the original file name (or the remote basename)
                is then appended.

        Returns:
            Path of the written file.
        """
        original_name: str | None = None
        file_path: str | None = None
        if isinstance(file, Mapping):
            original_name = file.get("file_name")
            file_path = file.get("file_path")
            file = file.get("file_id")  # type: ignore[assignment]
        if not isinstance(file, str) or not file:
            raise InvalidArgumentError(
                "Invalid file param provided. Please provide a file_id, or a "
                "File or response mapping containing file_id"
            )
        if not file_path:
            file_path = self.resolve_file_path(file)

        destination = Path(filename)
        if not destination.suffix:
            destination = destination / (original_name or Path(file_path).name)

        log.debug("Downloading %s to %s", file, destination)
        return self.transport.download(self.access_token, file_path, destination)
