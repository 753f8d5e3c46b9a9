"""HTTP transports that perform Bot API requests.

``TelegramHttp`` only depends on the :class:`HttpTransport` protocol. The
default :class:`HttpxTransport` encodes request bodies for ``httpx``, applies
the per-request timeouts and turns ``httpx`` failures into
``TransportError``. It does not retry.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx

from telegram_bot_http.constants import ASYNC_MAX_WORKERS, DEFAULT_BASE_URL, DEFAULT_MIME_TYPE
from telegram_bot_http.exceptions import TransportError
from telegram_bot_http.input_file import InputFile
from telegram_bot_http.multipart import to_json
from telegram_bot_http.request import TelegramRequest
from telegram_bot_http.response import TelegramResponse
from telegram_bot_http.types import FormBody, MultipartBody

log = logging.getLogger(__name__)


@runtime_checkable
class HttpTransport(Protocol):
    """What the dispatcher needs from a transport."""

    def send(self, request: TelegramRequest) -> TelegramResponse:
        """Perform ``request``; raise ``TransportError`` on failure."""
        ...

    def download(self, access_token: str, file_path: str, destination: Path) -> Path:
        """Save a remote file to ``destination`` and return the path written."""
        ...


def encode_form_value(value: Any) -> str | None:  # noqa: ANN401
    """Encode one form field value; None means the field is omitted."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool | dict | list | tuple):
        return to_json(value)
    return str(value)


def encode_form_fields(body: FormBody) -> dict[str, str]:
    """Form fields with nested values JSON-encoded and None values dropped."""
    encoded = {name: encode_form_value(value) for name, value in body.fields.items()}
    return {name: value for name, value in encoded.items() if value is not None}


class HttpxTransport:
    """``httpx``-backed transport.

    A transport owns one ``httpx.Client``. Asynchronous requests are run on a
    small thread pool and returned as pending ``TelegramResponse`` objects.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.Client | None = None,
        max_workers: int = ASYNC_MAX_WORKERS,
    ) -> None:
        """Create a transport.

        Args:
            base_url: Bot API server root.
            client: Optional preconfigured ``httpx.Client`` (e.g. with a mock
                transport or proxy settings).
            max_workers: Thread pool size used for asynchronous requests.
        """
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client()
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    def send(self, request: TelegramRequest) -> TelegramResponse:
        """Perform ``request``, in the background when ``request.is_async``."""
        if request.is_async:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="telegram-http"
                )
            future = self._executor.submit(self._send, request)
            return TelegramResponse(request, pending=future)
        return self._send(request)

    def _send(self, request: TelegramRequest) -> TelegramResponse:
        timeout = httpx.Timeout(request.timeout, connect=request.connect_timeout)
        url = request.url(self.base_url)
        with ExitStack() as stack:
            kwargs = self._encode_body(request, stack)
            try:
                response = self._client.request(
                    request.method, url, timeout=timeout, **kwargs
                )
            except httpx.HTTPError as e:
                log.debug("Transport failure on %s: %s", request.endpoint, type(e).__name__)
                raise TransportError(
                    f"Request to {request.endpoint} failed: {type(e).__name__}"
                ) from e
        log.debug("%s %s -> HTTP %d", request.method, request.endpoint, response.status_code)
        return TelegramResponse(
            request,
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    @staticmethod
    def _encode_body(request: TelegramRequest, stack: ExitStack) -> dict[str, Any]:
        """httpx keyword arguments for the request body.

        Every multipart part, text included, is passed through ``files`` so
        httpx always encodes multipart/form-data and keeps the part order.
        Text parts carry no filename, which httpx renders as a plain form
        field. File streams are opened here and closed when ``stack`` exits.
        An empty ``MultipartBody`` is sent without a body.
        """
        body = request.body
        if isinstance(body, MultipartBody):
            files: list[tuple[str, tuple[Any, ...]]] = []
            for part in body.parts:
                if isinstance(part.contents, InputFile):
                    filename, stream, mime_type = part.contents.open()
                    stack.callback(stream.close)
                    files.append((part.name, (part.filename or filename, stream, mime_type)))
                elif part.filename is not None:
                    files.append((part.name, (part.filename, part.contents, DEFAULT_MIME_TYPE)))
                else:
                    files.append((part.name, (None, part.contents)))
            return {"files": files} if files else {}
        fields = encode_form_fields(body)
        if request.method == "GET":
            return {"params": fields}
        return {"data": fields}

    def download(self, access_token: str, file_path: str, destination: Path) -> Path:
        """Stream ``{base_url}/file/bot{token}/{file_path}`` into ``destination``."""
        url = f"{self.base_url}/file/bot{access_token}/{file_path.lstrip('/')}"
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._client.stream("GET", url, follow_redirects=True) as response:
                response.raise_for_status()
                with destination.open("wb") as fh:
                    for chunk in response.iter_bytes():
                        fh.write(chunk)
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Download of {file_path} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Download of {file_path} failed: {type(e).__name__}") from e
        log.debug("Downloaded %s to %s", file_path, destination)
        return destination

    def close(self) -> None:
        """Release the HTTP client and any worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._client.close()

    def __enter__(self) -> HttpxTransport:  # noqa: D105
        return self

    def __exit__(self, *exc_info: object) -> None:  # noqa: D105
        self.close()
