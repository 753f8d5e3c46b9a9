"""Shared test doubles and assertions."""

from collections.abc import Sequence
import json
from pathlib import Path
import re
from typing import Any

from telegram_bot_http import InputFile, MultipartPart, TelegramRequest, TelegramResponse

# A syntactically valid platform file id.
FILE_ID = "AgACAgIAAxkBAAIBY2Zk7Q9fL3vR1pX8"

_ATTACH_RE = re.compile(r"attach://([0-9A-Za-z_-]+)")


class RecordingTransport:
    """Records every request and replies with a queued (or default) payload."""

    def __init__(self, payload: dict[str, Any] | None = None) -> None:
        self.requests: list[TelegramRequest] = []
        self.downloads: list[tuple[str, str, Path]] = []
        self.payloads: list[dict[str, Any]] = []
        self.default_payload = payload or {"ok": True, "result": True}
        self.error: Exception | None = None

    def queue(self, payload: dict[str, Any]) -> "RecordingTransport":
        self.payloads.append(payload)
        return self

    def send(self, request: TelegramRequest) -> TelegramResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        payload = self.payloads.pop(0) if self.payloads else self.default_payload
        return TelegramResponse(
            request, status_code=200, body=json.dumps(payload).encode("utf-8")
        )

    def download(self, access_token: str, file_path: str, destination: Path) -> Path:
        self.downloads.append((access_token, file_path, Path(destination)))
        return Path(destination)

    @property
    def last_request(self) -> TelegramRequest:
        return self.requests[-1]


def read_part(part: MultipartPart) -> bytes:
    """Bytes carried by a part, opening file parts."""
    if isinstance(part.contents, InputFile):
        _, stream, _ = part.contents.open()
        with stream:
            return stream.read()
    if isinstance(part.contents, str):
        return part.contents.encode("utf-8")
    return part.contents


def attach_tokens(parts: Sequence[MultipartPart]) -> list[str]:
    """Every attach:// token referenced from text parts."""
    return [
        token
        for part in parts
        if isinstance(part.contents, str)
        for token in _ATTACH_RE.findall(part.contents)
    ]


def assert_attachments_resolve(parts: Sequence[MultipartPart]) -> None:
    """Each attach:// reference has exactly one part with that name."""
    names = [part.name for part in parts]
    for token in attach_tokens(parts):
        assert names.count(token) == 1, f"attach://{token} has {names.count(token)} parts"
