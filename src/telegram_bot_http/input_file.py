"""File references that can be attached to multipart requests.

An ``InputFile`` wraps one of four byte sources (a local path, an in-memory
buffer, a readable stream, or a remote URL). Nothing is read when the object
is created or when a multipart part is built from it: bytes are materialized
by :meth:`InputFile.open`, which the transport calls at send time.
"""

from __future__ import annotations

from enum import Enum
import io
import logging
import mimetypes
import os
from pathlib import Path, PurePosixPath
import typing
from urllib.parse import urlsplit
import uuid

import httpx

from telegram_bot_http.constants import (
    ATTACH_SCHEME,
    DEFAULT_MIME_TYPE,
    URL_FETCH_TIMEOUT,
)
from telegram_bot_http.exceptions import InvalidArgumentError, UnreadableSourceError
from telegram_bot_http.types import MultipartPart

log = logging.getLogger(__name__)


class InputFileKind(str, Enum):
    """Where the bytes of an ``InputFile`` come from."""

    PATH = "path"
    BUFFER = "buffer"
    STREAM = "stream"
    URL = "url"


class InputFile:
    """A file to upload to the Bot API.

    Instances are created per call and should not be reused across requests.
    Path, buffer and URL sources are re-opened on every :meth:`open`; a
    caller-supplied stream can only be consumed once.
    """

    __slots__ = ("_consumed", "_multipart_name", "filename", "kind", "mime_type", "source")

    def __init__(
        self,
        kind: InputFileKind,
        source: str | bytes | typing.BinaryIO,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> None:
        """Prefer the ``from_*`` constructors or :meth:`create`."""
        self.kind = kind
        self.source = source
        self.filename = filename
        self.mime_type = mime_type
        self._multipart_name: str | None = None
        self._consumed = False

    # --- Constructors ---

    @classmethod
    def from_path(
        cls,
        path: str | os.PathLike[str],
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> InputFile:
        """Reference a file on the local filesystem."""
        return cls(InputFileKind.PATH, os.fspath(path), filename, mime_type)

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> InputFile:
        """Reference an in-memory buffer."""
        return cls(InputFileKind.BUFFER, bytes(data), filename, mime_type)

    @classmethod
    def from_stream(
        cls,
        stream: typing.BinaryIO,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> InputFile:
        """Reference an already open binary stream."""
        if not callable(getattr(stream, "read", None)):
            raise InvalidArgumentError("stream must expose a read() method")
        return cls(InputFileKind.STREAM, stream, filename, mime_type)

    @classmethod
    def from_url(
        cls,
        url: str,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> InputFile:
        """Reference a remote file that is fetched when the request is sent."""
        if urlsplit(url).scheme not in {"http", "https"}:
            raise InvalidArgumentError(f"Unsupported URL scheme: {url}")
        return cls(InputFileKind.URL, url, filename, mime_type)

    @classmethod
    def create(
        cls,
        value: typing.Any,  # noqa: ANN401
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> InputFile:
        """Build an ``InputFile`` from a path, URL, bytes or stream."""
        if isinstance(value, InputFile):
            return value
        if isinstance(value, bytes | bytearray):
            return cls.from_bytes(value, filename, mime_type)
        if callable(getattr(value, "read", None)):
            return cls.from_stream(value, filename, mime_type)
        if isinstance(value, str) and urlsplit(value).scheme in {"http", "https"}:
            return cls.from_url(value, filename, mime_type)
        if isinstance(value, str | os.PathLike):
            return cls.from_path(value, filename, mime_type)
        raise InvalidArgumentError(
            f"Cannot create an InputFile from {type(value).__name__}"
        )

    # --- Naming ---

    @property
    def multipart_name(self) -> str:
        """Random token naming this file's part; stable for the instance."""
        if self._multipart_name is None:
            self._multipart_name = uuid.uuid4().hex
        return self._multipart_name

    @property
    def attach_string(self) -> str:
        """``attach://<token>`` reference usable inside JSON-encoded fields."""
        return f"{ATTACH_SCHEME}{self.multipart_name}"

    def get_filename(self) -> str:
        """Display filename sent with the part."""
        if self.filename:
            return self.filename
        if self.kind is InputFileKind.PATH:
            return Path(typing.cast(str, self.source)).name
        if self.kind is InputFileKind.URL:
            name = PurePosixPath(urlsplit(typing.cast(str, self.source)).path).name
            if name:
                return name
        if self.kind is InputFileKind.STREAM:
            name = getattr(self.source, "name", None)
            if isinstance(name, str) and name:
                return Path(name).name
        return self.multipart_name

    def get_mime_type(self) -> str:
        """MIME hint, guessed from the filename when not supplied."""
        if self.mime_type:
            return self.mime_type
        guessed, _ = mimetypes.guess_type(self.get_filename())
        return guessed or DEFAULT_MIME_TYPE

    # --- Multipart ---

    def to_multipart(self, name: str | None = None) -> MultipartPart:
        """Return the multipart part for this file without reading it.

        Args:
            name: Part name. Defaults to :attr:`multipart_name` so that the
                part matches :attr:`attach_string`.
        """
        return MultipartPart(
            name=name or self.multipart_name,
            contents=self,
            filename=self.get_filename(),
        )

    def open(self) -> tuple[str, typing.BinaryIO, str]:
        """Materialize the byte source.

        Returns:
            ``(filename, stream, mime_type)``. The caller owns the stream.

        Raises:
            UnreadableSourceError: If the source cannot be opened or fetched.
        """
        if self.kind is InputFileKind.PATH:
            stream = self._open_path()
        elif self.kind is InputFileKind.BUFFER:
            stream = io.BytesIO(typing.cast(bytes, self.source))
        elif self.kind is InputFileKind.URL:
            stream = self._fetch_url()
        else:
            stream = self._take_stream()
        return self.get_filename(), stream, self.get_mime_type()

    def _open_path(self) -> typing.BinaryIO:
        path = typing.cast(str, self.source)
        try:
            return Path(path).open("rb")
        except OSError as e:
            raise UnreadableSourceError(path, str(e)) from e

    def _fetch_url(self) -> typing.BinaryIO:
        url = typing.cast(str, self.source)
        log.debug("Fetching remote input file: %s", url)
        try:
            with httpx.Client(timeout=URL_FETCH_TIMEOUT) as client:
                response = client.get(url, follow_redirects=True)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UnreadableSourceError(
                url, f"HTTP error {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UnreadableSourceError(url, str(e)) from e
        return io.BytesIO(response.content)

    def _take_stream(self) -> typing.BinaryIO:
        stream = typing.cast(typing.BinaryIO, self.source)
        label = f"<stream {self.get_filename()}>"
        if self._consumed:
            raise UnreadableSourceError(label, "stream was already consumed")
        readable = getattr(stream, "readable", None)
        if getattr(stream, "closed", False) or (callable(readable) and not readable()):
            raise UnreadableSourceError(label, "stream is closed or not readable")
        self._consumed = True
        return stream

    def __repr__(self) -> str:
        """Short representation that never includes buffer contents."""
        source = (
            f"<{len(self.source)} bytes>"
            if isinstance(self.source, bytes)
            else self.source
            if isinstance(self.source, str)
            else "<stream>"
        )
        return f"InputFile(kind={self.kind.value!r}, source={source!r}, filename={self.get_filename()!r})"
