"""Request body types shared by the normalizer, builder and transport.

A request body is either a flat mapping of form fields or an ordered tuple of
multipart parts. Both are immutable once built so that a ``TelegramRequest``
can be handed to a transport without defensive copies.
"""

from __future__ import annotations

import dataclasses
from types import MappingProxyType
import typing

if typing.TYPE_CHECKING:
    from telegram_bot_http.input_file import InputFile


@dataclasses.dataclass(frozen=True, slots=True)
class MultipartPart:
    """One named segment of a multipart body.

    ``contents`` holds text/JSON, raw bytes, or an ``InputFile`` whose bytes
    are materialized by the transport at send time.
    """

    name: str
    contents: str | bytes | InputFile
    filename: str | None = None

    @property
    def is_file(self) -> bool:
        """True when this part carries file bytes rather than a text value."""
        return self.filename is not None


@dataclasses.dataclass(frozen=True, slots=True)
class FormBody:
    """URL-encoded (GET query or POST form) field mapping."""

    fields: typing.Mapping[str, typing.Any]

    def __post_init__(self) -> None:
        """Freeze the field mapping."""
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclasses.dataclass(frozen=True, slots=True)
class MultipartBody:
    """Ordered list of multipart parts (text parts first, file parts last)."""

    parts: tuple[MultipartPart, ...]

    def __post_init__(self) -> None:
        """Freeze the part sequence."""
        if not isinstance(self.parts, tuple):
            object.__setattr__(self, "parts", tuple(self.parts))

    def get(self, name: str) -> MultipartPart | None:
        """Return the first part with ``name``, or None."""
        return next((part for part in self.parts if part.name == name), None)

    @property
    def names(self) -> tuple[str, ...]:
        """Part names in body order."""
        return tuple(part.name for part in self.parts)


RequestBody = FormBody | MultipartBody
