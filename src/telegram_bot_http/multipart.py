"""Multipart construction for file-upload calls.

Upload calls name one field that is expected to hold files. That field is
validated up front (no partial requests are ever built) and every value is
classified once as either an ``InputFile`` to upload or a file identifier the
platform already knows. The classification is then reused to build the part
list:

- one text part per non-null parameter, with media groups JSON-encoded and
  their embedded files replaced by ``attach://<token>`` references;
- one file part per ``InputFile``, appended after the text parts.

Every ``attach://<token>`` written into a text part has exactly one sibling
file part named ``<token>``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
import dataclasses
from enum import Enum
import json
import logging
from typing import Any

from pydantic import BaseModel

from telegram_bot_http.constants import FILE_ID_PATTERN, MEDIA_KEY
from telegram_bot_http.exceptions import (
    InvalidInputFileEntityError,
    MissingUploadParamError,
)
from telegram_bot_http.input_file import InputFile
from telegram_bot_http.types import MultipartPart

log = logging.getLogger(__name__)


# --- Shape and classification ---


@dataclasses.dataclass(frozen=True, slots=True)
class WrappedValues:
    """A value normalized to a tuple, remembering whether it was a list.

    Single items are promoted once at the boundary; :meth:`unwrap` restores
    the caller's original shape on output.
    """

    items: tuple[Any, ...]
    was_list: bool

    @classmethod
    def wrap(cls, value: Any) -> WrappedValues:  # noqa: ANN401
        """Promote ``value`` to a tuple unless it already is a list/tuple."""
        if isinstance(value, list | tuple):
            return cls(tuple(value), was_list=True)
        return cls((value,), was_list=False)

    def unwrap(self, items: Sequence[Any]) -> Any:  # noqa: ANN401
        """Collapse ``items`` back to a single value if the input was singular."""
        if self.was_list:
            return list(items)
        return items[0]


class CandidateKind(str, Enum):
    """What a value under a file field turned out to be."""

    INPUT_FILE = "input_file"
    FILE_ID = "file_id"


@dataclasses.dataclass(frozen=True, slots=True)
class FileCandidate:
    """A validated entry of a file field."""

    kind: CandidateKind
    value: InputFile | str
    label: str


def is_file_id(value: Any) -> bool:  # noqa: ANN401
    """True for strings shaped like a platform file identifier."""
    return isinstance(value, str) and FILE_ID_PATTERN.match(value.strip()) is not None


def classify_candidate(value: Any, label: str) -> FileCandidate:  # noqa: ANN401
    """Classify one file-field entry.

    Raises:
        InvalidInputFileEntityError: If ``value`` is neither a file id nor an
            ``InputFile``. Paths and URLs must be wrapped in ``InputFile``.
    """
    if is_file_id(value):
        return FileCandidate(CandidateKind.FILE_ID, value, label)
    if isinstance(value, InputFile):
        return FileCandidate(CandidateKind.INPUT_FILE, value, label)
    raise InvalidInputFileEntityError(label)


def validate_input_file_field(
    params: Mapping[str, Any], input_file_field: str
) -> tuple[FileCandidate, ...]:
    """Validate the file field of an upload call and classify its entries.

    For the media key, each item's nested ``media`` value is checked instead
    of the item itself. Labels carry a ``#N`` suffix when the field held a list.

    Raises:
        MissingUploadParamError: If the field is absent or None.
        InvalidInputFileEntityError: If an entry is not uploadable.
    """
    if params.get(input_file_field) is None:
        raise MissingUploadParamError(input_file_field)

    wrapped = WrappedValues.wrap(params[input_file_field])
    candidates = []
    for index, item in enumerate(wrapped.items):
        label = f"{input_file_field} #{index}" if wrapped.was_list else input_file_field
        if input_file_field == MEDIA_KEY and isinstance(item, Mapping):
            item = item.get(MEDIA_KEY)
        candidates.append(classify_candidate(item, label))
    return tuple(candidates)


def iter_input_files(value: Any) -> Iterator[InputFile]:  # noqa: ANN401
    """Every ``InputFile`` in ``value``, searching nested mappings and lists."""
    if isinstance(value, InputFile):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from iter_input_files(item)
    elif isinstance(value, list | tuple):
        for item in value:
            yield from iter_input_files(item)


def requires_multipart(
    candidates: Sequence[FileCandidate], params: Mapping[str, Any] | None = None
) -> bool:
    """True if the call has bytes that need uploading.

    That is the case when a file-field entry is an ``InputFile``, or when any
    other parameter (e.g. a ``thumbnail``) holds one.
    """
    if any(c.kind is CandidateKind.INPUT_FILE for c in candidates):
        return True
    return params is not None and next(iter_input_files(params), None) is not None


# --- Part construction ---


def _json_default(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, InputFile):
        return value.attach_string
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:  # noqa: ANN401
    """Compact JSON encoding used for structured multipart fields."""
    return json.dumps(value, default=_json_default, ensure_ascii=False, separators=(",", ":"))


def stringify_field(value: Any) -> str | bytes:  # noqa: ANN401
    """Text contents for a scalar multipart part."""
    if isinstance(value, str | bytes):
        return value
    if isinstance(value, InputFile):
        return value.attach_string
    if isinstance(value, bool | dict | list | tuple):
        return to_json(value)
    return str(value)


def _attach_media_item(item: Any) -> Any:  # noqa: ANN401
    """Copy of a media item with embedded files swapped for attach strings."""
    if isinstance(item, InputFile):
        return item.attach_string
    if not isinstance(item, Mapping):
        return item
    return {
        key: value.attach_string if isinstance(value, InputFile) else value
        for key, value in item.items()
    }


def _media_item_files(item: Any) -> Iterator[InputFile]:  # noqa: ANN401
    """Files embedded in a media item, the ``media`` entry first."""
    if isinstance(item, InputFile):
        yield item
        return
    if not isinstance(item, Mapping):
        return
    if isinstance(item.get(MEDIA_KEY), InputFile):
        yield item[MEDIA_KEY]
    for key, value in item.items():
        if key != MEDIA_KEY and isinstance(value, InputFile):
            yield value


def generate_multipart_data(name: str, contents: Any) -> MultipartPart:  # noqa: ANN401
    """Build the text part for one parameter.

    The media key is JSON-encoded with any embedded ``InputFile`` replaced by
    its attach string; a single media object stays a single object. A bare
    ``InputFile`` becomes its attach string. Anything else is stringified.
    """
    if name == MEDIA_KEY:
        media = WrappedValues.wrap(contents)
        items = [_attach_media_item(item) for item in media.items]
        return MultipartPart(name=name, contents=to_json(media.unwrap(items)))
    return MultipartPart(name=name, contents=stringify_field(contents))


def _attached_file_parts(name: str, value: Any) -> list[MultipartPart]:  # noqa: ANN401
    """File parts backing the attach strings written by generate_multipart_data."""
    if name == MEDIA_KEY:
        return [
            input_file.to_multipart()
            for item in WrappedValues.wrap(value).items
            for input_file in _media_item_files(item)
        ]
    return [input_file.to_multipart() for input_file in iter_input_files(value)]


def prepare_multipart_params(
    params: Mapping[str, Any],
    input_file_field: str,
    candidates: Sequence[FileCandidate] | None = None,
) -> list[MultipartPart]:
    """Validate an upload call and build its multipart part list.

    Files under ``input_file_field`` are sent as parts named after the field;
    file identifiers in that field are sent as plain text parts. Files
    embedded in media items or in other fields are sent under their
    attach token.

    Args:
        params: Call parameters.
        input_file_field: Name of the field holding the files.
        candidates: Result of :func:`validate_input_file_field` for these
            params, if the caller already validated them.

    Returns:
        Text parts in parameter order followed by file parts in discovery order.

    Raises:
        MissingUploadParamError: If the file field is missing.
        InvalidInputFileEntityError: If the file field holds a non-uploadable value.
    """
    if candidates is None:
        candidates = validate_input_file_field(params, input_file_field)

    text_parts: list[MultipartPart] = []
    file_parts: list[MultipartPart] = []
    attached: set[str] = set()
    for name, value in params.items():
        if value is None:
            continue
        if name == input_file_field and name != MEDIA_KEY:
            for candidate in candidates:
                if candidate.kind is CandidateKind.INPUT_FILE:
                    file_parts.append(candidate.value.to_multipart(name))  # type: ignore[union-attr]
                else:
                    text_parts.append(MultipartPart(name=name, contents=candidate.value))
            continue
        text_parts.append(generate_multipart_data(name, value))
        for part in _attached_file_parts(name, value):
            # The same InputFile may be referenced more than once.
            if part.name not in attached:
                attached.add(part.name)
                file_parts.append(part)

    log.debug(
        "Prepared multipart params for '%s': %d text part(s), %d file part(s)",
        input_file_field,
        len(text_parts),
        len(file_parts),
    )
    return [*text_parts, *file_parts]
