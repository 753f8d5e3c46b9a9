"""Normalization of call parameters into a request body."""

from collections.abc import Iterable, Mapping
from typing import Any

from telegram_bot_http.constants import REPLY_MARKUP_KEY
from telegram_bot_http.multipart import to_json
from telegram_bot_http.types import FormBody, MultipartBody, MultipartPart, RequestBody


def reply_markup_to_string(params: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``params`` with ``reply_markup`` as its wire string.

    Plain dicts and lists are JSON-encoded; markup objects provide their own
    string form through ``str()``. Other fields are left untouched.
    """
    normalized = dict(params)
    markup = normalized.get(REPLY_MARKUP_KEY)
    if isinstance(markup, dict | list | tuple):
        normalized[REPLY_MARKUP_KEY] = to_json(markup)
    elif markup is not None:
        normalized[REPLY_MARKUP_KEY] = str(markup)
    return normalized


def normalize_params(
    params: Mapping[str, Any] | Iterable[MultipartPart],
    file_upload: bool = False,
) -> RequestBody:
    """Turn call parameters into the body handed to the dispatcher.

    Args:
        params: Field mapping for simple calls, or the part list produced by
            :func:`telegram_bot_http.multipart.prepare_multipart_params` when
            uploading.
        file_upload: Whether ``params`` should be sent as multipart/form-data.

    Returns:
        ``MultipartBody`` when uploading, otherwise a ``FormBody``.
    """
    if file_upload:
        return MultipartBody(tuple(params))  # type: ignore[arg-type]
    return FormBody(reply_markup_to_string(params))  # type: ignore[arg-type]
