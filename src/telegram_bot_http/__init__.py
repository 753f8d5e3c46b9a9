"""HTTP layer for the Telegram Bot API.

Turns Bot API calls with structured parameters (including file uploads and
media groups) into requests dispatched through a pluggable transport.
"""

import importlib.metadata
import logging

from telegram_bot_http.client import TelegramHttp
from telegram_bot_http.config import FrozenConfig, ResolvedConfig, resolve_config
from telegram_bot_http.exceptions import (
    ConfigurationError,
    CouldNotUploadInputFileError,
    InvalidArgumentError,
    InvalidInputFileEntityError,
    MissingUploadParamError,
    TelegramResponseError,
    TelegramSDKError,
    TransportError,
    UnreadableSourceError,
)
from telegram_bot_http.input_file import InputFile, InputFileKind
from telegram_bot_http.markup import (
    ForceReply,
    InlineKeyboardMarkup,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    ReplyMarkup,
)
from telegram_bot_http.request import TelegramRequest
from telegram_bot_http.response import TelegramResponse
from telegram_bot_http.transport import HttpTransport, HttpxTransport
from telegram_bot_http.types import FormBody, MultipartBody, MultipartPart

try:
    __version__ = importlib.metadata.version("telegram-bot-http")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Client
    "TelegramHttp",
    "TelegramRequest",
    "TelegramResponse",
    # Transport
    "HttpTransport",
    "HttpxTransport",
    # Files and bodies
    "InputFile",
    "InputFileKind",
    "FormBody",
    "MultipartBody",
    "MultipartPart",
    # Reply markup
    "ReplyMarkup",
    "InlineKeyboardMarkup",
    "ReplyKeyboardMarkup",
    "ReplyKeyboardRemove",
    "ForceReply",
    # Configuration
    "FrozenConfig",
    "ResolvedConfig",
    "resolve_config",
    # Exceptions
    "TelegramSDKError",
    "ConfigurationError",
    "InvalidArgumentError",
    "CouldNotUploadInputFileError",
    "MissingUploadParamError",
    "InvalidInputFileEntityError",
    "UnreadableSourceError",
    "TransportError",
    "TelegramResponseError",
]
