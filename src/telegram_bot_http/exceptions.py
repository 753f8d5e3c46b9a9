"""Exceptions raised by the Telegram Bot API HTTP layer"""  # noqa: D415


class TelegramSDKError(Exception):
    """Base exception for all errors raised by this package"""  # noqa: D415


class ConfigurationError(TelegramSDKError):
    """Raised when client configuration fails validation"""  # noqa: D415


class InvalidArgumentError(TelegramSDKError, ValueError):
    """Raised when a caller passes an argument of the wrong shape"""  # noqa: D415


class CouldNotUploadInputFileError(TelegramSDKError):
    """Base exception for parameters that cannot be turned into an upload"""  # noqa: D415

    def __init__(self, field: str, message: str) -> None:  # noqa: D107
        super().__init__(message)
        self.field = field


class MissingUploadParamError(CouldNotUploadInputFileError):
    """Raised when the designated file field is absent from the parameters"""  # noqa: D415

    def __init__(self, field: str) -> None:  # noqa: D107
        super().__init__(
            field,
            f"Input field [{field}] is missing in your params. "
            "Please make sure it exists and is an InputFile entity.",
        )


class InvalidInputFileEntityError(CouldNotUploadInputFileError):
    """Raised when a file field holds neither a file id nor an InputFile"""  # noqa: D415

    def __init__(self, field: str) -> None:  # noqa: D107
        super().__init__(
            field,
            f"A path to local file, a URL, or a file resource should be uploaded "
            f"using `InputFile` for [{field}]. Please review the docs.",
        )


class UnreadableSourceError(TelegramSDKError):
    """Raised when an InputFile's byte source cannot be opened at send time"""  # noqa: D415

    def __init__(self, source: str, reason: str) -> None:  # noqa: D107
        super().__init__(f"Unable to read input file source {source}: {reason}")
        self.source = source


class TransportError(TelegramSDKError):
    """Raised when the underlying transport fails to complete a request"""  # noqa: D415


class TelegramResponseError(TelegramSDKError):
    """Raised when the Bot API answers with ``"ok": false``"""  # noqa: D415

    def __init__(self, description: str, error_code: int | None = None) -> None:  # noqa: D107
        super().__init__(f"Telegram API error {error_code}: {description}")
        self.description = description
        self.error_code = error_code
