"""Reply markup objects sent in the ``reply_markup`` request field.

The Bot API expects keyboards as a JSON-serialized string. Every markup type
implements that contract through ``str()``, which is what the parameter
normalizer calls before a request is sent.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReplyMarkup(BaseModel):
    """Base class for keyboard markup; ``str()`` yields the wire JSON."""

    model_config = ConfigDict(extra="allow", frozen=True)

    def __str__(self) -> str:
        """JSON-serialize, dropping unset optional fields."""
        return self.model_dump_json(exclude_none=True)


class InlineKeyboardMarkup(ReplyMarkup):
    """Inline keyboard attached to a message.

    Buttons are plain mappings, e.g. ``{"text": "Open", "url": "https://..."}``.
    """

    inline_keyboard: list[list[dict[str, Any]]] = Field(default_factory=list)

    def row(self, *buttons: dict[str, Any]) -> "InlineKeyboardMarkup":
        """Return a copy with one more row of buttons."""
        return self.model_copy(
            update={"inline_keyboard": [*self.inline_keyboard, list(buttons)]}
        )


class ReplyKeyboardMarkup(ReplyMarkup):
    """Custom reply keyboard shown instead of the system keyboard."""

    keyboard: list[list[dict[str, Any] | str]] = Field(default_factory=list)
    is_persistent: bool | None = None
    resize_keyboard: bool | None = None
    one_time_keyboard: bool | None = None
    input_field_placeholder: str | None = None
    selective: bool | None = None

    @field_validator("keyboard")
    @classmethod
    def _text_buttons(cls, v: list[list[dict[str, Any] | str]]) -> list[list[dict[str, Any]]]:
        """Promote bare strings to ``{"text": ...}`` buttons."""
        return [
            [{"text": button} if isinstance(button, str) else button for button in row]
            for row in v
        ]

    def row(self, *buttons: dict[str, Any] | str) -> "ReplyKeyboardMarkup":
        """Return a copy with one more row of buttons."""
        return self.model_validate(
            {**self.model_dump(), "keyboard": [*self.keyboard, list(buttons)]}
        )


class ReplyKeyboardRemove(ReplyMarkup):
    """Ask clients to remove the custom keyboard."""

    remove_keyboard: bool = True
    selective: bool | None = None


class ForceReply(ReplyMarkup):
    """Ask clients to display a reply interface."""

    force_reply: bool = True
    input_field_placeholder: str | None = None
    selective: bool | None = None
