"""Core configuration data types.

Configuration is resolved once, then frozen and handed to the client.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = ("bot_token", "base_url", "timeout", "connect_timeout", "async_requests")


class ResolvedConfig(NamedTuple):
    """Configuration after resolution, with the origin of every field."""

    bot_token: str | None
    base_url: str
    timeout: float
    connect_timeout: float
    async_requests: bool

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def __str__(self) -> str:
        """String representation with redacted token for safe logging."""
        token_display = "[REDACTED]" if self.bot_token else None
        return (
            f"ResolvedConfig(bot_token={token_display!r}, base_url={self.base_url!r}, "
            f"timeout={self.timeout!r}, connect_timeout={self.connect_timeout!r}, "
            f"async_requests={self.async_requests!r}, origin={dict(self.origin)!r})"
        )

    def __repr__(self) -> str:
        """Repr with redacted token for safe debugging."""
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Drop audit metadata and return the immutable client configuration."""
        return FrozenConfig(
            bot_token=self.bot_token,
            base_url=self.base_url,
            timeout=self.timeout,
            connect_timeout=self.connect_timeout,
            async_requests=self.async_requests,
        )

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """New config with programmatic overrides; unknown fields are ignored."""
        new_values = self._asdict()
        new_origin = dict(self.origin)

        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"

        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Redacted report of where each field came from."""
        lines = []
        for field in FIELD_ORDER:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if field == "bot_token":
                display = f"{origin}:None" if value is None else f"{origin}:<redacted>"
            elif origin == "env":
                display = f"env:TELEGRAM_{field.upper()}={value}"
            else:
                display = f"{origin}:{value}"
            lines.append(f"{field}: {display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration consumed by ``TelegramHttp.from_config``."""

    bot_token: str | None
    base_url: str
    timeout: float
    connect_timeout: float
    async_requests: bool

    def __str__(self) -> str:
        """String representation with redacted token for safe logging."""
        token_display = "[REDACTED]" if self.bot_token else None
        return (
            f"FrozenConfig(bot_token={token_display!r}, base_url={self.base_url!r}, "
            f"timeout={self.timeout!r}, connect_timeout={self.connect_timeout!r}, "
            f"async_requests={self.async_requests!r})"
        )

    def __repr__(self) -> str:
        """Representation with redacted token for safe debugging."""
        return self.__str__()
