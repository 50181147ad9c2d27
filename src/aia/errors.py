"""Exception types raised by aia."""

from enum import Enum


class AiaError(Exception):
    """Base class for all aia errors."""


class ConfigError(AiaError):
    """The config file is missing, unreadable, malformed, or lacks a token."""


class ContextGatheringError(AiaError):
    """The working directory could not be inspected."""


class ProviderError(AiaError):
    """The chat provider failed (network, auth, rate limit...)."""


class ParseErrorKind(str, Enum):
    MISSING_PAYLOAD = "missing_payload"
    INVALID_JSON = "invalid_json"
    INVALID_SHAPE = "invalid_shape"


class ParseError(AiaError):
    """A model reply could not be turned into an intent."""

    def __init__(self, kind: ParseErrorKind, raw: str, detail: str = "") -> None:
        self.kind = kind
        self.raw = raw
        self.detail = detail
        message = f"{kind.value}: {detail}" if detail else kind.value
        super().__init__(message)


class DispatchError(AiaError):
    """An operator selection fell outside the offered choices."""


class SubshellError(AiaError):
    """The shell interpreter could not be spawned."""
