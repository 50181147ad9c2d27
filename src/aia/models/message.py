"""Chat message model for aia."""

from typing import Final, Literal, TypedDict

SYSTEM: Final = "system"
USER: Final = "user"
ASSISTANT: Final = "assistant"


class Message(TypedDict):
    """Single chat message for the LLM API."""

    role: Literal["system", "user", "assistant"]
    content: str
