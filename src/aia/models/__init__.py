"""Model package for aia."""

from aia.models.aia_config import DEFAULT_MODEL, DEFAULT_SHELL, AiaConfig
from aia.models.intent import (
    INTENT_ADAPTER,
    AnswerIntent,
    CommandIntent,
    ParsedIntent,
    QuestionIntent,
)
from aia.models.message import ASSISTANT, SYSTEM, USER, Message

__all__ = [
    "ASSISTANT",
    "AiaConfig",
    "AnswerIntent",
    "CommandIntent",
    "DEFAULT_MODEL",
    "DEFAULT_SHELL",
    "INTENT_ADAPTER",
    "Message",
    "ParsedIntent",
    "QuestionIntent",
    "SYSTEM",
    "USER",
]
