"""LLM interaction for aia."""

import json
import logging
from collections.abc import Callable, Sequence
from typing import Protocol

import litellm

from aia.conversation import ConversationState
from aia.errors import ParseError, ProviderError
from aia.models import Message, ParsedIntent
from aia.parser import parse_reply

log = logging.getLogger(__name__)

# Suppress litellm's noisy logging
litellm.suppress_debug_info = True


class ChatService(Protocol):
    """Turns a message history into the model's next reply."""

    def complete(self, model_id: str, messages: Sequence[Message]) -> str: ...


class LiteLLMChatService:
    """ChatService backed by litellm, with the API key passed per request."""

    def __init__(self, api_key: str, temperature: float = 0) -> None:
        self._api_key = api_key
        self._temperature = temperature

    def complete(self, model_id: str, messages: Sequence[Message]) -> str:
        log.debug("model=%s", model_id)
        log.debug("messages=%s", json.dumps(list(messages), indent=2))
        try:
            response = litellm.completion(
                model=model_id,
                messages=list(messages),
                api_key=self._api_key,
                temperature=self._temperature,
            )
        except Exception as e:
            raise ProviderError(f"{model_id}: {e}") from e

        content = response.choices[0].message.content or ""
        log.debug("raw response: %s", content)
        return content


RetryCallback = Callable[[ParseError, int], None]


def request_intent(
    chat: ChatService,
    model_id: str,
    conversation: ConversationState,
    max_attempts: int = 3,
    on_retry: RetryCallback | None = None,
) -> tuple[str, ParsedIntent]:
    """Ask the model for the pending turn until the reply parses.

    The conversation is not modified; a malformed reply is re-requested against
    the same history. The last ParseError is raised after max_attempts failures.
    """
    attempt = 0
    while True:
        attempt += 1
        raw = chat.complete(model_id, conversation.snapshot())
        try:
            return parse_reply(raw)
        except ParseError as e:
            log.debug("attempt %d/%d unparseable (%s): %r", attempt, max_attempts, e, raw)
            if attempt >= max_attempts:
                raise
            if on_retry is not None:
                on_retry(e, attempt)
