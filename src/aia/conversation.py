"""Ordered message history sent to the model each turn."""

from collections.abc import Iterable, Iterator

from aia.models import ASSISTANT, USER, Message


def _copy(message: Message) -> Message:
    return {"role": message["role"], "content": message["content"]}


class ConversationState:
    """Append-only log of chat messages.

    Order is the model's only memory, so messages are never edited, reordered
    or removed. The log grows for the lifetime of the session.
    """

    def __init__(self, seed: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = [_copy(m) for m in seed]

    def append(self, message: Message) -> None:
        self._messages.append(_copy(message))

    def append_user(self, content: str) -> None:
        self.append({"role": USER, "content": content})

    def append_assistant(self, content: str) -> None:
        self.append({"role": ASSISTANT, "content": content})

    def snapshot(self) -> list[Message]:
        """Return an independent copy of every message, in order."""
        return [_copy(m) for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())
