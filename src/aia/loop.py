"""Top-level conversation loop."""

import logging
from typing import TextIO

from aia.context import gather_context, get_system_info, read_piped_input
from aia.conversation import ConversationState
from aia.dispatch import IntentDispatcher, Outcome
from aia.errors import ParseError
from aia.llm import ChatService, request_intent
from aia.models import AiaConfig
from aia.prompt import build_seed_messages
from aia.terminal import Terminal
from aia.wait_indicator import WaitIndicator

log = logging.getLogger(__name__)

INPUT_LABEL = "Input:"


def build_conversation(stdin: TextIO) -> ConversationState:
    """Seed a new conversation, folding in piped stdin if there is any."""
    context = gather_context()
    piped = read_piped_input(stdin)
    return ConversationState(build_seed_messages(context, get_system_info(), piped))


class TurnLoop:
    """Run turns until the operator quits."""

    def __init__(
        self,
        config: AiaConfig,
        chat: ChatService,
        terminal: Terminal,
        conversation: ConversationState,
        dispatcher: IntentDispatcher | None = None,
        indicator: WaitIndicator | None = None,
    ) -> None:
        self.config = config
        self.chat = chat
        self.terminal = terminal
        self.conversation = conversation
        self.dispatcher = dispatcher or IntentDispatcher(
            conversation, terminal, shell=config.shell
        )
        self.indicator = indicator or WaitIndicator()

    def _report_retry(self, error: ParseError, attempt: int) -> None:
        max_attempts = self.config.max_parse_attempts
        with self.indicator.suspended():
            self.terminal.warn(
                f"Could not parse response ({error.kind.value}), retrying "
                f"[{attempt}/{max_attempts - 1}]:\n{error.raw}"
            )
            self.indicator.set_attempt(attempt + 1, max_attempts)

    def run(self, initial_input: str | None = None) -> int:
        """Loop over turns and return the process exit code."""
        iteration = 0
        while True:
            if iteration == 0 and initial_input:
                user_input = initial_input
            else:
                try:
                    user_input = self.terminal.ask_input(INPUT_LABEL)
                except EOFError:
                    log.debug("input closed, ending session")
                    return 0
            iteration += 1

            self.conversation.append_user(user_input)
            self.indicator.set_attempt(1, self.config.max_parse_attempts)
            with self.indicator:
                normalized, intent = request_intent(
                    self.chat,
                    self.config.model_id,
                    self.conversation,
                    max_attempts=self.config.max_parse_attempts,
                    on_retry=self._report_retry,
                )
            self.conversation.append_assistant(normalized)

            try:
                outcome = self.dispatcher.dispatch(intent)
            except EOFError:
                log.debug("input closed at action menu, ending session")
                return 0
            if outcome is Outcome.QUIT:
                return 0
