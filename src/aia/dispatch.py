"""Drive the operator interaction for a parsed intent."""

import logging
import subprocess
from collections.abc import Callable
from enum import Enum

from aia.conversation import ConversationState
from aia.errors import DispatchError, SubshellError
from aia.models import DEFAULT_SHELL, AnswerIntent, CommandIntent, ParsedIntent, QuestionIntent
from aia.terminal import Terminal

log = logging.getLogger(__name__)

EXECUTED_MESSAGE = "User executed command"
NOT_EXECUTED_MESSAGE = "User did not execute command"

COMMAND_CHOICES = [("execute", "Execute"), ("follow", "Follow-up"), ("quit", "Quit")]
AFTER_RUN_CHOICES = [("continue", "Continue"), ("quit", "Quit")]


class Outcome(Enum):
    CONTINUE = "continue"
    QUIT = "quit"


def run_command(command: str, shell: str = DEFAULT_SHELL) -> int:
    """Run a command through `<shell> -c` with inherited stdio and return its exit code."""
    log.debug("running %s -c %r", shell, command)
    try:
        result = subprocess.run([shell, "-c", command], check=False)
    except OSError as e:
        raise SubshellError(f"Failed to execute command with {shell}: {e}") from e
    log.debug("command exited with %d", result.returncode)
    return result.returncode


class IntentDispatcher:
    """Show an intent to the operator and act on their choice."""

    def __init__(
        self,
        conversation: ConversationState,
        terminal: Terminal,
        runner: Callable[[str, str], int] = run_command,
        shell: str = DEFAULT_SHELL,
    ) -> None:
        self._conversation = conversation
        self._terminal = terminal
        self._runner = runner
        self._shell = shell

    def dispatch(self, intent: ParsedIntent) -> Outcome:
        if isinstance(intent, CommandIntent):
            return self._dispatch_command(intent.command)
        if isinstance(intent, QuestionIntent):
            self._terminal.info(intent.question)
            return Outcome.CONTINUE
        if isinstance(intent, AnswerIntent):
            self._terminal.info(intent.answer)
            return Outcome.CONTINUE
        raise DispatchError(f"Unsupported intent: {intent!r}")

    def _select(self, choices: list[tuple[str, str]]) -> str:
        selected = self._terminal.select("Pick an action", choices)
        if selected not in {key for key, _ in choices}:
            raise DispatchError(f"Unexpected selection: {selected!r}")
        return selected

    def _dispatch_command(self, command: str) -> Outcome:
        self._terminal.command(command)
        selected = self._select(COMMAND_CHOICES)

        if selected == "quit":
            return Outcome.QUIT
        if selected == "follow":
            self._conversation.append_user(NOT_EXECUTED_MESSAGE)
            return Outcome.CONTINUE

        try:
            exit_code = self._runner(command, self._shell)
        except SubshellError as e:
            self._terminal.error(str(e))
            self._conversation.append_user(NOT_EXECUTED_MESSAGE)
            return Outcome.CONTINUE

        self._conversation.append_user(EXECUTED_MESSAGE)
        if exit_code == 0:
            self._terminal.info("Command finished (exit status 0)")
        else:
            self._terminal.warn(f"Command finished (exit status {exit_code})")

        if self._select(AFTER_RUN_CHOICES) == "quit":
            return Outcome.QUIT
        return Outcome.CONTINUE
