"""Operator-facing terminal prompts and messages."""

import os
import sys
from collections.abc import Sequence
from typing import TextIO

from aia.constants import BOLD, CYAN, DIM, RED, RESET, YELLOW

Choice = tuple[str, str]


def supports_color(stream: TextIO) -> bool:
    """Return whether ANSI color output should be used."""
    if os.getenv("NO_COLOR") is not None:
        return False
    if os.getenv("TERM", "").lower() == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def open_prompt_stream(stdin: TextIO) -> TextIO | None:
    """Return a stream to read operator answers from.

    None means the builtin input() on stdin. When stdin carried piped data the
    controlling terminal is opened instead, if there is one.
    """
    if stdin.isatty():
        return None
    try:
        return open("/dev/tty", encoding="utf-8")
    except OSError:
        return None


class Terminal:
    """Line-based prompts, menus and status messages."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._color = supports_color(self._stdout)

    def _style(self, text: str, *codes: str) -> str:
        if not self._color:
            return text
        return "".join(codes) + text + RESET

    def _write(self, text: str) -> None:
        print(text, file=self._stdout, flush=True)

    def _readline(self, prompt: str) -> str:
        if self._stdin is None:
            return input(prompt)
        self._stdout.write(prompt)
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    def intro(self, title: str) -> None:
        self._write(self._style(title, BOLD))

    def outro(self, text: str) -> None:
        self._write(self._style(text, DIM))

    def info(self, text: str) -> None:
        self._write(text)

    def command(self, command: str) -> None:
        self._write("Command: " + self._style(f"$ {command}", BOLD, CYAN))

    def warn(self, text: str) -> None:
        self._write(self._style(text, YELLOW))

    def error(self, text: str) -> None:
        self._write(self._style(text, RED))

    def ask_input(self, label: str) -> str:
        """Prompt until the operator enters a non-blank line."""
        while True:
            answer = self._readline(self._style(label, BOLD) + " ").strip()
            if answer:
                return answer

    def select(self, label: str, choices: Sequence[Choice]) -> str:
        """Show a numbered menu of (key, label) pairs and return the chosen key."""
        self._write(self._style(label, BOLD))
        for index, (_, text) in enumerate(choices, start=1):
            self._write(f"  {index}) {text}")
        keys = [key for key, _ in choices]
        while True:
            answer = self._readline("> ").strip().lower()
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return keys[int(answer) - 1]
            if answer in keys:
                return answer
            for key, text in choices:
                if answer and text.lower().startswith(answer):
                    return key
            self.warn(f"Pick 1-{len(choices)}")
