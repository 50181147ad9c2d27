"""Unit tests for aia.loop."""

import io
from contextlib import contextmanager
from unittest.mock import MagicMock, patch

import pytest

from aia.conversation import ConversationState
from aia.dispatch import EXECUTED_MESSAGE, IntentDispatcher
from aia.errors import DispatchError, ParseError
from aia.loop import INPUT_LABEL, TurnLoop, build_conversation
from aia.models import AiaConfig
from aia.terminal import Terminal

SEED = [
    {"role": "system", "content": "sys"},
    {"role": "user", "content": "ctx"},
]


class _ScriptedChat:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def complete(self, model_id, messages):
        self.calls.append(list(messages))
        return self.replies.pop(0)


def _loop(
    replies, inputs=(), selections=(), runner=None, seed=SEED, max_attempts=3, indicator=None
):
    config = AiaConfig(api_token="k", model_id="test/model", max_parse_attempts=max_attempts)
    chat = _ScriptedChat(replies)
    terminal = MagicMock(spec=Terminal)
    terminal.ask_input.side_effect = list(inputs) + [EOFError()]
    terminal.select.side_effect = list(selections)
    conversation = ConversationState(seed)
    runner = runner or MagicMock(return_value=0)
    dispatcher = IntentDispatcher(conversation, terminal, runner=runner)
    loop = TurnLoop(
        config, chat, terminal, conversation, dispatcher=dispatcher, indicator=indicator
    )
    return loop, chat, terminal, runner


def _question(text):
    return '{"type":"question","question":"%s"}' % text


def _answer(text):
    return '{"type":"answer","answer":"%s"}' % text


class TestTurnLoop:
    def test_initial_input_skips_first_prompt(self):
        loop, chat, terminal, _ = _loop([_answer("hi")])

        assert loop.run("say hi") == 0

        assert chat.calls[0][-1] == {"role": "user", "content": "say hi"}
        terminal.ask_input.assert_called_once_with(INPUT_LABEL)

    def test_prompts_when_no_initial_input(self):
        loop, chat, terminal, _ = _loop([_answer("hi")], inputs=["hello"])

        assert loop.run() == 0

        assert chat.calls[0][-1]["content"] == "hello"
        assert terminal.ask_input.call_count == 2

    @pytest.mark.parametrize("turns", [1, 2, 5])
    def test_history_grows_by_two_per_turn(self, turns):
        replies = [_question(f"q{i}") if i % 2 else _answer(f"a{i}") for i in range(turns)]
        inputs = [f"input {i}" for i in range(1, turns)]
        loop, _, _, _ = _loop(replies, inputs=inputs)

        loop.run("input 0")

        snapshot = loop.conversation.snapshot()
        assert len(snapshot) == 2 + 2 * turns
        assert [m["role"] for m in snapshot[2:]] == ["user", "assistant"] * turns
        assert [m["content"] for m in snapshot[2::2]] == [f"input {i}" for i in range(turns)]

    def test_history_with_piped_seed(self):
        seed = SEED + [{"role": "user", "content": "piped"}]
        loop, _, _, _ = _loop([_answer("a"), _answer("b")], inputs=["next"], seed=seed)

        loop.run("first")

        assert len(loop.conversation) == 3 + 2 * 2

    def test_assistant_turn_stores_normalized_text(self):
        loop, _, _, _ = _loop(['Sure thing: {"type":"answer","answer":"ok"}\n```'])

        loop.run("go")

        assert loop.conversation.snapshot()[-1] == {
            "role": "assistant",
            "content": '{"type":"answer","answer":"ok"}',
        }

    def test_execute_then_quit_exits_cleanly(self):
        loop, chat, terminal, runner = _loop(
            ['{"type":"command","command":"ls -la"}'], selections=["execute", "quit"]
        )

        assert loop.run("list everything") == 0

        runner.assert_called_once_with("ls -la", "sh")
        contents = [m["content"] for m in loop.conversation]
        assert contents.count(EXECUTED_MESSAGE) == 1
        assert contents[-1] == EXECUTED_MESSAGE
        terminal.ask_input.assert_not_called()
        assert len(chat.calls) == 1

    def test_follow_up_feeds_note_into_next_request(self):
        loop, chat, _, runner = _loop(
            ['{"type":"command","command":"rm -rf build"}', _answer("fine")],
            inputs=["just explain it"],
            selections=["follow"],
        )

        loop.run("clean up")

        runner.assert_not_called()
        second_request = chat.calls[1]
        assert second_request[-2] == {"role": "user", "content": "User did not execute command"}
        assert second_request[-1] == {"role": "user", "content": "just explain it"}

    def test_malformed_reply_is_retried_and_reported(self):
        loop, chat, terminal, _ = _loop(["let me think...", _question("Which file?")])

        assert loop.run("edit it") == 0

        assert len(chat.calls) == 2
        assert chat.calls[0] == chat.calls[1]
        terminal.warn.assert_called_once()
        assert "let me think..." in terminal.warn.call_args.args[0]
        assert len(loop.conversation) == 4

    def test_persistently_malformed_reply_raises(self):
        loop, chat, _, _ = _loop(["no", "still no"], max_attempts=2)

        with pytest.raises(ParseError):
            loop.run("anything")

        assert len(chat.calls) == 2
        assert [m["role"] for m in loop.conversation] == ["system", "user", "user"]

    def test_assistant_turn_kept_when_dispatch_fails(self):
        loop, _, _, _ = _loop(['{"type":"command","command":"ls"}'], selections=["bogus"])

        with pytest.raises(DispatchError):
            loop.run("list")

        assert loop.conversation.snapshot()[-1] == {
            "role": "assistant",
            "content": '{"type":"command","command":"ls"}',
        }


class _RecordingIndicator:
    """WaitIndicator double that records start/stop/suspend in order."""

    def __init__(self, events):
        self.events = events

    def __enter__(self):
        self.events.append("start")
        return self

    def __exit__(self, *exc_info):
        self.events.append("stop")

    def set_attempt(self, attempt, max_attempts):
        self.events.append(f"attempt {attempt}/{max_attempts}")

    @contextmanager
    def suspended(self):
        self.events.append("suspend")
        yield
        self.events.append("resume")


class TestEndOfInput:
    def test_eof_at_action_menu_ends_session_cleanly(self):
        loop, _, terminal, runner = _loop(['{"type":"command","command":"ls"}'])
        terminal.select.side_effect = EOFError()

        assert loop.run("list") == 0

        runner.assert_not_called()
        assert loop.conversation.snapshot()[-1] == {
            "role": "assistant",
            "content": '{"type":"command","command":"ls"}',
        }

    def test_eof_at_continue_menu_after_running(self):
        loop, _, terminal, runner = _loop(['{"type":"command","command":"make"}'])
        terminal.select.side_effect = ["execute", EOFError()]

        assert loop.run("build") == 0

        runner.assert_called_once_with("make", "sh")
        assert loop.conversation.snapshot()[-1]["content"] == EXECUTED_MESSAGE


class TestRetryDisplay:
    def test_spinner_is_suspended_while_retry_warning_prints(self):
        events = []
        loop, _, terminal, _ = _loop(
            ["thinking...", _answer("done")], indicator=_RecordingIndicator(events)
        )
        terminal.warn.side_effect = lambda text: events.append("warn")

        loop.run("go")

        assert events == [
            "attempt 1/3",
            "start",
            "suspend",
            "warn",
            "attempt 2/3",
            "resume",
            "stop",
        ]


class TestBuildConversation:
    @patch("aia.loop.get_system_info", return_value="OS: Linux\nShell: /bin/sh")
    @patch("aia.loop.gather_context", return_value="Current directory: /w\nFiles in directory: a")
    def test_piped_input_adds_third_message(self, _ctx, _info):
        conversation = build_conversation(io.StringIO("error: build failed\n"))

        snapshot = conversation.snapshot()
        assert [m["role"] for m in snapshot] == ["system", "user", "user"]
        assert snapshot[1]["content"].startswith("Current directory: /w")
        assert "error: build failed" in snapshot[2]["content"]

    @patch("aia.loop.get_system_info", return_value="")
    @patch("aia.loop.gather_context", return_value="Current directory: /w\nFiles in directory: ")
    def test_interactive_stdin_is_not_read(self, _ctx, _info):
        stdin = MagicMock()
        stdin.isatty.return_value = True

        conversation = build_conversation(stdin)

        assert len(conversation) == 2
        stdin.read.assert_not_called()
