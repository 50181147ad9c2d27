"""Interactive session entry point."""

import argparse
import logging
import sys

from aia import __version__
from aia.config import get_config_path, load_config, require_token
from aia.errors import AiaError
from aia.llm import LiteLLMChatService
from aia.loop import TurnLoop, build_conversation
from aia.terminal import Terminal, open_prompt_stream

log = logging.getLogger("aia")

INTRO = "AIA Terminal Assistant"
OUTRO = "Goodbye!"


def build_parser() -> argparse.ArgumentParser:
    """Build parser for the interactive session."""
    parser = argparse.ArgumentParser(
        prog="aia",
        description="AI terminal assistant: ask for a command, a clarification, or an answer",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-m",
        "--model",
        help="Model ID in LiteLLM format for this session (example: openai/gpt-4o)",
    )
    parser.add_argument(
        "words",
        nargs="*",
        metavar="request",
        help="First request of the session; prompts interactively when omitted",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run an interactive aia session and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    config_path = get_config_path()
    try:
        config = load_config(config_path)
        require_token(config, config_path)
    except AiaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.model:
        config.model_id = args.model

    prompt_stream = open_prompt_stream(sys.stdin)
    terminal = Terminal(stdin=prompt_stream)
    terminal.intro(INTRO)

    try:
        conversation = build_conversation(sys.stdin)
        chat = LiteLLMChatService(api_key=config.api_token)
        loop = TurnLoop(config, chat, terminal, conversation)
        code = loop.run(" ".join(args.words) or None)
    except AiaError as e:
        log.debug("session failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        return 130
    finally:
        if prompt_stream is not None:
            prompt_stream.close()

    terminal.outro(OUTRO)
    return code


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(main())
