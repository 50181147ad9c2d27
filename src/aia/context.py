"""Gather ambient context for the conversation seed."""

import logging
import os
import platform
from typing import TextIO

from aia.errors import ContextGatheringError

log = logging.getLogger(__name__)


def _get_distro() -> str:
    """Return the OS distribution name (e.g. 'Debian GNU/Linux 12', 'macOS 14.0')."""
    system = platform.system()
    if system == "Darwin":
        mac_ver = platform.mac_ver()[0]
        return f"macOS {mac_ver}" if mac_ver else "macOS"
    try:
        info = platform.freedesktop_os_release()
        return info.get("PRETTY_NAME", info.get("NAME", system))
    except OSError:
        return system


def get_system_info() -> str:
    """Return a summary of the operating system and shell."""
    distro = _get_distro()
    kernel = platform.release()
    shell = os.environ.get("SHELL", "unknown")
    return f"OS: {distro} ({kernel})\nShell: {shell}"


def gather_context(cwd: str | None = None) -> str:
    """Describe the working directory and its entries."""
    try:
        cwd = cwd or os.getcwd()
        with os.scandir(cwd) as entries:
            names = sorted(entry.name for entry in entries)
    except OSError as e:
        raise ContextGatheringError(f"Failed to read current working directory: {e}") from e

    log.debug("context: %s with %d entries", cwd, len(names))
    return f"Current directory: {cwd}\nFiles in directory: {', '.join(names)}"


def read_piped_input(stream: TextIO) -> str | None:
    """Drain a non-interactive stream and return its text.

    Returns None for a terminal, a closed stream, or empty input. Bytes that
    are not valid in the stream's encoding are replaced, not dropped.
    """
    try:
        if stream.isatty():
            return None
    except ValueError:
        log.debug("stdin is closed, no piped input")
        return None

    try:
        buffer = getattr(stream, "buffer", None)
        if buffer is not None:
            encoding = getattr(stream, "encoding", None) or "utf-8"
            data = buffer.read().decode(encoding, errors="replace")
        else:
            data = stream.read()
    except OSError as e:
        raise ContextGatheringError(f"Failed to read piped input: {e}") from e

    if not data or not data.strip():
        return None
    log.debug("read %d chars of piped input", len(data))
    return data
