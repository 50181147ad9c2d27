"""Configuration loading for aia."""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from aia.errors import ConfigError
from aia.models import AiaConfig

log = logging.getLogger(__name__)

CONFIG_TEMPLATE = """\
# aia configuration
#
# api_token: API key for your model provider (required)
# model_id:  model in LiteLLM format, e.g. openai/gpt-4o-mini or anthropic/claude-3-5-haiku-latest

api_token = ""
model_id = "openai/gpt-4o-mini"

# How many times a malformed model reply is re-requested before giving up.
max_parse_attempts = 3

# Interpreter used to run confirmed commands (invoked as `<shell> -c <command>`).
shell = "sh"
"""


def get_config_path() -> Path:
    """Return the per-user config file path."""
    override = os.environ.get("AIA_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "aia" / "config.toml"


def write_template(path: Path) -> None:
    """Create the config directory and write the commented template."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write default config file {path}: {e}") from e
    log.debug("wrote config template to %s", path)


def load_config(path: Path | None = None) -> AiaConfig:
    """Load and validate the config file.

    A missing file is replaced by the template and reported as an error so the
    operator fills in the token before the first run.
    """
    path = path or get_config_path()
    if not path.exists():
        write_template(path)
        raise ConfigError(
            f"Created a config template at {path}. "
            "Set api_token (and optionally model_id) there and run aia again."
        )

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    env_model = os.environ.get("AIA_MODEL", "").strip()
    if env_model:
        log.debug("model overridden by AIA_MODEL=%s", env_model)
        data["model_id"] = env_model

    try:
        config = AiaConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    log.debug("loaded config from %s (model=%s)", path, config.model_id)
    return config


def require_token(config: AiaConfig, path: Path | None = None) -> None:
    """Raise when the config holds no API token."""
    if not config.api_token.strip():
        where = path or get_config_path()
        raise ConfigError(f"Please set your API token (api_token) in {where}")
