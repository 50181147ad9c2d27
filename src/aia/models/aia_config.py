"""Configuration model for aia."""

from pydantic import BaseModel, Field

DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_SHELL = "sh"


class AiaConfig(BaseModel):
    """Runtime configuration for aia."""

    api_token: str = ""
    model_id: str = DEFAULT_MODEL
    max_parse_attempts: int = Field(default=3, ge=1)
    shell: str = DEFAULT_SHELL
