# =============================================================================
# core/settings.py  -  Runtime Configuration
# =============================================================================
#
# Everything that used to be a hardcoded constant (user id, toolkit, model
# string) comes from the environment, with the old constants as defaults.
# main.py calls load_dotenv() first, so a local .env file works too.
#
# API keys are NOT read here: arcadepy reads ARCADE_API_KEY and LiteLlm
# reads ANTHROPIC_API_KEY on their own.
# =============================================================================

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.registry import DuplicatePolicy


DEFAULT_USER_ID = "user@example.com"
DEFAULT_TOOLKIT = "github"
DEFAULT_MODEL = "anthropic/claude-3-7-sonnet-20250219"


class Settings(BaseSettings):
    """Agent settings read from the environment."""

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    user_id: str = Field(DEFAULT_USER_ID, validation_alias="ARCADE_USER_ID")
    # Blank means "no filter": every tool the account can see is loaded.
    toolkit: Optional[str] = Field(DEFAULT_TOOLKIT, validation_alias="ARCADE_TOOLKIT")
    model: str = Field(DEFAULT_MODEL, validation_alias="GITHUB_AGENT_MODEL")
    duplicate_tools: DuplicatePolicy = Field(
        DuplicatePolicy.OVERRIDE,
        validation_alias="ARCADE_DUPLICATE_TOOLS",
    )
    match_error_messages: bool = Field(
        True,
        validation_alias="ARCADE_MATCH_ERROR_MESSAGES",
    )

    @field_validator("toolkit", mode="before")
    @classmethod
    def blank_toolkit_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("duplicate_tools", mode="before")
    @classmethod
    def lowercase_policy(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v
