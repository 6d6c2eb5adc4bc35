"""Runtime configuration loaded from the environment.

Settings are read from ``METALCLOUD_*`` environment variables, with an
optional ``.env`` file in the working directory.  Only the CLI layer
loads settings; the core layer receives already-built collaborators.
"""

from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from metalcloud_cli.exceptions import ConfigurationError

_ENV_HINT = (
    "Set METALCLOUD_API_KEY and METALCLOUD_ENDPOINT, "
    "e.g. export METALCLOUD_ENDPOINT=https://api.bigstep.com"
)


class Settings(BaseSettings):
    """Connection and diagnostics settings for the API client."""

    model_config = SettingsConfigDict(
        env_prefix="METALCLOUD_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="API key in '<user_id>:<secret>' form.",
    )
    endpoint: str | None = Field(
        default=None,
        description="Base URL of the Metal Cloud API.",
    )
    user_email: str | None = Field(
        default=None,
        description="Account e-mail, used by user-scoped calls such as variables.",
    )
    logging_enabled: bool = Field(
        default=False,
        description="Emit debug logs of every API call on stderr.",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )

    def require_credentials(self) -> tuple[str, str]:
        """Return ``(endpoint, api_key)`` or raise :class:`ConfigurationError`."""
        missing = [
            name
            for name, value in (
                ("METALCLOUD_ENDPOINT", self.endpoint),
                ("METALCLOUD_API_KEY", self.api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing configuration: {', '.join(missing)}",
                hint=_ENV_HINT,
            )
        assert self.endpoint is not None and self.api_key is not None
        return self.endpoint, self.api_key


def load_settings() -> Settings:
    """Build :class:`Settings`, mapping validation failures to our errors."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc.errors()[0].get('msg', exc)}",
            hint=_ENV_HINT,
        ) from exc
