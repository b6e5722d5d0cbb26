import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# src/tutorial_videos/api/settings.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_API_PORT = 3000
DEFAULT_WIDGET_PORT = 3001


class Settings(BaseSettings):
    """Application settings loaded from environment variables or `.env` file."""

    env: str = Field(
        default="production",
        description="Runtime environment; error details are only exposed in development",
        alias="NODE_ENV",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int | None = Field(
        default=None,
        description="Listen port; each front end falls back to its own default",
        alias="PORT",
    )

    base_url: str | None = Field(
        default=None,
        description="Externally reachable base URL of the MCP SSE server",
        alias="BASE_URL",
    )
    widget_url: str = Field(
        default=f"http://localhost:{DEFAULT_WIDGET_PORT}",
        description="Externally reachable base URL of the widget host",
        alias="WIDGET_URL",
    )

    bundle_path: Path = Field(
        default=PROJECT_ROOT / "web" / "dist" / "tutorial-video-player.js",
        description="Bundled custom element script",
    )
    widgets_dir: Path = Field(
        default=PROJECT_ROOT / "web" / "dist" / "widgets",
        description="Directory of built widget assets",
    )

    mcp_payload_mode: Literal["inline", "url"] = Field(
        default="inline",
        description="How the stdio MCP server returns the player: inline HTML or widget URL",
    )
    list_description_limit: int = Field(
        default=100,
        ge=0,
        description="Characters of description shown by list_tutorial_videos (0 = no truncation)",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("widget_url", "base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def description_limit(self) -> int | None:
        return self.list_description_limit or None

    def resolve_port(self, default: int) -> int:
        return self.port or default

    def resolve_base_url(self, default_port: int) -> str:
        """Return BASE_URL, or the localhost URL for the port actually served."""
        return self.base_url or f"http://localhost:{self.resolve_port(default_port)}"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@lru_cache
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached instance of Settings."""
    s = Settings()
    logger = logging.getLogger(__name__)
    logger.debug(f"Environment: {s.env}")
    logger.debug(f"Bundle path: {s.bundle_path}")
    logger.debug(f"Widgets dir: {s.widgets_dir}")
    return s
