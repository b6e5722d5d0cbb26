from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

# =============================================================================
# Catalog Models
# =============================================================================


class VideoRecord(BaseModel):
    """A tutorial video in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="YouTube video ID")
    title: str = Field(..., description="Display title")
    description: str = Field(..., description="Display description")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def url(self) -> str:
        """Short watch link for the video."""
        return f"https://youtu.be/{self.id}"


class EmbedSnippet(BaseModel):
    """Iframe embed code for a video."""

    embed_url: str = Field(..., serialization_alias="embedUrl")
    embed_code: str = Field(..., serialization_alias="embedCode")


# =============================================================================
# Tool Models
# =============================================================================


class ShowVideoArguments(BaseModel):
    """Arguments accepted by the show_tutorial_video tool."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    video_id: str = Field(..., alias="videoId", description="YouTube video ID to display")
    title: str | None = Field(None, description="Optional title for the video")
    description: str | None = Field(None, description="Optional description for the video")


class ShowVideoResult(BaseModel):
    """Resolved show_tutorial_video call, ready to be serialized by a transport."""

    video_id: str
    title: str
    description: str
    message: str
    html: str | None = Field(None, description="Inline player document")
    output_template: dict[str, Any] | None = Field(
        None, description="Widget reference for clients that host the player page"
    )
