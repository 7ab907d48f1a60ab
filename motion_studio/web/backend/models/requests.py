"""Pydantic request models for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """Request to generate a video from a prompt."""

    prompt: str = Field(..., description="What the video should show")
    style: str | None = Field(default=None, description="Optional visual style hint")
    brand: dict[str, str] | None = Field(default=None, description="Optional brand colours and fonts")


class CaptionsRequest(BaseModel):
    """Request to caption an existing video."""

    video_url: str = Field(..., description="Public URL of the source video")
    style: str | None = Field(default=None, description="Caption style id")
    mode: str | None = Field(default=None, description="remotion (remote render) or burn (local ffmpeg)")
    emoji_cues: list[dict[str, Any]] | None = Field(
        default=None,
        description="Emoji overlays as {startFrame, emojiUrl}",
    )
