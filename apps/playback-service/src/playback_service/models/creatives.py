"""
Companion creative model.

Companions are secondary, non-video creatives (static image or HTML
snippet) offered by the ad subsystem alongside a linear break.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class CompanionCreative(BaseModel):
    """Companion creative offered with an ad or ad break."""

    width: int = Field(..., gt=0, description="Creative width in pixels")
    height: int = Field(..., gt=0, description="Creative height in pixels")
    resource_url: Optional[str] = Field(
        default=None, description="Static resource URL (image)"
    )
    html_content: Optional[str] = Field(
        default=None, description="HTML snippet supplied by the ad server"
    )
    creative_type: Optional[str] = Field(
        default=None, description="MIME type of the static resource (e.g., image/png)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def require_content(self) -> CompanionCreative:
        """A companion needs either a resource URL or HTML content."""
        if not self.resource_url and not self.html_content:
            raise ValueError("companion must have resource_url or html_content")
        return self

    def matches_size(self, width: int, height: int) -> bool:
        """Check for an exact slot-size match."""
        return self.width == width and self.height == height
