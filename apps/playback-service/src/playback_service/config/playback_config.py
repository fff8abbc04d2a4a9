"""
Playback session configuration from environment variables.

- Environment variables use the PLAYBACK_ prefix
- Defaults match common web-player slot sizes
- Validation via Pydantic Field constraints
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class PlaybackConfig(BaseSettings):
    """Playback session configuration from environment variables.

    Attributes:
        cue_tolerance_s: Tolerance when comparing the clock to a cue offset.
            Default 0.25s absorbs the granularity of timeupdate events, which
            most players fire every 250ms or so.
        companion_hold_s: How long a companion stays visible after the last
            break or ad start. Default 15 seconds.
        metadata_timeout_s: Max wait for the content duration before ad
            scheduling is abandoned for the session.
        companion_width: Preferred companion slot width in pixels.
        companion_height: Preferred companion slot height in pixels.
        linear_slot_width: Width passed to the ads manager's init.
        linear_slot_height: Height passed to the ads manager's init.
    """

    cue_tolerance_s: float = Field(
        default=0.25,
        ge=0.0,
        le=2.0,
        description="Cue comparison tolerance in seconds",
    )
    companion_hold_s: float = Field(
        default=15.0,
        ge=0.01,
        le=300.0,
        description="Companion hold duration in seconds",
    )
    metadata_timeout_s: float = Field(
        default=10.0,
        ge=0.1,
        le=120.0,
        description="Max seconds to wait for content duration",
    )
    companion_width: int = Field(
        default=640,
        ge=1,
        le=4096,
        description="Preferred companion width in pixels",
    )
    companion_height: int = Field(
        default=375,
        ge=1,
        le=4096,
        description="Preferred companion height in pixels",
    )
    linear_slot_width: int = Field(
        default=640,
        ge=1,
        le=4096,
        description="Linear ad slot width in pixels",
    )
    linear_slot_height: int = Field(
        default=360,
        ge=1,
        le=4096,
        description="Linear ad slot height in pixels",
    )

    model_config = {
        "env_prefix": "PLAYBACK_",
        "case_sensitive": False,
    }

    @property
    def companion_size(self) -> tuple[int, int]:
        """Preferred companion (width, height)."""
        return (self.companion_width, self.companion_height)

    @property
    def linear_slot_size(self) -> tuple[int, int]:
        """Linear ad slot (width, height)."""
        return (self.linear_slot_width, self.linear_slot_height)
