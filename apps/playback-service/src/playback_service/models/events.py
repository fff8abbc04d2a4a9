"""
Event models for the content player and the ad subsystem.

Ad events are a tagged variant: every payload carries a ``type`` literal
and the union is discriminated on it, so handlers can dispatch with a
plain isinstance check instead of inspecting untyped callback arguments.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from playback_service.models.creatives import CompanionCreative

PlayerEventType = Literal[
    "timeupdate",
    "seeking",
    "seeked",
    "play",
    "pause",
    "ratechange",
    "loadedmetadata",
    "ended",
]


class PlayerEvent(BaseModel):
    """Content player event with the properties sampled when it fired."""

    type: PlayerEventType = Field(..., description="Player event name")
    current_time: float = Field(default=0.0, description="Content position in seconds")
    duration: Optional[float] = Field(
        default=None, description="Content duration in seconds, if reported"
    )
    playback_rate: Optional[float] = Field(
        default=None, description="Playback rate, if reported"
    )

    model_config = {"frozen": True}

    @field_validator("current_time")
    @classmethod
    def validate_current_time(cls, v: float) -> float:
        """Clamp tiny negative positions reported by some players."""
        if v < 0:
            return 0.0
        return v


class AdBreakReadyEvent(BaseModel):
    """The ad subsystem declares the next break playable."""

    type: Literal["ready"] = "ready"
    break_index: Optional[int] = Field(
        default=None, ge=0, description="Break index, when the subsystem reports one"
    )


class BreakStartedEvent(BaseModel):
    """A linear break started playing."""

    type: Literal["break_started"] = "break_started"
    companions: list[CompanionCreative] = Field(default_factory=list)


class BreakEndedEvent(BaseModel):
    """A linear break finished playing."""

    type: Literal["break_ended"] = "break_ended"


class AdStartedEvent(BaseModel):
    """An individual ad inside a break started playing."""

    type: Literal["ad_started"] = "ad_started"
    ad_id: Optional[str] = None
    companions: list[CompanionCreative] = Field(default_factory=list)


class ContentPauseRequestedEvent(BaseModel):
    """The ad subsystem asks the content player to pause."""

    type: Literal["content_pause_requested"] = "content_pause_requested"


class ContentResumeRequestedEvent(BaseModel):
    """The ad subsystem asks the content player to resume."""

    type: Literal["content_resume_requested"] = "content_resume_requested"


class AdErrorEvent(BaseModel):
    """Error reported by the ad subsystem."""

    type: Literal["error"] = "error"
    reason: str = Field(..., description="Diagnostic cause")
    code: Optional[str] = Field(default=None, description="Subsystem error code")


AdEvent = Annotated[
    Union[
        AdBreakReadyEvent,
        BreakStartedEvent,
        BreakEndedEvent,
        AdStartedEvent,
        ContentPauseRequestedEvent,
        ContentResumeRequestedEvent,
        AdErrorEvent,
    ],
    Field(discriminator="type"),
]

_ad_event_adapter: TypeAdapter[AdEvent] = TypeAdapter(AdEvent)


def parse_ad_event(data: dict[str, Any]) -> AdEvent:
    """Build a typed ad event from a raw payload.

    Args:
        data: Dict with a ``type`` key and variant fields

    Returns:
        The matching ad event model

    Raises:
        pydantic.ValidationError: If the type is unknown or fields are invalid
    """
    return _ad_event_adapter.validate_python(data)
