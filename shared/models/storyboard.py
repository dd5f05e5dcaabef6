"""
Storyboard data models.

Defines Shot, StoryboardScene and Storyboard models plus the per-shot
timing constraints (duration flexibility and music alignment).
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .assembly import Transition


class DurationFlexibility(BaseModel):
    """Allowed duration range for a shot after synchronization."""

    model_config = ConfigDict(frozen=True)

    min_duration: float = Field(..., gt=0, description="Minimum duration in seconds")
    max_duration: float = Field(..., gt=0, description="Maximum duration in seconds")

    @model_validator(mode="after")
    def check_range(self) -> "DurationFlexibility":
        if self.min_duration > self.max_duration:
            raise ValueError(
                f"min_duration ({self.min_duration}) must not exceed max_duration ({self.max_duration})"
            )
        return self


class MusicAlignment(BaseModel):
    """Which shot edges should snap to the music."""

    model_config = ConfigDict(frozen=True)

    align_start_to_beat: bool = False
    align_end_to_beat: bool = False
    extend_to_complete_phrase: bool = False


class Shot(BaseModel):
    """Single storyboard shot with its media references."""

    model_config = ConfigDict(frozen=True)

    id: str
    start: float = Field(..., ge=0, description="Start time in seconds")
    end: float = Field(..., gt=0, description="End time in seconds")
    shot_type: str = Field(default="", description="Framing: wide, medium, close-up, etc.")
    location_ref: Optional[str] = None
    character_refs: List[str] = Field(default_factory=list, description="List of character IDs")
    duration_flexibility: Optional[DurationFlexibility] = None
    music_alignment: Optional[MusicAlignment] = None
    still_image_ref: Optional[str] = Field(default=None, description="Preview/still image URL")
    clip_ref: Optional[str] = Field(default=None, description="Generated video clip URL")
    subject: Optional[str] = None
    lyric_text: Optional[str] = Field(default=None, description="Lyric overlay text shown on this shot")

    @model_validator(mode="after")
    def check_time_range(self) -> "Shot":
        if self.end <= self.start:
            raise ValueError(f"Shot {self.id}: end ({self.end}) must be greater than start ({self.start})")
        return self

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def media_ref(self) -> Optional[str]:
        """Clip reference if present, otherwise the still image."""
        return self.clip_ref or self.still_image_ref


class StoryboardScene(BaseModel):
    """Ordered shots of one scene plus the transitions derived for them."""

    model_config = ConfigDict(frozen=True)

    id: str
    shots: List[Shot] = Field(default_factory=list)
    transitions: List[Optional[Transition]] = Field(
        default_factory=list,
        description="Trailing transition per shot; None after the last shot"
    )


class Storyboard(BaseModel):
    """Complete storyboard: ordered scenes."""

    model_config = ConfigDict(frozen=True)

    scenes: List[StoryboardScene]

    def all_shots(self) -> List[Shot]:
        return [shot for scene in self.scenes for shot in scene.shots]
