"""
Assembly data models.

Defines SyncedClip, Transition, export/render request models and the
QualityReport produced at the end of an assembly run.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SyncedClip(BaseModel):
    """Shot time range after beat synchronization."""

    model_config = ConfigDict(frozen=True)

    shot_id: str
    original_start: float
    original_end: float
    synced_start: float
    synced_end: float
    timing_offset_ms: float = Field(ge=0, description="|synced_start - original_start| in milliseconds")
    aligned_beats: List[float] = Field(default_factory=list, description="Beat times the clip edges snapped to")

    @model_validator(mode="after")
    def check_synced_range(self) -> "SyncedClip":
        if self.synced_end <= self.synced_start:
            raise ValueError(
                f"Synced clip {self.shot_id}: synced_end ({self.synced_end}) must be greater "
                f"than synced_start ({self.synced_start})"
            )
        return self

    @property
    def synced_duration(self) -> float:
        return self.synced_end - self.synced_start


class TransitionType(str, Enum):
    """Visual transition types."""
    HARD_CUT = "Hard Cut"
    WHIP_PAN = "Whip Pan"
    GLITCH = "Glitch"
    CROSSFADE = "Crossfade"
    MATCH_CUT = "Match Cut"
    FADE_TO_BLACK = "Fade to Black"


class Transition(BaseModel):
    """Transition between two adjacent shots."""

    model_config = ConfigDict(frozen=True)

    type: TransitionType
    duration_seconds: float = Field(gt=0, description="Transition duration in seconds")
    description: str


class Resolution(str, Enum):
    """Supported export resolutions."""
    HD_720 = "720p"
    FULL_HD_1080 = "1080p"
    UHD_2160 = "2160p"


class ExportOptions(BaseModel):
    """Export settings chosen by the user."""

    model_config = ConfigDict(frozen=True)

    resolution: Resolution = Resolution.FULL_HD_1080
    aspect_ratio: str = "16:9"
    fps: Optional[int] = Field(default=None, gt=0, description="Frame rate override")
    output_format: Optional[str] = Field(default=None, description="Container override, e.g. 'mp4'")


class RenderScene(BaseModel):
    """One entry of the render request timeline."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    image_url: Optional[str] = None
    video_url: Optional[str] = None
    duration: float = Field(gt=0, description="Duration in seconds")
    description: str


class RenderRequest(BaseModel):
    """Request handed to the external renderer."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    scenes: List[RenderScene]
    audio_url: str
    width: int
    height: int
    fps: int
    output_format: str

    @property
    def total_duration(self) -> float:
        return sum(scene.duration for scene in self.scenes)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the renderer's camelCase JSON body."""
        return self.model_dump(by_alias=True, mode="json")


class RenderResult(BaseModel):
    """Response from the external renderer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    success: bool
    video_url: Optional[str] = None
    error: Optional[str] = None
    processing_time: Optional[float] = None
    duration_seconds: Optional[float] = Field(default=None, description="Rendered duration if reported")


class QualityIssue(BaseModel):
    """Single issue found during quality validation."""

    model_config = ConfigDict(frozen=True)

    severity: Literal["error", "warning", "info"]
    message: str


class DurationMatch(BaseModel):
    """Expected vs. actual rendered duration."""

    model_config = ConfigDict(frozen=True)

    expected_seconds: float
    actual_seconds: float
    difference_ms: float


class PerformanceMetrics(BaseModel):
    """Render performance summary."""

    model_config = ConfigDict(frozen=True)

    render_time_seconds: float
    estimated_cost_usd: float
    bottleneck_phase: Optional[str] = None


class QualityReport(BaseModel):
    """Scored quality report for a rendered assembly."""

    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    sync_accuracy_ms: float
    frames_dropped: bool = False
    duration_match: DurationMatch
    issues: List[QualityIssue] = Field(default_factory=list)
    performance: PerformanceMetrics

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible representation for downstream display."""
        return self.model_dump(mode="json", exclude_none=True)


class ProgressEvent(BaseModel):
    """Progress notification emitted during assembly."""

    model_config = ConfigDict(frozen=True)

    fraction: float = Field(ge=0, le=1)
    stage: str

