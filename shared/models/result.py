"""
Assembly result model.

Bundles the rendered asset reference, quality report and the derived
artifacts of one assembly run.
"""

from typing import Dict, List
from uuid import UUID
from pydantic import BaseModel, Field, field_serializer

from .assembly import QualityReport, SyncedClip
from .storyboard import StoryboardScene


class AssemblyResult(BaseModel):
    """Final output of an assembly run."""

    job_id: UUID
    video_url: str
    quality_report: QualityReport
    synced_clips: Dict[str, SyncedClip]
    scenes: List[StoryboardScene] = Field(
        default_factory=list,
        description="Copies of the input scenes with derived transitions attached"
    )
    media_warnings: List[str] = Field(default_factory=list)
    timings: Dict[str, float] = Field(default_factory=dict, description="Stage durations in seconds")

    @field_serializer("job_id")
    def serialize_uuid(self, value: UUID) -> str:
        """Serialize UUID to string."""
        return str(value)
