"""
Audio timing data models.

Defines the Beat model consumed from upstream beat detection.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field


class Beat(BaseModel):
    """Timestamped beat with normalized energy."""

    model_config = ConfigDict(frozen=True)

    time: float = Field(..., ge=0, description="Beat time in seconds")
    energy: float = Field(default=0.5, ge=0, le=1, description="Normalized beat energy 0-1")


def beat_times(beats: List[Beat]) -> List[float]:
    """Return the timestamps of a beat list."""
    return [beat.time for beat in beats]
