"""
Data models for the music video assembly pipeline.

This module exports all Pydantic models used across pipeline modules.
"""

from .audio import Beat, beat_times
from .assembly import (
    SyncedClip,
    TransitionType,
    Transition,
    Resolution,
    ExportOptions,
    RenderScene,
    RenderRequest,
    RenderResult,
    QualityIssue,
    DurationMatch,
    PerformanceMetrics,
    QualityReport,
    ProgressEvent
)
from .storyboard import (
    DurationFlexibility,
    MusicAlignment,
    Shot,
    StoryboardScene,
    Storyboard
)
from .result import AssemblyResult

__all__ = [
    # Audio models
    "Beat",
    "beat_times",
    # Storyboard models
    "DurationFlexibility",
    "MusicAlignment",
    "Shot",
    "StoryboardScene",
    "Storyboard",
    # Assembly models
    "SyncedClip",
    "TransitionType",
    "Transition",
    "Resolution",
    "ExportOptions",
    "RenderScene",
    "RenderRequest",
    "RenderResult",
    "QualityIssue",
    "DurationMatch",
    "PerformanceMetrics",
    "QualityReport",
    "ProgressEvent",
    "AssemblyResult",
]
