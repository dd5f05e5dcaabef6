"""
Error hierarchy for the assembly pipeline.

Fatal conditions raise; recoverable post-render conditions are reported as
quality issues instead.
"""

from typing import List, Optional
from uuid import UUID


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, job_id: Optional[UUID] = None):
        super().__init__(message)
        self.message = message
        self.job_id = job_id


class ConfigError(PipelineError):
    """Configuration is missing or invalid."""


class ValidationError(PipelineError):
    """Input failed validation."""


class AssemblyError(PipelineError):
    """Base exception for assembly failures (no quality report is produced)."""


class StoryboardValidationError(AssemblyError):
    """Shot list failed pre-render validation."""

    def __init__(self, message: str, issues: Optional[List[str]] = None, job_id: Optional[UUID] = None):
        super().__init__(message, job_id=job_id)
        self.issues = list(issues or [])


class RenderError(AssemblyError):
    """External renderer reported a failure."""


class AssemblyCancelledError(AssemblyError):
    """Assembly was cancelled before completion."""
