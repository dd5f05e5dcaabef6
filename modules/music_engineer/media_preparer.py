"""
Media preparation for music engineer module.

Checks shot media references before rendering. Problems found here are
warnings only and never fail the run.
"""
from typing import List, Optional
from urllib.parse import urlparse
from uuid import UUID

from shared.logging import get_logger
from shared.models.storyboard import Storyboard
from .config import EPHEMERAL_PREFIXES, LOOPBACK_HOSTS

logger = get_logger("music_engineer.media_preparer")


def is_ephemeral_reference(media_ref: str) -> bool:
    """True if a reference only exists on the local machine or in the browser session."""
    if media_ref.startswith(EPHEMERAL_PREFIXES):
        return True

    parsed = urlparse(media_ref)
    if parsed.scheme in ("http", "https"):
        return parsed.hostname in LOOPBACK_HOSTS

    # Bare filesystem paths
    return parsed.scheme == ""


def prepare_media(storyboard: Storyboard, job_id: Optional[UUID] = None) -> List[str]:
    """
    Verify the media reference of every shot.

    Args:
        storyboard: Storyboard to check
        job_id: Job ID for logging

    Returns:
        List of warning messages, one per shot with a reference that may not
        survive a remote render
    """
    warnings: List[str] = []

    for scene in storyboard.scenes:
        for shot in scene.shots:
            media_ref = shot.media_ref
            if not media_ref:
                continue

            if is_ephemeral_reference(media_ref):
                message = f"Shot {shot.id} uses local URL, may need upload"
                warnings.append(message)
                logger.warning(
                    message,
                    extra={"job_id": str(job_id) if job_id else None, "shot_id": shot.id}
                )

    return warnings
