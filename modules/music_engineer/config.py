"""
Music engineer configuration.

Centralized tunables for beat synchronization, transition selection,
render output and quality scoring.
"""
import os
from typing import Dict, Tuple

from shared.models.assembly import Resolution

# Beat synchronization
BEAT_SEARCH_RADIUS = float(os.getenv("BEAT_SEARCH_RADIUS", "1.0"))  # Max distance (s) to accept a nearest beat

# Phrase estimation. A phrase is approximated as a fixed number of beat
# intervals; this is a heuristic, tune per genre if needed.
PHRASE_MIN_BEATS = 8  # Fewer beats than this gives no phrase estimate
PHRASE_MAX_INTERVALS = 16  # Only the first N beat-to-beat gaps are averaged
BEATS_PER_PHRASE = int(os.getenv("BEATS_PER_PHRASE", "4"))

# Transition selection
MIN_TRANSITION_DURATION = 0.2
MAX_TRANSITION_DURATION = 1.0
HIGH_ENERGY_THRESHOLD = 0.7
MEDIUM_ENERGY_THRESHOLD = 0.4
SIMILARITY_OVERRIDE_THRESHOLD = 0.8
DEFAULT_BOUNDARY_ENERGY = 0.5  # Used when no beat lies within the search radius of a boundary

# Shot similarity weights (sum to 1.0)
SHOT_TYPE_WEIGHT = 0.3
LOCATION_WEIGHT = 0.3
CHARACTER_WEIGHT = 0.4

# Render output
OUTPUT_FPS = 30
OUTPUT_FORMAT = "mp4"
RESOLUTION_MAP: Dict[Resolution, Tuple[int, int]] = {
    Resolution.HD_720: (1280, 720),
    Resolution.FULL_HD_1080: (1920, 1080),
    Resolution.UHD_2160: (3840, 2160),
}

# Quality validation
SYNC_TOLERANCE_MS = float(os.getenv("SYNC_TOLERANCE_MS", "100"))
DURATION_WARNING_MS = float(os.getenv("DURATION_WARNING_MS", "500"))
ISSUE_PENALTY = 10  # Score points deducted per issue
COST_PER_SECOND = float(os.getenv("RENDER_COST_PER_SECOND", "0.01"))  # USD per second of render time
RENDER_TIME_CEILING_SECONDS = float(os.getenv("RENDER_TIME_CEILING_SECONDS", "300"))  # 5 minutes
BOTTLENECK_PHASE = "post_production"

# Progress milestones (fraction of total)
PROGRESS_VALIDATE = 0.05
PROGRESS_SYNC = 0.1
PROGRESS_TRANSITIONS = 0.2
PROGRESS_MEDIA = 0.3
PROGRESS_RENDER_START = 0.4
PROGRESS_RENDER_END = 0.8
PROGRESS_QUALITY = 0.9
PROGRESS_DONE = 1.0

# Reference prefixes that will not survive a remote render
EPHEMERAL_PREFIXES = ("blob:", "data:", "file:")
LOOPBACK_HOSTS = ("localhost", "127.0.0.1", "0.0.0.0", "::1")


def get_output_dimensions(resolution: Resolution) -> Tuple[int, int]:
    """
    Get output width and height for an export resolution.

    Args:
        resolution: Export resolution ("720p", "1080p", "2160p")

    Returns:
        Tuple of (width, height) in pixels

    Raises:
        ValueError: If resolution is not supported
    """
    try:
        return RESOLUTION_MAP[Resolution(resolution)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unsupported resolution: {resolution}") from e
