"""
Musical phrase estimation for music engineer module.

Approximates the repeating phrase length from beat spacing and locates the
phrase-aligned window containing a time range.
"""
import math
from typing import List, Optional, Tuple

from shared.models.audio import Beat
from .config import PHRASE_MIN_BEATS, PHRASE_MAX_INTERVALS, BEATS_PER_PHRASE


def estimate_phrase_length(beats: List[Beat]) -> Optional[float]:
    """
    Estimate phrase length from the mean beat interval.

    Args:
        beats: Beats ordered by time

    Returns:
        Phrase length in seconds, or None if there are too few beats
    """
    if len(beats) < PHRASE_MIN_BEATS:
        return None

    sample = beats[:PHRASE_MAX_INTERVALS + 1]
    intervals = [b.time - a.time for a, b in zip(sample, sample[1:])]
    avg_interval = sum(intervals) / len(intervals)
    if avg_interval <= 0:
        return None

    return avg_interval * BEATS_PER_PHRASE


def find_containing_phrase(
    start: float,
    end: float,
    beats: List[Beat]
) -> Optional[Tuple[float, float]]:
    """
    Find the phrase-aligned window containing [start, end].

    Windows are multiples of the estimated phrase length measured from time zero.

    Returns:
        (phrase_start, phrase_end) or None if no phrase length can be estimated
    """
    phrase_length = estimate_phrase_length(beats)
    if not phrase_length:
        return None

    phrase_start = math.floor(start / phrase_length) * phrase_length
    phrase_end = math.ceil(end / phrase_length) * phrase_length

    return phrase_start, phrase_end
