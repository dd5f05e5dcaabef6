"""
Beat synchronization for music engineer module.

Aligns shot boundaries to nearby beats, extends shots to full phrases and
clamps durations into each shot's allowed range.
"""
import asyncio
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional
from uuid import UUID

from shared.logging import get_logger
from shared.models.audio import Beat
from shared.models.assembly import SyncedClip
from shared.models.storyboard import Shot, Storyboard
from .config import BEAT_SEARCH_RADIUS
from .phrase_locator import find_containing_phrase

logger = get_logger("music_engineer.beat_sync")


def find_nearest_beat(
    time: float,
    beats: List[Beat],
    max_distance: float = BEAT_SEARCH_RADIUS
) -> Optional[Beat]:
    """
    Find the beat nearest to a timestamp.

    Args:
        time: Target time in seconds
        beats: All beats in the track
        max_distance: Maximum accepted distance to the nearest beat (default: 1.0s)

    Returns:
        Nearest beat, or None if there are no beats or the nearest is too far away
    """
    if not beats:
        return None

    # min() keeps the earliest beat on ties
    nearest = min(beats, key=lambda b: abs(b.time - time))

    if abs(nearest.time - time) <= max_distance:
        return nearest

    return None


def find_end_beat(
    original_end: float,
    synced_start: float,
    beats: List[Beat]
) -> Optional[Beat]:
    """
    Find the beat an end edge should snap to.

    Only beats after the (already synced) start and not after the original end
    are candidates, so an aligned shot never runs into the next one.
    """
    candidates = [b for b in beats if synced_start < b.time <= original_end]
    return find_nearest_beat(original_end, candidates)


def sync_clip_to_beats(shot: Shot, beats: List[Beat]) -> SyncedClip:
    """
    Synchronize a single shot to the nearest beats.

    Order of adjustments: edge alignment, phrase extension (widen only),
    then duration clamp (moves the end only).

    Args:
        shot: Storyboard shot to synchronize
        beats: Beats ordered by time

    Returns:
        SyncedClip with adjusted timing
    """
    original_start = shot.start
    original_end = shot.end
    alignment = shot.music_alignment

    synced_start = original_start
    synced_end = original_end
    start_beats: List[float] = []
    end_beats: List[float] = []

    if alignment and alignment.align_start_to_beat:
        start_beat = find_nearest_beat(original_start, beats)
        if start_beat:
            synced_start = start_beat.time
            start_beats.append(start_beat.time)

    if alignment and alignment.align_end_to_beat:
        end_beat = find_end_beat(original_end, synced_start, beats)
        if end_beat:
            synced_end = end_beat.time
            end_beats.append(end_beat.time)

    if synced_end <= synced_start:
        # Start snapped past the original end; keep the original length
        logger.debug(
            f"Shot {shot.id} start beat lies beyond its end, keeping original duration",
            extra={"shot_id": shot.id, "beat_time": synced_start}
        )
        synced_end = synced_start + (original_end - original_start)
        end_beats = []

    if alignment and alignment.extend_to_complete_phrase:
        phrase = find_containing_phrase(original_start, original_end, beats)
        if phrase:
            phrase_start, phrase_end = phrase
            synced_start = min(synced_start, phrase_start)
            synced_end = max(synced_end, phrase_end)

    if shot.duration_flexibility:
        min_duration = shot.duration_flexibility.min_duration
        max_duration = shot.duration_flexibility.max_duration
        new_duration = synced_end - synced_start

        if new_duration < min_duration:
            synced_end = synced_start + min_duration
        elif new_duration > max_duration:
            synced_end = synced_start + max_duration

    aligned_beats = start_beats + [t for t in end_beats if t not in start_beats]
    # Phrase extension or clamping may have moved an edge off its beat
    aligned_beats = [t for t in aligned_beats if t in (synced_start, synced_end)]

    return SyncedClip(
        shot_id=shot.id,
        original_start=original_start,
        original_end=original_end,
        synced_start=synced_start,
        synced_end=synced_end,
        timing_offset_ms=abs(synced_start - original_start) * 1000,
        aligned_beats=aligned_beats
    )


async def sync_all_clips(
    storyboard: Storyboard,
    beats: List[Beat],
    job_id: Optional[UUID] = None,
    max_workers: Optional[int] = None
) -> Dict[str, SyncedClip]:
    """
    Synchronize every shot in the storyboard in parallel.

    Each shot is independent, so work is spread over a thread pool bounded by
    CPU count. Results are keyed by shot id in storyboard order, independent
    of completion order.

    Args:
        storyboard: Storyboard with all scenes
        beats: Beats ordered by time
        job_id: Job ID for logging
        max_workers: Pool size (default: CPU count)

    Returns:
        Dict of shot_id -> SyncedClip
    """
    shots = storyboard.all_shots()
    if not shots:
        return {}

    loop = asyncio.get_running_loop()
    workers = max_workers or os.cpu_count() or 1

    with ThreadPoolExecutor(max_workers=min(workers, len(shots))) as executor:
        tasks = [
            loop.run_in_executor(executor, sync_clip_to_beats, shot, beats)
            for shot in shots
        ]
        synced = await asyncio.gather(*tasks)

    synced_clips = {clip.shot_id: clip for clip in synced}
    total_offset = sum(clip.timing_offset_ms for clip in synced)

    logger.info(
        f"Synchronized {len(synced_clips)} clips to beats",
        extra={
            "job_id": str(job_id) if job_id else None,
            "clip_count": len(synced_clips),
            "avg_offset_ms": total_offset / len(synced)
        }
    )

    return synced_clips
