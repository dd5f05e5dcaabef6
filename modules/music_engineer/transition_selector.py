"""
Transition selection for music engineer module.

Picks a transition per shot boundary from beat energy and the visual
similarity of the adjoining shots.
"""
import random
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from shared.logging import get_logger
from shared.models.audio import Beat
from shared.models.assembly import SyncedClip, Transition, TransitionType
from shared.models.storyboard import Shot, Storyboard, StoryboardScene
from .beat_sync import find_nearest_beat
from .config import (
    MIN_TRANSITION_DURATION,
    MAX_TRANSITION_DURATION,
    HIGH_ENERGY_THRESHOLD,
    MEDIUM_ENERGY_THRESHOLD,
    SIMILARITY_OVERRIDE_THRESHOLD,
    DEFAULT_BOUNDARY_ENERGY,
    SHOT_TYPE_WEIGHT,
    LOCATION_WEIGHT,
    CHARACTER_WEIGHT,
)

logger = get_logger("music_engineer.transition_selector")

HIGH_ENERGY_TRANSITIONS = (TransitionType.HARD_CUT, TransitionType.WHIP_PAN, TransitionType.GLITCH)
MEDIUM_ENERGY_TRANSITIONS = (TransitionType.CROSSFADE, TransitionType.MATCH_CUT)
LOW_ENERGY_TRANSITIONS = (TransitionType.FADE_TO_BLACK, TransitionType.CROSSFADE)


def calculate_shot_similarity(shot_a: Shot, shot_b: Shot) -> float:
    """
    Weighted visual similarity of two shots in [0, 1].

    Shot type match and location match contribute 0.3 each; the fraction of
    shared characters contributes 0.4.
    """
    similarity = 0.0

    if shot_a.shot_type == shot_b.shot_type:
        similarity += SHOT_TYPE_WEIGHT

    if shot_a.location_ref == shot_b.location_ref:
        similarity += LOCATION_WEIGHT

    # A ref listed twice in shot_a counts twice
    shared = [ref for ref in shot_a.character_refs if ref in shot_b.character_refs]
    denominator = max(len(shot_a.character_refs), len(shot_b.character_refs), 1)
    similarity += (len(shared) / denominator) * CHARACTER_WEIGHT

    return min(similarity, 1.0)


def _energy_tier(beat_energy: float):
    """Return (pool, duration, label) for an energy level."""
    if beat_energy > HIGH_ENERGY_THRESHOLD:
        return HIGH_ENERGY_TRANSITIONS, MIN_TRANSITION_DURATION, "High-energy"
    if beat_energy > MEDIUM_ENERGY_THRESHOLD:
        midpoint = (MIN_TRANSITION_DURATION + MAX_TRANSITION_DURATION) / 2
        return MEDIUM_ENERGY_TRANSITIONS, midpoint, "Medium-energy"
    return LOW_ENERGY_TRANSITIONS, MAX_TRANSITION_DURATION, "Gentle"


def select_transition(
    shot_a: Shot,
    shot_b: Shot,
    beat_energy: float,
    transition_time: float,
    rng: Optional[random.Random] = None
) -> Transition:
    """
    Select a transition for the boundary between two shots.

    Args:
        shot_a: Outgoing shot
        shot_b: Incoming shot
        beat_energy: Energy at the boundary (0-1)
        transition_time: Boundary timestamp in seconds
        rng: Randomness source for the pick within an energy tier

    Returns:
        Selected transition
    """
    rng = rng or random.Random()

    pool, duration, label = _energy_tier(beat_energy)
    transition_type = rng.choice(pool)
    description = f"{label} transition at beat energy {beat_energy * 100:.0f}%"

    similarity = calculate_shot_similarity(shot_a, shot_b)
    if similarity > SIMILARITY_OVERRIDE_THRESHOLD and transition_type != TransitionType.HARD_CUT:
        transition_type = TransitionType.MATCH_CUT
        description += " (similar compositions detected)"

    logger.debug(
        f"Selected {transition_type.value} between {shot_a.id} and {shot_b.id}",
        extra={
            "from_shot": shot_a.id,
            "to_shot": shot_b.id,
            "transition_time": transition_time,
            "beat_energy": beat_energy,
            "similarity": similarity
        }
    )

    return Transition(type=transition_type, duration_seconds=duration, description=description)


def derive_scene_transitions(
    scene: StoryboardScene,
    beats: Sequence[Beat],
    synced_clips: Dict[str, SyncedClip],
    rng: Optional[random.Random] = None
) -> List[Optional[Transition]]:
    """
    Derive the trailing transition for every shot in a scene.

    The boundary energy is taken from the beat nearest the outgoing shot's
    synced end. The last shot has no trailing transition.
    """
    rng = rng or random.Random()
    transitions: List[Optional[Transition]] = []

    for current_shot, next_shot in zip(scene.shots, scene.shots[1:]):
        synced_clip = synced_clips.get(current_shot.id)
        if synced_clip is None:
            transitions.append(None)
            continue

        transition_time = synced_clip.synced_end
        beat = find_nearest_beat(transition_time, list(beats))
        beat_energy = beat.energy if beat else DEFAULT_BOUNDARY_ENERGY

        transitions.append(
            select_transition(current_shot, next_shot, beat_energy, transition_time, rng)
        )

    if scene.shots:
        transitions.append(None)

    return transitions


def apply_intelligent_transitions(
    storyboard: Storyboard,
    beats: Sequence[Beat],
    synced_clips: Dict[str, SyncedClip],
    rng: Optional[random.Random] = None,
    job_id: Optional[UUID] = None
) -> Storyboard:
    """
    Build a copy of the storyboard with transitions attached to every scene.

    The input storyboard is left untouched.
    """
    rng = rng or random.Random()

    enhanced_scenes = [
        scene.model_copy(update={"transitions": derive_scene_transitions(scene, beats, synced_clips, rng)})
        for scene in storyboard.scenes
    ]

    transition_count = sum(
        1 for scene in enhanced_scenes for t in scene.transitions if t is not None
    )
    logger.info(
        f"Derived {transition_count} transitions across {len(enhanced_scenes)} scenes",
        extra={"job_id": str(job_id) if job_id else None, "transition_count": transition_count}
    )

    return Storyboard(scenes=enhanced_scenes)
