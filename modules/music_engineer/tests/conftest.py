"""
Pytest fixtures for music engineer tests.
"""
import random

import pytest

from shared.models.storyboard import Storyboard, StoryboardScene
from assembly_builders import FakeRenderer, make_beats, make_shot


@pytest.fixture
def shot_factory():
    """Fixture that returns the make_shot function."""
    return make_shot


@pytest.fixture
def beat_factory():
    """Fixture that returns the make_beats function."""
    return make_beats


@pytest.fixture
def seeded_rng():
    """Deterministic randomness source."""
    return random.Random(1234)


@pytest.fixture
def sample_storyboard():
    """Two scenes with two shots each, all with stills."""
    return Storyboard(scenes=[
        StoryboardScene(id="scene-1", shots=[
            make_shot("s1-a", 0.0, 2.0, align_start=True, align_end=True),
            make_shot("s1-b", 2.0, 4.0, shot_type="close-up", location_ref="loc-2"),
        ]),
        StoryboardScene(id="scene-2", shots=[
            make_shot("s2-a", 4.0, 6.0, subject="Singer on rooftop"),
            make_shot("s2-b", 6.0, 8.0, lyric_text="We run tonight", clip_ref="https://cdn.example.com/clips/s2b.mp4"),
        ]),
    ])


@pytest.fixture
def sample_beats():
    """Beats every 0.5s for 8 seconds."""
    return make_beats(17, interval=0.5, energy=0.5)


@pytest.fixture
def fake_renderer():
    """Successful in-memory renderer."""
    return FakeRenderer()
