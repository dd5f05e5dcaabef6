"""
Unit tests for media_preparer module.
"""
import pytest

from modules.music_engineer.media_preparer import is_ephemeral_reference, prepare_media
from shared.models.storyboard import Storyboard, StoryboardScene
from assembly_builders import make_shot


class TestIsEphemeralReference:
    """Tests for is_ephemeral_reference function."""

    @pytest.mark.parametrize("ref", [
        "blob:http://localhost:5173/1b2c",
        "data:image/png;base64,iVBORw0KGgo=",
        "file:///tmp/frame.png",
        "http://localhost:3001/uploads/clip.mp4",
        "http://127.0.0.1/clip.mp4",
        "/var/tmp/clip.mp4",
    ])
    def test_local_references(self, ref):
        """Local and in-browser references are flagged."""
        assert is_ephemeral_reference(ref) is True

    @pytest.mark.parametrize("ref", [
        "https://cdn.example.com/clips/clip.mp4",
        "https://project.supabase.co/storage/v1/object/public/video-clips/clip0.mp4",
        "s3://bucket/clip.mp4",
    ])
    def test_remote_references(self, ref):
        """Remote references are fine."""
        assert is_ephemeral_reference(ref) is False


class TestPrepareMedia:
    """Tests for prepare_media function."""

    def test_collects_warnings(self):
        """Each ephemeral shot produces one warning; nothing raises."""
        storyboard = Storyboard(scenes=[StoryboardScene(id="scene", shots=[
            make_shot("ok", 0.0, 1.0),
            make_shot("blob", 1.0, 2.0, still_image_ref="blob:http://localhost/abc"),
            make_shot("data", 2.0, 3.0, still_image_ref=None, clip_ref="data:video/mp4;base64,AAAA"),
        ])])

        warnings = prepare_media(storyboard)

        assert warnings == [
            "Shot blob uses local URL, may need upload",
            "Shot data uses local URL, may need upload",
        ]

    def test_clip_reference_takes_precedence(self):
        """The clip reference is what gets rendered, so it is what gets checked."""
        storyboard = Storyboard(scenes=[StoryboardScene(id="scene", shots=[
            make_shot(
                "mixed", 0.0, 1.0,
                still_image_ref="blob:http://localhost/abc",
                clip_ref="https://cdn.example.com/clips/mixed.mp4"
            ),
        ])])

        assert prepare_media(storyboard) == []

    def test_shot_without_media_is_skipped(self):
        """Missing media is validation's concern, not this stage's."""
        storyboard = Storyboard(scenes=[StoryboardScene(id="scene", shots=[
            make_shot("empty", 0.0, 1.0, still_image_ref=None),
        ])])

        assert prepare_media(storyboard) == []
