"""
Unit tests for quality_validator module.
"""
from unittest.mock import patch, AsyncMock, MagicMock

import httpx
import pytest

from modules.music_engineer.quality_validator import (
    calculate_overall_score,
    check_asset_available,
    estimate_rendering_cost,
    validate_quality,
)

VIDEO_URL = "https://cdn.example.com/renders/final.mp4"
AUDIO_URL = "https://cdn.example.com/audio/song.mp3"


def reachable():
    return patch(
        "modules.music_engineer.quality_validator.check_asset_available",
        new_callable=AsyncMock,
        return_value=None
    )


def http_client(head=None, head_side_effect=None) -> MagicMock:
    client = MagicMock()
    client.head = AsyncMock(return_value=head, side_effect=head_side_effect)
    client_cls = MagicMock()
    client_cls.return_value.__aenter__ = AsyncMock(return_value=client)
    client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return client_cls


class TestCalculateOverallScore:
    """Tests for calculate_overall_score function."""

    def test_perfect(self):
        assert calculate_overall_score(0, 0.0) == 100

    def test_penalties(self):
        """10 points per issue and 1 point per 100ms."""
        assert calculate_overall_score(2, 500.0) == 75

    def test_clamped_to_zero(self):
        assert calculate_overall_score(5, 10_000.0) == 0

    def test_non_increasing_in_issues(self):
        scores = [calculate_overall_score(n, 250.0) for n in range(15)]
        assert scores == sorted(scores, reverse=True)

    def test_non_increasing_in_duration_diff(self):
        scores = [calculate_overall_score(1, diff) for diff in range(0, 12_000, 37)]
        assert scores == sorted(scores, reverse=True)


class TestCheckAssetAvailable:
    """Tests for check_asset_available function."""

    @pytest.mark.asyncio
    async def test_local_file(self, tmp_path):
        """Local files are checked on disk."""
        video = tmp_path / "final.mp4"
        video.write_bytes(b"video_data")

        assert await check_asset_available(str(video)) is None
        assert await check_asset_available(video.as_uri()) is None
        assert "not found" in await check_asset_available(str(tmp_path / "missing.mp4"))

    @pytest.mark.asyncio
    async def test_http_ok(self):
        """2xx HEAD response means reachable."""
        client_cls = http_client(head=httpx.Response(200, request=httpx.Request("HEAD", VIDEO_URL)))
        with patch("modules.music_engineer.quality_validator.httpx.AsyncClient", client_cls):
            assert await check_asset_available(VIDEO_URL) is None

    @pytest.mark.asyncio
    async def test_http_not_found(self):
        """Non-2xx response is reported."""
        client_cls = http_client(head=httpx.Response(404, request=httpx.Request("HEAD", VIDEO_URL)))
        with patch("modules.music_engineer.quality_validator.httpx.AsyncClient", client_cls):
            assert await check_asset_available(VIDEO_URL) == "Failed to fetch generated video for validation"

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Transport errors are reported, not raised."""
        client_cls = http_client(head_side_effect=httpx.ConnectError("dns failure"))
        with patch("modules.music_engineer.quality_validator.httpx.AsyncClient", client_cls):
            message = await check_asset_available(VIDEO_URL)
        assert message.startswith("Video fetch error:")


class TestValidateQuality:
    """Tests for validate_quality function."""

    @pytest.mark.asyncio
    async def test_clean_report(self):
        """Reachable asset with matching duration scores 100."""
        with reachable():
            report = await validate_quality(VIDEO_URL, 180.0, AUDIO_URL, 42_000)

        assert report.overall_score == 100
        assert report.issues == []
        assert report.sync_accuracy_ms == 0
        assert report.frames_dropped is False
        assert report.duration_match.expected_seconds == 180.0
        assert report.duration_match.actual_seconds == 180.0
        assert report.performance.render_time_seconds == pytest.approx(42.0)
        assert report.performance.estimated_cost_usd == pytest.approx(0.42)
        assert report.performance.bottleneck_phase is None

    @pytest.mark.asyncio
    async def test_unfetchable_asset(self):
        """Fetch failure is an error issue, not an exception."""
        with patch(
            "modules.music_engineer.quality_validator.check_asset_available",
            new_callable=AsyncMock,
            return_value="Failed to fetch generated video for validation"
        ):
            report = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 1000)

        assert [(i.severity, i.message) for i in report.issues] == [
            ("error", "Failed to fetch generated video for validation")
        ]
        assert report.overall_score == 90

    @pytest.mark.asyncio
    async def test_unexpected_fetch_exception(self):
        """Even unexpected failures end up in the report."""
        with patch(
            "modules.music_engineer.quality_validator.check_asset_available",
            new_callable=AsyncMock,
            side_effect=RuntimeError("boom")
        ):
            report = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 1000)

        assert report.issues[0].severity == "error"
        assert "boom" in report.issues[0].message

    @pytest.mark.asyncio
    async def test_duration_mismatch_warning(self):
        """More than 500ms drift adds a warning."""
        with reachable():
            report = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 1000, actual_duration=30.8)

        assert report.duration_match.difference_ms == pytest.approx(800.0)
        assert [i.severity for i in report.issues] == ["warning"]
        assert report.issues[0].message == "Duration mismatch: 800ms difference"
        assert report.sync_accuracy_ms == 100
        assert report.overall_score == 82

    @pytest.mark.asyncio
    async def test_small_drift_no_warning(self):
        """Drift under the threshold only costs score points."""
        with reachable():
            report = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 1000, actual_duration=29.98)

        assert report.issues == []
        assert report.sync_accuracy_ms == pytest.approx(20.0)
        assert report.overall_score == 100

    @pytest.mark.asyncio
    async def test_bottleneck_when_render_slow(self):
        """Render time over the ceiling sets the bottleneck label."""
        with reachable():
            slow = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 301_000)
            fast = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 299_000)

        assert slow.performance.bottleneck_phase == "post_production"
        assert fast.performance.bottleneck_phase is None

    @pytest.mark.asyncio
    async def test_report_serializes(self):
        """Report converts to a plain dict."""
        with reachable():
            report = await validate_quality(VIDEO_URL, 30.0, AUDIO_URL, 1000, actual_duration=31.0)

        data = report.to_dict()
        assert data["overall_score"] == report.overall_score
        assert data["issues"] == [{"severity": "warning", "message": "Duration mismatch: 1000ms difference"}]
        assert "bottleneck_phase" not in data["performance"]


def test_estimate_rendering_cost():
    assert estimate_rendering_cost(100.0) == pytest.approx(1.0)
