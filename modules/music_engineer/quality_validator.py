"""
Quality validation for music engineer module.

Scores a rendered assembly against its expected duration and checks the
asset is reachable. Never raises: every problem becomes a report issue.
"""
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse
from uuid import UUID

import httpx

from shared.config import settings
from shared.logging import get_logger
from shared.models.assembly import DurationMatch, PerformanceMetrics, QualityIssue, QualityReport
from .config import (
    SYNC_TOLERANCE_MS,
    DURATION_WARNING_MS,
    ISSUE_PENALTY,
    COST_PER_SECOND,
    RENDER_TIME_CEILING_SECONDS,
    BOTTLENECK_PHASE,
)

logger = get_logger("music_engineer.quality_validator")


def calculate_overall_score(issue_count: int, duration_diff_ms: float) -> int:
    """Score 0-100: 10 points per issue, 1 point per 100ms of duration drift."""
    score = 100 - (issue_count * ISSUE_PENALTY) - (duration_diff_ms / 100)
    return int(round(min(100.0, max(0.0, score))))


def estimate_rendering_cost(render_seconds: float) -> float:
    """Estimated render cost in USD."""
    return render_seconds * COST_PER_SECOND


async def check_asset_available(asset_ref: str, timeout: Optional[float] = None) -> Optional[str]:
    """
    Check a rendered asset can be fetched.

    Returns:
        None if the asset is reachable, otherwise an error message
    """
    parsed = urlparse(asset_ref)

    if parsed.scheme not in ("http", "https"):
        path = Path(parsed.path) if parsed.scheme == "file" else Path(asset_ref)
        if path.is_file():
            return None
        return f"Rendered video not found: {asset_ref}"

    try:
        async with httpx.AsyncClient(timeout=timeout or settings.asset_fetch_timeout_seconds, follow_redirects=True) as client:
            response = await client.head(asset_ref)
            if response.status_code == 405:
                # Some storage backends do not allow HEAD
                async with client.stream("GET", asset_ref) as streamed:
                    response = streamed
            if response.is_success:
                return None
            return "Failed to fetch generated video for validation"
    except httpx.HTTPError as e:
        return f"Video fetch error: {e}"


async def validate_quality(
    video_url: str,
    expected_duration: float,
    audio_url: str,
    render_time_ms: float,
    actual_duration: Optional[float] = None,
    job_id: Optional[UUID] = None
) -> QualityReport:
    """
    Validate final video quality.

    Args:
        video_url: Rendered asset reference
        expected_duration: Expected duration in seconds (last beat time)
        audio_url: Audio track reference used for the render
        render_time_ms: Wall-clock render time in milliseconds
        actual_duration: Rendered duration if the renderer reported one,
            otherwise the expected duration is assumed
        job_id: Job ID for logging

    Returns:
        QualityReport (always; problems are recorded as issues)
    """
    issues: List[QualityIssue] = []

    try:
        fetch_error = await check_asset_available(video_url)
    except Exception as e:
        fetch_error = f"Video fetch error: {e}"
    if fetch_error:
        issues.append(QualityIssue(severity="error", message=fetch_error))

    if actual_duration is None:
        actual_duration = expected_duration

    duration_diff_ms = abs(actual_duration - expected_duration) * 1000
    sync_accuracy_ms = min(duration_diff_ms, SYNC_TOLERANCE_MS)

    if duration_diff_ms > DURATION_WARNING_MS:
        issues.append(QualityIssue(
            severity="warning",
            message=f"Duration mismatch: {duration_diff_ms:.0f}ms difference"
        ))

    render_seconds = render_time_ms / 1000
    report = QualityReport(
        overall_score=calculate_overall_score(len(issues), duration_diff_ms),
        sync_accuracy_ms=sync_accuracy_ms,
        frames_dropped=False,
        duration_match=DurationMatch(
            expected_seconds=expected_duration,
            actual_seconds=actual_duration,
            difference_ms=duration_diff_ms
        ),
        issues=issues,
        performance=PerformanceMetrics(
            render_time_seconds=render_seconds,
            estimated_cost_usd=estimate_rendering_cost(render_seconds),
            bottleneck_phase=BOTTLENECK_PHASE if render_seconds > RENDER_TIME_CEILING_SECONDS else None
        )
    )

    for issue in issues:
        logger.warning(
            f"Quality issue ({issue.severity}): {issue.message}",
            extra={"job_id": str(job_id) if job_id else None, "video_url": video_url, "audio_url": audio_url}
        )
    logger.info(
        f"Quality score {report.overall_score}/100",
        extra={
            "job_id": str(job_id) if job_id else None,
            "overall_score": report.overall_score,
            "duration_diff_ms": duration_diff_ms,
            "issue_count": len(issues)
        }
    )

    return report
