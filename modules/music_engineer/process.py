"""
Main entry point for music engineer module.

Orchestrates video assembly: validates the storyboard, syncs clips to beats,
derives transitions, prepares media, drives the external renderer and
validates the rendered result.
"""
import asyncio
import random
import time
from typing import List, Optional
from uuid import UUID, uuid4

from shared.errors import (
    AssemblyCancelledError,
    AssemblyError,
    RenderError,
    StoryboardValidationError,
)
from shared.logging import get_logger, reset_job_id, set_job_id
from shared.models.audio import Beat
from shared.models.assembly import ExportOptions, RenderRequest, RenderResult
from shared.models.result import AssemblyResult
from shared.models.storyboard import Storyboard

from .beat_sync import sync_all_clips
from .config import (
    PROGRESS_VALIDATE,
    PROGRESS_SYNC,
    PROGRESS_TRANSITIONS,
    PROGRESS_MEDIA,
    PROGRESS_RENDER_START,
    PROGRESS_RENDER_END,
    PROGRESS_QUALITY,
    PROGRESS_DONE,
)
from .media_preparer import prepare_media
from .progress import ProgressCallback, ProgressChannel
from .quality_validator import validate_quality
from .renderer import HttpRenderer, Renderer, build_render_request
from .transition_selector import apply_intelligent_transitions

logger = get_logger("music_engineer.process")


def validate_storyboard(storyboard: Storyboard, audio_url: str) -> None:
    """
    Validate storyboard completeness before any work starts.

    Every shot needs a unique id and a still image or a clip. Image quality
    is not checked.

    Raises:
        StoryboardValidationError: If the storyboard cannot be assembled
    """
    if not audio_url:
        raise StoryboardValidationError("Audio URL required for assembly")

    if not storyboard.all_shots():
        raise StoryboardValidationError("Storyboard has no shots")

    issues: List[str] = []
    seen_ids = set()
    for scene in storyboard.scenes:
        for shot in scene.shots:
            if shot.id in seen_ids:
                issues.append(f"Shot {shot.id} is not unique")
            seen_ids.add(shot.id)
            if not shot.still_image_ref and not shot.clip_ref:
                issues.append(f"Shot {shot.id} missing both preview image and clip")

    if issues:
        raise StoryboardValidationError(
            "Storyboard validation failed:\n" + "\n".join(issues),
            issues=issues
        )


def _check_cancelled(cancel_event: Optional[asyncio.Event], stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise AssemblyCancelledError(f"Assembly cancelled before {stage}")


async def _run_render(
    renderer: Renderer,
    request: RenderRequest,
    progress: ProgressChannel,
    cancel_event: Optional[asyncio.Event]
) -> RenderResult:
    """Run the renderer, forwarding cancellation to it."""

    async def on_render_progress(sub_progress: float) -> None:
        sub_progress = min(max(sub_progress, 0.0), 1.0)
        span = PROGRESS_RENDER_END - PROGRESS_RENDER_START
        await progress.report(PROGRESS_RENDER_START + sub_progress * span, "Rendering video...")

    render_task = asyncio.ensure_future(renderer.render(request, on_render_progress))
    cancel_waiter = asyncio.ensure_future(cancel_event.wait()) if cancel_event is not None else None

    try:
        waiting = {render_task} if cancel_waiter is None else {render_task, cancel_waiter}
        await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        render_task.cancel()
        await renderer.cancel()
        raise
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()

    if not render_task.done():
        render_task.cancel()
        await renderer.cancel()
        await asyncio.gather(render_task, return_exceptions=True)
        raise AssemblyCancelledError("Assembly cancelled during render")

    try:
        return render_task.result()
    except AssemblyError:
        raise
    except Exception as e:
        raise RenderError(f"Video assembly failed: {e}") from e


async def process(
    storyboard: Storyboard,
    beats: List[Beat],
    export_options: ExportOptions,
    audio_url: str,
    on_progress: Optional[ProgressCallback] = None,
    renderer: Optional[Renderer] = None,
    rng: Optional[random.Random] = None,
    cancel_event: Optional[asyncio.Event] = None,
    job_id: Optional[UUID] = None,
    progress_channel: Optional[ProgressChannel] = None
) -> AssemblyResult:
    """
    Main assembly function.

    Args:
        storyboard: Scenes with ordered shots
        beats: Beats ordered by time, covering the whole track
        export_options: Export settings (resolution, aspect ratio, ...)
        audio_url: Audio track reference, passed to the renderer unmodified
        on_progress: Optional callback(fraction, stage); may be sync or async
            (mutually exclusive with progress_channel)
        renderer: External renderer (default: HttpRenderer)
        rng: Randomness source for transition variety (default: unseeded)
        cancel_event: Optional event; when set, the run stops at the next stage
            boundary or cancels the running render
        job_id: Job identifier for logging (generated if omitted)
        progress_channel: Channel to publish progress on (created if omitted)

    Returns:
        AssemblyResult with the rendered video URL and quality report

    Raises:
        ValueError: Both on_progress and progress_channel were given
        StoryboardValidationError: Shot list is invalid (nothing is rendered)
        RenderError: The renderer reported a failure
        AssemblyCancelledError: cancel_event was set
    """
    if progress_channel is not None and on_progress is not None:
        raise ValueError("Pass either on_progress or progress_channel, not both")

    job_id = job_id or uuid4()
    rng = rng or random.Random()
    renderer = renderer or HttpRenderer(job_id=job_id)
    progress = progress_channel or ProgressChannel(on_progress, job_id=job_id)
    start_time = time.time()

    timings = {
        "validate": 0.0,
        "sync_clips": 0.0,
        "transitions": 0.0,
        "prepare_media": 0.0,
        "render": 0.0,
        "quality": 0.0,
        "total": 0.0
    }

    job_id_token = set_job_id(job_id)
    try:
        # Step 1: Validate (before any progress is published)
        step_start = time.time()
        validate_storyboard(storyboard, audio_url)
        timings["validate"] = time.time() - step_start
        await progress.report(PROGRESS_VALIDATE, "Validating storyboard...")

        # Step 2: Sync every shot to beats
        _check_cancelled(cancel_event, "sync")
        await progress.report(PROGRESS_SYNC, "Synchronizing clips to beats...")
        step_start = time.time()
        synced_clips = await sync_all_clips(storyboard, beats, job_id=job_id)
        timings["sync_clips"] = time.time() - step_start

        # Step 3: Derive transitions scene by scene
        _check_cancelled(cancel_event, "transitions")
        await progress.report(PROGRESS_TRANSITIONS, "Selecting optimal transitions...")
        step_start = time.time()
        enhanced_storyboard = apply_intelligent_transitions(
            storyboard, beats, synced_clips, rng=rng, job_id=job_id
        )
        timings["transitions"] = time.time() - step_start

        # Step 4: Prepare media (warnings only)
        _check_cancelled(cancel_event, "media preparation")
        await progress.report(PROGRESS_MEDIA, "Preparing media files...")
        step_start = time.time()
        media_warnings = prepare_media(enhanced_storyboard, job_id=job_id)
        timings["prepare_media"] = time.time() - step_start

        # Step 5: Render
        _check_cancelled(cancel_event, "render")
        await progress.report(PROGRESS_RENDER_START, "Assembling video...")
        request = build_render_request(
            enhanced_storyboard, audio_url, export_options, synced_clips=synced_clips
        )
        logger.info(
            f"Rendering {len(request.scenes)} shots at {request.width}x{request.height}, {request.fps}fps",
            extra={
                "job_id": str(job_id),
                "shot_count": len(request.scenes),
                "width": request.width,
                "height": request.height,
                "timeline_duration": request.total_duration
            }
        )
        step_start = time.time()
        render_result = await _run_render(renderer, request, progress, cancel_event)
        timings["render"] = time.time() - step_start

        if not render_result.success or not render_result.video_url:
            raise RenderError(render_result.error or "Video assembly failed", job_id=job_id)
        await progress.report(PROGRESS_RENDER_END, "Video rendered")

        # Step 6: Validate quality
        _check_cancelled(cancel_event, "quality validation")
        await progress.report(PROGRESS_QUALITY, "Validating quality...")
        step_start = time.time()
        expected_duration = beats[-1].time if beats else 0.0
        quality_report = await validate_quality(
            render_result.video_url,
            expected_duration,
            audio_url,
            timings["render"] * 1000,
            actual_duration=render_result.duration_seconds,
            job_id=job_id
        )
        timings["quality"] = time.time() - step_start
        timings["total"] = time.time() - start_time

        await progress.report(PROGRESS_DONE, "Assembly complete!")

        logger.info(
            f"Assembly complete in {timings['total']:.2f}s (score {quality_report.overall_score})",
            extra={
                "job_id": str(job_id),
                "video_url": render_result.video_url,
                "overall_score": quality_report.overall_score,
                "total_time": timings["total"]
            }
        )

        return AssemblyResult(
            job_id=job_id,
            video_url=render_result.video_url,
            quality_report=quality_report,
            synced_clips=synced_clips,
            scenes=enhanced_storyboard.scenes,
            media_warnings=media_warnings,
            timings=timings
        )

    except AssemblyError as e:
        if e.job_id is None:
            e.job_id = job_id
        logger.error(
            f"Assembly failed: {e}",
            extra={"job_id": str(job_id), "error_type": type(e).__name__}
        )
        raise
    finally:
        await progress.close()
        reset_job_id(job_id_token)
