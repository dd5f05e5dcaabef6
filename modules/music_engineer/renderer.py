"""
Render request building and external renderer clients.

The renderer itself is an external service; this module only builds the
request and talks to it.
"""
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, Optional
from uuid import UUID

import httpx

from shared.config import settings
from shared.logging import get_logger
from shared.models.assembly import ExportOptions, RenderRequest, RenderResult, RenderScene, SyncedClip
from shared.models.storyboard import Storyboard
from .config import OUTPUT_FPS, OUTPUT_FORMAT, get_output_dimensions

logger = get_logger("music_engineer.renderer")

RenderProgressCallback = Callable[[float], Awaitable[None]]


def build_render_request(
    storyboard: Storyboard,
    audio_url: str,
    export_options: ExportOptions,
    synced_clips: Optional[Dict[str, SyncedClip]] = None
) -> RenderRequest:
    """
    Build the render request from a storyboard.

    Shots from all scenes are flattened and ordered by original start time.
    Each shot plays for its beat-synced range; shots without a synced clip
    keep their original range.

    Args:
        storyboard: Storyboard (with or without transitions)
        audio_url: Audio track reference, passed through unmodified
        export_options: Export settings
        synced_clips: Dict of shot_id -> SyncedClip from beat synchronization

    Returns:
        RenderRequest ready for the renderer

    Raises:
        ValueError: If the export resolution is not supported
    """
    all_shots = sorted(storyboard.all_shots(), key=lambda shot: shot.start)
    synced_clips = synced_clips or {}

    def shot_duration(shot) -> float:
        clip = synced_clips.get(shot.id)
        return clip.synced_duration if clip else shot.duration

    scenes = [
        RenderScene(
            image_url=shot.still_image_ref,
            video_url=shot.clip_ref,
            duration=shot_duration(shot),
            description=shot.lyric_text or shot.subject or f"Scene {i + 1}"
        )
        for i, shot in enumerate(all_shots)
    ]

    width, height = get_output_dimensions(export_options.resolution)

    return RenderRequest(
        scenes=scenes,
        audio_url=audio_url,
        width=width,
        height=height,
        fps=export_options.fps or OUTPUT_FPS,
        output_format=export_options.output_format or OUTPUT_FORMAT
    )


class Renderer(ABC):
    """External renderer interface."""

    @abstractmethod
    async def render(
        self,
        request: RenderRequest,
        on_progress: Optional[RenderProgressCallback] = None
    ) -> RenderResult:
        """Render the request; await on_progress with sub-progress in [0, 1]."""

    async def cancel(self) -> None:
        """Forward a cancellation to the renderer. No-op by default."""


class HttpRenderer(Renderer):
    """Renderer backed by the HTTP render service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        job_id: Optional[UUID] = None
    ):
        self.base_url = (base_url or settings.renderer_url).rstrip("/")
        self.timeout = timeout or settings.renderer_timeout_seconds
        self.job_id = job_id

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/video/generate"

    async def render(
        self,
        request: RenderRequest,
        on_progress: Optional[RenderProgressCallback] = None
    ) -> RenderResult:
        """
        POST the request to the render service.

        Transport and HTTP errors are returned as failed results; the caller
        decides whether they are fatal.
        """
        logger.info(
            f"Submitting render request with {len(request.scenes)} scenes",
            extra={
                "job_id": str(self.job_id) if self.job_id else None,
                "url": self.generate_url,
                "width": request.width,
                "height": request.height
            }
        )

        timeout = httpx.Timeout(self.timeout, connect=30.0)
        try:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
                response = await client.post(self.generate_url, json=request.to_payload())
                response.raise_for_status()
                result = RenderResult.model_validate(response.json())
        except httpx.TimeoutException as e:
            logger.error(f"Render request timed out: {e}", extra={"url": self.generate_url})
            return RenderResult(success=False, error=f"Render timeout after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.error(
                f"Render service returned {e.response.status_code}: {message}",
                extra={"url": self.generate_url, "status_code": e.response.status_code}
            )
            return RenderResult(success=False, error=message)
        except httpx.HTTPError as e:
            logger.error(f"Render service unreachable: {e}", extra={"url": self.generate_url})
            return RenderResult(success=False, error=f"Render service unreachable: {e}")
        except ValueError as e:
            return RenderResult(success=False, error=f"Invalid render response: {e}")

        if on_progress is not None:
            await on_progress(1.0)

        return result


def _error_message(response: httpx.Response) -> str:
    """Extract the error text from a failed render response."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "Failed to generate video"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase or "Failed to generate video"
