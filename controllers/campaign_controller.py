"""Campaign controllers: start generation, regenerate and serve the image."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, HTTPException, Request
from fastapi.responses import Response

from controllers.http_errors import to_http_exception
from models.campaign_models import CampaignRequest, CampaignSnapshot, ImageSize, Tone
from services.errors import CredentialUnavailable, UserInputInvalid
from services.image_preview import ImagePreviewer
from services.orchestration.campaign_orchestrator import CampaignOrchestrator
from utils.media_validation import decode_image_payload

IMAGE_URL = "/api/campaign/image"
THUMBNAIL_URL = "/api/campaign/image/thumbnail"


def _orchestrator(request: Request) -> CampaignOrchestrator:
    return request.app.state.campaign_orchestrator


def _previewer(request: Request) -> ImagePreviewer:
    return request.app.state.image_previewer


def serialize_snapshot(snapshot: CampaignSnapshot) -> Dict[str, Any]:
    """Convert a campaign snapshot into the JSON shape consumed by the campaign view."""
    request = snapshot.request
    result = snapshot.result
    image = snapshot.image

    image_payload = None
    if image is not None:
        image_payload = {
            "size": image.size.value,
            "mime_type": image.mime_type,
            "url": IMAGE_URL,
            "thumbnail_url": THUMBNAIL_URL,
            "width": image.width,
            "height": image.height,
        }

    return {
        "request": None if request is None else {
            "topic": request.topic,
            "audience": request.audience,
            "tone": request.tone.value,
            "image_size": request.image_size.value,
        },
        "result": None if result is None else {
            "subject_lines": list(result.subject_lines),
            "body_copy": result.body_copy,
            "image_prompt": result.image_prompt,
        },
        "image": image_payload,
        "image_size": snapshot.image_size.value,
        "is_generating_text": snapshot.is_generating_text,
        "is_generating_image": snapshot.is_generating_image,
        "error": snapshot.error,
    }


async def get_campaign(request: Request) -> Dict[str, Any]:
    return serialize_snapshot(_orchestrator(request).snapshot())


async def start_campaign(
    request: Request,
    background_tasks: BackgroundTasks,
    topic: str,
    audience: str,
    tone: Tone,
    image_size: ImageSize,
) -> Dict[str, Any]:
    """Validate input, make it the active campaign and schedule both stages.

    The text and image stages run after the response is sent; the campaign
    view polls `get_campaign` to follow each stage's busy flag.

    Raises:
        HTTPException(400) for a blank topic and HTTPException(401) when no
        key is selected. Neither case issues a generation call.
    """
    campaign_request = CampaignRequest(topic=topic, audience=audience, tone=tone, image_size=image_size)
    if campaign_request.is_blank:
        raise to_http_exception(UserInputInvalid())

    orchestrator = _orchestrator(request)
    if not orchestrator.gate.is_ready:
        state = orchestrator.gate.state
        raise to_http_exception(CredentialUnavailable(state.last_error))

    ticket = orchestrator.begin(campaign_request)
    background_tasks.add_task(orchestrator.run, ticket)
    return serialize_snapshot(orchestrator.snapshot())


async def regenerate_image(request: Request, image_size: Optional[ImageSize]) -> Dict[str, Any]:
    """Render a fresh image from the current prompt and return the new snapshot."""
    orchestrator = _orchestrator(request)
    current = orchestrator.snapshot()
    if current.result is None or not current.result.image_prompt:
        raise HTTPException(status_code=409, detail="Generate a campaign before regenerating its image.")
    snapshot = await orchestrator.regenerate_image(image_size)
    return serialize_snapshot(snapshot)


async def download_image(request: Request) -> Response:
    """Return the current campaign image bytes as an attachment.

    Raises:
        HTTPException(404) if no image has been generated yet.
    """
    image = _orchestrator(request).snapshot().image
    if image is None:
        raise HTTPException(status_code=404, detail="No campaign image available")
    try:
        content = decode_image_payload(image.encoded_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    extension = image.mime_type.split("/", 1)[-1]
    return Response(
        content=content,
        media_type=image.mime_type,
        headers={"Content-Disposition": f'attachment; filename="campaign-image.{extension}"'},
    )


async def get_thumbnail(request: Request) -> Response:
    """Return a PNG preview of the current campaign image."""
    image = _orchestrator(request).snapshot().image
    if image is None:
        raise HTTPException(status_code=404, detail="No campaign image available")
    try:
        content = _previewer(request).thumbnail_png(image.encoded_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return Response(content=content, media_type="image/png")
