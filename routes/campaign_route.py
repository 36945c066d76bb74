"""FastAPI routes for campaign generation."""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from pydantic import BaseModel

from controllers.campaign_controller import (
	download_image,
	get_campaign,
	get_thumbnail,
	regenerate_image,
	start_campaign,
)
from models.campaign_models import ImageSize, Tone

router = APIRouter(prefix="/api/campaign", tags=["campaign"])


class CampaignPayload(BaseModel):
	topic: str = ""
	audience: str = ""
	tone: Tone = Tone.PROFESSIONAL
	image_size: ImageSize = ImageSize.ONE_K


class RegeneratePayload(BaseModel):
	image_size: Optional[ImageSize] = None


@router.get("")
async def get_campaign_route(request: Request):
	return await get_campaign(request)


@router.post("", status_code=202)
async def start_campaign_route(request: Request, payload: CampaignPayload, background_tasks: BackgroundTasks):
	"""Start generating a campaign; stages complete in the background."""
	try:
		return await start_campaign(
			request,
			background_tasks,
			payload.topic,
			payload.audience,
			payload.tone,
			payload.image_size,
		)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/image")
async def regenerate_image_route(request: Request, payload: RegeneratePayload):
	try:
		return await regenerate_image(request, payload.image_size)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/image")
async def download_image_route(request: Request):
	"""Return the current campaign image for download."""
	try:
		return await download_image(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/image/thumbnail")
async def thumbnail_route(request: Request):
	try:
		return await get_thumbnail(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
