"""FastAPI routes for the credential gate."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.credential_controller import check_credentials, get_credential_state, select_credentials

router = APIRouter(prefix="/api/credentials", tags=["credentials"])


class SelectPayload(BaseModel):
	api_key: Optional[str] = None


@router.get("")
async def get_credentials_route(request: Request):
	return await get_credential_state(request)


@router.post("/check")
async def check_credentials_route(request: Request):
	try:
		return await check_credentials(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/select")
async def select_credentials_route(request: Request, payload: SelectPayload):
	try:
		return await select_credentials(request, payload.api_key)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
