"""Normalize google-genai failures into the generation error taxonomy."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from google.genai import errors as genai_errors

from services.errors import CredentialRejected, GenerationError, UpstreamError

LOGGER = logging.getLogger(__name__)

AUTH_CODES = {401, 403}
AUTH_STATUSES = {"PERMISSION_DENIED", "UNAUTHENTICATED"}
AUTH_MARKERS = ("API key not valid", "API_KEY_INVALID", "Requested entity was not found")


def is_authorization_failure(exc: genai_errors.APIError) -> bool:
    """Return True when an API error means the key itself was refused."""
    if getattr(exc, "code", None) in AUTH_CODES:
        return True
    status = (getattr(exc, "status", None) or "").upper()
    if status in AUTH_STATUSES:
        return True
    message = getattr(exc, "message", None) or str(exc)
    return any(marker in message for marker in AUTH_MARKERS)


def normalize_error(exc: Exception, action: str) -> GenerationError:
    """Map any exception raised during a Gemini call to a taxonomy member."""
    if isinstance(exc, GenerationError):
        return exc
    if isinstance(exc, genai_errors.APIError):
        message = getattr(exc, "message", None) or str(exc)
        if is_authorization_failure(exc):
            return CredentialRejected()
        return UpstreamError(f"{action} failed: {message}", status_code=getattr(exc, "code", None))
    return UpstreamError(f"{action} failed: {exc}")


@asynccontextmanager
async def translate_errors(action: str) -> AsyncIterator[None]:
    """Re-raise anything escaping the block as a `GenerationError`."""
    try:
        yield
    except GenerationError:
        raise
    except Exception as exc:
        normalized = normalize_error(exc, action)
        LOGGER.warning("%s failed (%s): %s", action, type(normalized).__name__, exc)
        raise normalized from exc
