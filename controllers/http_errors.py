"""Translate generation errors into HTTP responses."""

from fastapi import HTTPException

from services.errors import (
    CredentialRejected,
    CredentialUnavailable,
    GenerationError,
    MalformedResponse,
    NoImageReturned,
    SessionInvalidated,
    UpstreamError,
    UserInputInvalid,
)

STATUS_BY_ERROR = (
    (UserInputInvalid, 400),
    (CredentialUnavailable, 401),
    (CredentialRejected, 401),
    (SessionInvalidated, 409),
    (MalformedResponse, 502),
    (NoImageReturned, 502),
    (UpstreamError, 502),
)


def to_http_exception(exc: GenerationError) -> HTTPException:
    """Return the HTTPException matching a taxonomy member (500 if unmapped)."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)
