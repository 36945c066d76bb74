"""Credential gate controllers."""

from typing import Any, Dict, Optional

from fastapi import Request

from controllers.http_errors import to_http_exception
from services.credentials.credential_gate import CredentialGate
from services.errors import GenerationError


def _gate(request: Request) -> CredentialGate:
    return request.app.state.credential_gate


async def get_credential_state(request: Request) -> Dict[str, Any]:
    """Return the current gate state without probing the host."""
    return _gate(request).state.to_dict()


async def check_credentials(request: Request) -> Dict[str, Any]:
    """Probe the host capability and return the resolved state."""
    state = await _gate(request).check_availability()
    return state.to_dict()


async def select_credentials(request: Request, api_key: Optional[str]) -> Dict[str, Any]:
    """Stage an optional submitted key on the host, then run key selection.

    Args:
        request: FastAPI Request (used to access the shared gate).
        api_key: Key typed into the browser, if the host accepts submitted keys.

    Returns:
        The gate state after a successful selection.

    Raises:
        HTTPException(409) when the selection session was invalidated and
        HTTPException(401) for any other selection failure.
    """
    gate = _gate(request)
    stage_key = getattr(gate.host, "stage_key", None)
    if api_key and stage_key is not None:
        stage_key(api_key)
    try:
        state = await gate.request_selection()
    except GenerationError as exc:
        raise to_http_exception(exc) from exc
    return state.to_dict()
