"""Build a google-genai client for a single call."""

from __future__ import annotations

from google import genai

from models.credential_models import CredentialConfig
from services.errors import CredentialUnavailable


def build_client(credentials: CredentialConfig) -> genai.Client:
    """Return a fresh client bound to the supplied credentials.

    A new client is created per call so a key rotated mid-session is used by
    the very next request. With no explicit key, google-genai reads
    GEMINI_API_KEY / GOOGLE_API_KEY from the environment.

    Raises:
        CredentialUnavailable: If neither an explicit nor an environment key exists.
    """
    try:
        if credentials.api_key:
            return genai.Client(api_key=credentials.api_key)
        return genai.Client()
    except ValueError as exc:
        raise CredentialUnavailable("No Gemini API key is configured.") from exc
