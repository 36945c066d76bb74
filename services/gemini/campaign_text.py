"""Structured campaign copy generation."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from google.genai import types

from models.campaign_models import CampaignResult, Tone
from models.credential_models import CredentialConfig
from services.gemini.campaign_schema import CAMPAIGN_SCHEMA
from services.gemini.client_factory import build_client
from services.gemini.error_mapping import translate_errors
from services.gemini.prompts import campaign_user_prompt, copywriter_system_prompt
from services.gemini.response_parser import parse_campaign, response_text
from utils.settings import GenerationSettings

LOGGER = logging.getLogger(__name__)


async def generate_campaign_text(
    credentials: CredentialConfig,
    topic: str,
    audience: str,
    tone: Tone | str,
    *,
    settings: Optional[GenerationSettings] = None,
    client_factory: Callable[[CredentialConfig], object] = build_client,
) -> CampaignResult:
    """Generate subject lines, body copy and an image prompt for a campaign.

    Args:
        credentials: Credentials for this call only.
        topic: Campaign topic, embedded verbatim in the instruction.
        audience: Target audience, embedded verbatim.
        tone: Requested voice.
        settings: Model configuration; defaults apply when omitted.
        client_factory: Builds the google-genai client from `credentials`.

    Returns:
        The parsed `CampaignResult`.

    Raises:
        MalformedResponse: The structured payload was missing or incomplete.
        CredentialRejected: The API refused the key.
        UpstreamError: Any other transport or service failure.
    """
    settings = settings or GenerationSettings()
    tone_value = tone.value if isinstance(tone, Tone) else str(tone)
    prompt = campaign_user_prompt(topic, audience, tone_value)
    config = types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=CAMPAIGN_SCHEMA,
        system_instruction=copywriter_system_prompt(),
        thinking_config=types.ThinkingConfig(thinking_budget=settings.thinking_budget),
    )

    async with translate_errors("Campaign text generation"):
        client = client_factory(credentials)
        try:
            response = await client.aio.models.generate_content(
                model=settings.text_model,
                contents=prompt,
                config=config,
            )
        finally:
            await client.aio.aclose()

    result = parse_campaign(response_text(response))
    LOGGER.info("Campaign copy generated with %d subject lines", len(result.subject_lines))
    return result
