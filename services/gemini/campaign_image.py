"""Campaign visual generation with the Gemini image model."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from google.genai import types

from models.campaign_models import GeneratedImage, ImageSize
from models.credential_models import CredentialConfig
from services.errors import NoImageReturned
from services.gemini.client_factory import build_client
from services.gemini.error_mapping import translate_errors
from services.gemini.response_parser import extract_inline_image
from utils.media_validation import encode_image_payload, normalize_image_mime
from utils.settings import GenerationSettings

LOGGER = logging.getLogger(__name__)


async def generate_campaign_image(
    credentials: CredentialConfig,
    prompt: str,
    size: ImageSize | str,
    *,
    settings: Optional[GenerationSettings] = None,
    client_factory: Callable[[CredentialConfig], object] = build_client,
) -> GeneratedImage:
    """Render a marketing visual for `prompt` at the requested resolution tier.

    Raises:
        NoImageReturned: The response carried no inline image part.
        CredentialRejected: The API refused the key.
        UpstreamError: Any other transport or service failure.
    """
    settings = settings or GenerationSettings()
    image_size = ImageSize(size)
    config = types.GenerateContentConfig(
        response_modalities=["IMAGE", "TEXT"],
        image_config=types.ImageConfig(
            image_size=image_size.value,
            aspect_ratio=settings.image_aspect_ratio,
        ),
    )

    async with translate_errors("Campaign image generation"):
        client = client_factory(credentials)
        try:
            response = await client.aio.models.generate_content(
                model=settings.image_model,
                contents=prompt,
                config=config,
            )
        finally:
            await client.aio.aclose()

    extracted = extract_inline_image(response)
    if extracted is None:
        raise NoImageReturned()
    data, mime_type = extracted
    LOGGER.info("Campaign image generated (%s, %s)", image_size.value, mime_type)
    return GeneratedImage(
        encoded_bytes=encode_image_payload(data),
        size=image_size,
        mime_type=normalize_image_mime(mime_type),
    )
