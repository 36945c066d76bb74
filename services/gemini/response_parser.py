"""Helpers to extract structured data from generate_content responses."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models.campaign_models import CampaignResult
from services.errors import MalformedResponse

LOGGER = logging.getLogger(__name__)
EXPECTED_SUBJECT_LINES = 3


class CampaignPayload(BaseModel):
	"""Wire shape of the schema-constrained campaign response."""

	model_config = ConfigDict(populate_by_name=True)

	subject_lines: List[str] = Field(alias="subjectLines")
	body_copy: str = Field(alias="bodyCopy")
	image_prompt: str = Field(alias="imagePrompt")


def response_text(response: Any) -> str:
	"""Return the concatenated text of a response, or an empty string."""
	text = getattr(response, "text", None)
	if text:
		return text
	parts = []
	for part in _first_candidate_parts(response):
		part_text = getattr(part, "text", None)
		if part_text:
			parts.append(part_text)
	return "".join(parts)


def parse_campaign(raw: Optional[str]) -> CampaignResult:
	"""Validate the JSON payload and return a `CampaignResult`.

	Raises:
		MalformedResponse: If the payload is empty or any of the three fields is missing.
	"""
	if not raw or not raw.strip():
		raise MalformedResponse("No response from Gemini")
	try:
		payload = CampaignPayload.model_validate_json(raw)
	except ValidationError as exc:
		raise MalformedResponse() from exc

	if len(payload.subject_lines) != EXPECTED_SUBJECT_LINES:
		LOGGER.warning(
			"Expected %d subject lines, got %d", EXPECTED_SUBJECT_LINES, len(payload.subject_lines)
		)
	return CampaignResult(
		subject_lines=list(payload.subject_lines),
		body_copy=payload.body_copy,
		image_prompt=payload.image_prompt.strip(),
	)


def extract_inline_image(response: Any) -> Optional[Tuple[Any, str]]:
	"""Return `(data, mime_type)` for the first inline image part, if any."""
	for part in _first_candidate_parts(response):
		inline = getattr(part, "inline_data", None)
		if inline is None or not getattr(inline, "data", None):
			continue
		mime_type = getattr(inline, "mime_type", None) or "image/png"
		if not mime_type.startswith("image/"):
			continue
		return inline.data, mime_type
	return None


def chunk_text(chunk: Any) -> str:
	return getattr(chunk, "text", None) or ""


def _first_candidate_parts(response: Any) -> List[Any]:
	candidates = getattr(response, "candidates", None) or []
	if not candidates:
		return []
	content = getattr(candidates[0], "content", None)
	return list(getattr(content, "parts", None) or [])
