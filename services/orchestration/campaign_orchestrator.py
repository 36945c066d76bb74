"""Sequence campaign copy and image generation for the campaign view."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Awaitable, Callable, Optional

from models.campaign_models import (
	CampaignRequest,
	CampaignResult,
	CampaignSnapshot,
	GeneratedImage,
	ImageSize,
)
from services.credentials.credential_gate import CredentialGate
from services.errors import CredentialRejected, GenerationError
from services.gemini.campaign_image import generate_campaign_image
from services.gemini.campaign_text import generate_campaign_text
from services.image_preview import ImagePreviewer

LOGGER = logging.getLogger(__name__)

CAMPAIGN_FAILED = "Failed to generate campaign."
REGENERATE_PREFIX = "Failed to regenerate image: "

TextGenerator = Callable[..., Awaitable[CampaignResult]]
ImageGenerator = Callable[..., Awaitable[GeneratedImage]]


class CampaignOrchestrator:
	"""Own the single active campaign and its two dependent generation stages.

	Every submit takes a new ticket; results that come back for an older
	ticket are dropped so a slow response can never overwrite a newer one.
	Image requests carry their own ticket for the same reason.
	"""

	def __init__(
		self,
		gate: CredentialGate,
		text_generator: TextGenerator = generate_campaign_text,
		image_generator: ImageGenerator = generate_campaign_image,
		previewer: Optional[ImagePreviewer] = None,
	) -> None:
		self.gate = gate
		self._previewer = previewer or ImagePreviewer()
		self._text_generator = text_generator
		self._image_generator = image_generator
		self._request: Optional[CampaignRequest] = None
		self._result: Optional[CampaignResult] = None
		self._image: Optional[GeneratedImage] = None
		self._image_size = ImageSize.ONE_K
		self._generating_text = False
		self._generating_image = False
		self._error: Optional[str] = None
		self._ticket = 0
		self._image_ticket = 0

	def snapshot(self) -> CampaignSnapshot:
		return CampaignSnapshot(
			request=self._request,
			result=self._result,
			image=self._image,
			image_size=self._image_size,
			is_generating_text=self._generating_text,
			is_generating_image=self._generating_image,
			error=self._error,
		)

	def begin(self, request: CampaignRequest) -> Optional[int]:
		"""Make `request` the active campaign and return its ticket.

		A blank topic is a no-op and returns None.
		"""
		if request.is_blank:
			LOGGER.info("Ignoring campaign submit with an empty topic")
			return None
		self._ticket += 1
		self._image_ticket += 1
		self._request = request
		self._image_size = request.image_size
		self._result = None
		self._image = None
		self._error = None
		self._generating_text = True
		self._generating_image = False
		return self._ticket

	async def run(self, ticket: int) -> CampaignSnapshot:
		"""Run text generation, then image generation when a prompt came back."""
		if ticket != self._ticket or self._request is None:
			LOGGER.info("Campaign ticket %s superseded before it started", ticket)
			return self.snapshot()

		result = await self._run_text_stage(ticket, self._request)
		if result is not None and result.image_prompt:
			image_ticket = self._begin_image()
			await self._run_image_stage(image_ticket, result.image_prompt, self._image_size)
		return self.snapshot()

	async def submit(self, request: CampaignRequest) -> CampaignSnapshot:
		ticket = self.begin(request)
		if ticket is None:
			return self.snapshot()
		return await self.run(ticket)

	async def regenerate_image(self, size: Optional[ImageSize | str] = None) -> CampaignSnapshot:
		"""Render a new image from the current prompt without touching the copy."""
		if size is not None:
			self._image_size = ImageSize(size)
		if self._result is None or not self._result.image_prompt:
			return self.snapshot()
		self._error = None
		image_ticket = self._begin_image()
		await self._run_image_stage(
			image_ticket, self._result.image_prompt, self._image_size, error_prefix=REGENERATE_PREFIX
		)
		return self.snapshot()

	async def _run_text_stage(self, ticket: int, request: CampaignRequest) -> Optional[CampaignResult]:
		try:
			self.gate.ensure_ready()
			result = await self._text_generator(
				self.gate.current_config(), request.topic, request.audience, request.tone
			)
		except Exception as exc:
			self._record_failure(exc, current=ticket == self._ticket)
			return None
		finally:
			if ticket == self._ticket:
				self._generating_text = False

		if ticket != self._ticket:
			LOGGER.info("Dropping campaign copy for superseded ticket %s", ticket)
			return None
		self._result = result
		return result

	def _begin_image(self) -> int:
		self._image_ticket += 1
		self._generating_image = True
		return self._image_ticket

	async def _run_image_stage(
		self, image_ticket: int, prompt: str, size: ImageSize, error_prefix: str = ""
	) -> None:
		try:
			self.gate.ensure_ready()
			image = await self._image_generator(self.gate.current_config(), prompt, size)
		except Exception as exc:
			self._record_failure(exc, current=image_ticket == self._image_ticket, prefix=error_prefix)
			return
		finally:
			if image_ticket == self._image_ticket:
				self._generating_image = False

		if image_ticket != self._image_ticket:
			LOGGER.info("Dropping campaign image for superseded request %s", image_ticket)
			return
		self._image = self._measure(image)

	def _measure(self, image: GeneratedImage) -> GeneratedImage:
		try:
			info = self._previewer.inspect(image.encoded_bytes)
		except ValueError as exc:
			LOGGER.warning("Stored campaign image could not be inspected: %s", exc)
			return image
		return replace(image, width=info.width, height=info.height)

	def _record_failure(self, exc: Exception, current: bool, prefix: str = "") -> None:
		if isinstance(exc, CredentialRejected):
			self.gate.report_authorization_failure(exc.message)
		if isinstance(exc, GenerationError):
			message = exc.message
		else:
			LOGGER.exception("Unexpected campaign generation failure")
			message = CAMPAIGN_FAILED
		if not current:
			LOGGER.info("Ignoring failure for superseded campaign request: %s", message)
			return
		self._error = f"{prefix}{message}"
