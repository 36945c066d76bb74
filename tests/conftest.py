"""Shared fakes for the Gemini client and the generation functions."""

from __future__ import annotations

import asyncio
import io
import json
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest
from PIL import Image

from models.campaign_models import CampaignResult, GeneratedImage, ImageSize
from models.credential_models import CredentialConfig
from services.credentials.credential_gate import CredentialGate
from services.credentials.key_host import SubmittedKeyHost
from utils.media_validation import encode_image_payload


def png_bytes(size=(40, 30), color=(200, 40, 40)) -> bytes:
	buffer = io.BytesIO()
	Image.new("RGB", size, color).save(buffer, format="PNG")
	return buffer.getvalue()


def text_response(payload: Any) -> SimpleNamespace:
	text = payload if isinstance(payload, str) or payload is None else json.dumps(payload)
	return SimpleNamespace(text=text, candidates=[])


def image_response(data: Optional[bytes], mime_type: str = "image/png") -> SimpleNamespace:
	parts = [SimpleNamespace(text="Here is your image.", inline_data=None)]
	if data is not None:
		parts.append(SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type)))
	candidate = SimpleNamespace(content=SimpleNamespace(parts=parts))
	return SimpleNamespace(text=None, candidates=[candidate])


class FakeModels:
	def __init__(self, outcomes: List[Any]) -> None:
		self.outcomes = list(outcomes)
		self.calls: List[dict] = []

	async def generate_content(self, *, model, contents, config):
		self.calls.append({"model": model, "contents": contents, "config": config})
		outcome = self.outcomes.pop(0)
		if isinstance(outcome, Exception):
			raise outcome
		return outcome


class FakeChat:
	def __init__(self, replies: List[Any]) -> None:
		self.replies = list(replies)
		self.sent: List[str] = []

	async def send_message_stream(self, message):
		self.sent.append(message)
		reply = self.replies.pop(0)
		if isinstance(reply, Exception):
			raise reply

		async def stream():
			for item in reply:
				if isinstance(item, Exception):
					raise item
				yield SimpleNamespace(text=item)

		return stream()


class FakeChats:
	def __init__(self, chat: FakeChat) -> None:
		self.chat = chat
		self.created: List[dict] = []

	def create(self, *, model, config):
		self.created.append({"model": model, "config": config})
		return self.chat


class FakeAsyncClient:
	def __init__(self, models: FakeModels, chats: FakeChats) -> None:
		self.models = models
		self.chats = chats
		self.closed = 0

	async def aclose(self) -> None:
		self.closed += 1


class FakeClient:
	def __init__(self, outcomes: Optional[List[Any]] = None, chat: Optional[FakeChat] = None) -> None:
		self.models = FakeModels(outcomes or [])
		self.chats = FakeChats(chat or FakeChat([]))
		self.aio = FakeAsyncClient(self.models, self.chats)


class FakeClientFactory:
	"""Stands in for build_client and remembers the credentials of each call."""

	def __init__(self, client: FakeClient) -> None:
		self.client = client
		self.credentials: List[CredentialConfig] = []

	def __call__(self, credentials: CredentialConfig) -> FakeClient:
		self.credentials.append(credentials)
		return self.client


class RecordingTextGenerator:
	def __init__(self, outcomes: List[Any]) -> None:
		self.outcomes = list(outcomes)
		self.calls: List[dict] = []

	async def __call__(self, credentials, topic, audience, tone):
		self.calls.append({"credentials": credentials, "topic": topic, "audience": audience, "tone": tone})
		outcome = self.outcomes.pop(0)
		if isinstance(outcome, tuple):
			release, outcome = outcome
			await release.wait()
		if isinstance(outcome, Exception):
			raise outcome
		return outcome


class RecordingImageGenerator:
	def __init__(self, outcomes: Optional[List[Any]] = None) -> None:
		self.outcomes = list(outcomes or [])
		self.calls: List[dict] = []

	async def __call__(self, credentials, prompt, size):
		self.calls.append({"credentials": credentials, "prompt": prompt, "size": ImageSize(size)})
		outcome = self.outcomes.pop(0) if self.outcomes else make_image(size)
		if isinstance(outcome, tuple):
			release, outcome = outcome
			await release.wait()
		if isinstance(outcome, Exception):
			raise outcome
		return outcome


class FakeSessionHandle:
	def __init__(self, replies: List[Any]) -> None:
		self.replies = list(replies)
		self.sent: List[str] = []
		self.closed_streams = 0
		self.closed = False

	async def send_streamed(self, message):
		self.sent.append(message)
		reply = self.replies.pop(0)
		try:
			for item in reply:
				if isinstance(item, asyncio.Event):
					await item.wait()
					continue
				if isinstance(item, Exception):
					raise item
				yield item
		finally:
			self.closed_streams += 1

	async def aclose(self) -> None:
		self.closed = True


class FakeSessionFactory:
	def __init__(self, *handles: FakeSessionHandle) -> None:
		self.handles = list(handles)
		self.credentials: List[CredentialConfig] = []

	def __call__(self, credentials):
		self.credentials.append(credentials)
		return self.handles.pop(0)


def make_campaign(image_prompt: str = "boots in mountains") -> CampaignResult:
	return CampaignResult(subject_lines=["A", "B", "C"], body_copy="**Hi**", image_prompt=image_prompt)


def make_image(size=ImageSize.ONE_K) -> GeneratedImage:
	return GeneratedImage(encoded_bytes=encode_image_payload(png_bytes()), size=ImageSize(size))


@pytest.fixture
def key_host() -> SubmittedKeyHost:
	host = SubmittedKeyHost()
	host.stage_key("test-key")
	return host


@pytest.fixture
async def ready_gate(key_host) -> CredentialGate:
	gate = CredentialGate(key_host)
	await gate.request_selection()
	return gate
