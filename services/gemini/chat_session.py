"""Streaming chat sessions for the marketing assistant."""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Optional

from google.genai import types

from models.credential_models import CredentialConfig
from services.gemini.client_factory import build_client
from services.gemini.error_mapping import translate_errors
from services.gemini.prompts import chat_persona_prompt
from services.gemini.response_parser import chunk_text
from utils.settings import GenerationSettings


class ChatSessionHandle:
	"""Wrap one google-genai async chat.

	Each `send_streamed` call issues a new request; its fragments can be
	consumed once, in arrival order.
	"""

	def __init__(self, chat: Any, client: Any = None) -> None:
		self._chat = chat
		# Owning client; its HTTP session lives until aclose().
		self._client = client

	async def send_streamed(self, message: str) -> AsyncIterator[str]:
		"""Yield text fragments for `message` as they arrive."""
		async with translate_errors("Chat"):
			stream = await self._chat.send_message_stream(message)
			async for chunk in stream:
				yield chunk_text(chunk)

	async def aclose(self) -> None:
		"""Release the owning client's HTTP connections."""
		if self._client is not None:
			client, self._client = self._client, None
			await client.aio.aclose()


def create_chat_session(
	credentials: CredentialConfig,
	system_instruction: Optional[str] = None,
	*,
	settings: Optional[GenerationSettings] = None,
	client_factory: Callable[[CredentialConfig], Any] = build_client,
) -> ChatSessionHandle:
	"""Open a chat context configured with the assistant persona."""
	settings = settings or GenerationSettings()
	client = client_factory(credentials)
	chat = client.aio.chats.create(
		model=settings.chat_model,
		config=types.GenerateContentConfig(system_instruction=system_instruction or chat_persona_prompt()),
	)
	return ChatSessionHandle(chat, client)
