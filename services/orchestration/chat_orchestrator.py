"""Drive the assistant chat transcript for one chat view."""

from __future__ import annotations

import itertools
import logging
from contextlib import aclosing
from dataclasses import replace
from typing import Awaitable, Callable, List, Optional

from models.chat_models import ChatMessage, ChatRole
from services.credentials.credential_gate import CredentialGate
from services.errors import CredentialRejected, GenerationError
from services.gemini.chat_session import ChatSessionHandle, create_chat_session
from services.gemini.prompts import chat_greeting

LOGGER = logging.getLogger(__name__)

CHAT_FAILED = "Sorry, I encountered an error. Please try again."

SessionFactory = Callable[..., ChatSessionHandle]
UpdateCallback = Callable[[ChatMessage], Awaitable[None]]


class ChatOrchestrator:
	"""Hold one chat session and its transcript.

	Only the most recent model entry is ever mutated, and only by growing its
	text while fragments stream in. Everything else is append-only.
	"""

	def __init__(
		self,
		gate: CredentialGate,
		session_factory: SessionFactory = create_chat_session,
		greeting: Optional[str] = None,
	) -> None:
		self.gate = gate
		self._session_factory = session_factory
		self._greeting = chat_greeting() if greeting is None else greeting
		self._ids = itertools.count(1)
		self._transcript: List[ChatMessage] = []
		self._session: Optional[ChatSessionHandle] = None
		self._busy = False

	@property
	def is_busy(self) -> bool:
		return self._busy

	@property
	def has_session(self) -> bool:
		return self._session is not None

	@property
	def transcript(self) -> List[ChatMessage]:
		return [replace(message) for message in self._transcript]

	def find(self, message_id: int) -> Optional[ChatMessage]:
		for message in self._transcript:
			if message.message_id == message_id:
				return replace(message)
		return None

	async def start_session(self) -> List[ChatMessage]:
		"""Open a fresh session, discarding any previous one, and reset the transcript."""
		await self._discard_session()
		self._transcript = []
		if self._greeting:
			self._append(ChatRole.MODEL, self._greeting)
		try:
			self._session = self._open_session()
		except GenerationError as exc:
			# Retried on the next send once a key is available.
			LOGGER.info("Chat session deferred: %s", exc.message)
		return self.transcript

	async def close(self) -> None:
		"""Release the current session when the chat view goes away."""
		await self._discard_session()

	async def send(self, text: str, on_update: Optional[UpdateCallback] = None) -> Optional[ChatMessage]:
		"""Send one user message and stream the reply into the transcript.

		Returns the model entry (or the error entry), or None when the message
		was blank or another send is still in flight. Exceptions raised by
		`on_update` propagate to the caller and never become error entries.
		"""
		if not (text or "").strip() or self._busy:
			return None

		self._busy = True
		try:
			self._append(ChatRole.USER, text)
			try:
				if self._session is None:
					self._session = self._open_session()
			except Exception as exc:
				return await self._record_failure(exc)

			placeholder = self._append(ChatRole.MODEL, "")
			if on_update is not None:
				await on_update(placeholder)
			async with aclosing(self._session.send_streamed(text)) as stream:
				while True:
					try:
						fragment = await anext(stream)
					except StopAsyncIteration:
						return placeholder
					except Exception as exc:
						return await self._record_failure(exc)
					placeholder.text += fragment
					if on_update is not None:
						await on_update(placeholder)
		finally:
			self._busy = False

	def _open_session(self) -> ChatSessionHandle:
		self.gate.ensure_ready()
		return self._session_factory(self.gate.current_config())

	async def _discard_session(self) -> None:
		session, self._session = self._session, None
		if session is not None:
			await session.aclose()

	def _append(self, role: ChatRole, text: str, is_error: bool = False) -> ChatMessage:
		message = ChatMessage(message_id=next(self._ids), role=role, text=text, is_error=is_error)
		self._transcript.append(message)
		return message

	async def _record_failure(self, exc: Exception) -> ChatMessage:
		if isinstance(exc, CredentialRejected):
			self.gate.report_authorization_failure(exc.message)
			await self._discard_session()
		if isinstance(exc, GenerationError):
			LOGGER.warning("Chat error: %s", exc.message)
		else:
			LOGGER.exception("Unexpected chat failure")
		return self._append(ChatRole.MODEL, CHAT_FAILED, is_error=True)
