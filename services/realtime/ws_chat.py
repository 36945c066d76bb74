"""Dispatch chat websocket events to the chat orchestrator."""
from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from models.chat_models import ChatMessage
from services.orchestration.chat_orchestrator import ChatOrchestrator


class ChatSocketHandler:
	"""Route websocket messages for a single chat view activation."""

	def __init__(self, orchestrator: ChatOrchestrator) -> None:
		self.orchestrator = orchestrator

	async def open(self, websocket: WebSocket) -> None:
		"""Start the session and send the seeded transcript."""
		transcript = await self.orchestrator.start_session()
		await self._send(websocket, self._transcript_frame(transcript))

	async def handle(self, websocket: WebSocket, payload: Dict[str, Any]) -> None:
		"""Process a single inbound websocket payload."""
		request_id = payload.get("request_id")
		message_type = payload.get("type")
		try:
			if message_type == "chat.send":
				result = await self._send_message(websocket, request_id, payload)
			elif message_type == "chat.reset":
				result = self._transcript_frame(await self.orchestrator.start_session())
			elif message_type == "chat.transcript":
				result = self._transcript_frame(self.orchestrator.transcript)
			else:
				raise ValueError("Unsupported message type.")
			result["request_id"] = request_id
			await self._send(websocket, result)
		except WebSocketDisconnect:
			raise
		except Exception as exc:
			await self._send_error(websocket, request_id, str(exc))

	async def _send_message(self, websocket: WebSocket, request_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
		text = payload.get("text") or ""
		if not text.strip():
			raise ValueError("Message text is required.")
		if self.orchestrator.is_busy:
			raise RuntimeError("A reply is still streaming.")

		echoed = False

		async def on_update(message: ChatMessage) -> None:
			nonlocal echoed
			if not echoed:
				# transcript ends with [user entry, placeholder] on the first update
				echoed = True
				user_entry = self.orchestrator.transcript[-2]
				await self._send(websocket, {"type": "chat.message", "request_id": request_id, "message": user_entry.to_dict()})
			await self._send(websocket, {"type": "chat.delta", "request_id": request_id, "message": message.to_dict()})

		reply = await self.orchestrator.send(text, on_update=on_update)
		if reply is None:
			raise RuntimeError("Message was not sent.")
		frame_type = "chat.error" if reply.is_error else "chat.done"
		return {
			"type": frame_type,
			"message": reply.to_dict(),
			"transcript": [entry.to_dict() for entry in self.orchestrator.transcript],
		}

	def _transcript_frame(self, transcript) -> Dict[str, Any]:
		return {
			"type": "chat.transcript",
			"transcript": [entry.to_dict() for entry in transcript],
			"credentials_ready": self.orchestrator.gate.is_ready,
		}

	async def _send_error(self, websocket: WebSocket, request_id: Any, detail: str) -> None:
		await self._send(websocket, {"type": "error", "request_id": request_id, "detail": detail})

	async def _send(self, websocket: WebSocket, payload: Dict[str, Any]) -> None:
		await websocket.send_text(json.dumps(payload))
