"""WebSocket endpoint for the streaming marketing assistant."""

from __future__ import annotations

import json

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from services.orchestration.chat_orchestrator import ChatOrchestrator
from services.realtime.ws_chat import ChatSocketHandler

router = APIRouter()


@router.websocket("/ws/chat")
async def chat_socket(websocket: WebSocket):
	"""Serve one chat view; the session lives exactly as long as the socket."""
	await websocket.accept()
	orchestrator = ChatOrchestrator(
		websocket.app.state.credential_gate,
		session_factory=websocket.app.state.chat_session_factory,
	)
	handler = ChatSocketHandler(orchestrator)
	try:
		await handler.open(websocket)
		while True:
			try:
				raw = await websocket.receive_text()
			except WebSocketDisconnect:
				break
			except Exception:
				await websocket.send_text(json.dumps({"type": "error", "detail": "Invalid websocket frame"}))
				continue
			try:
				payload = json.loads(raw)
			except Exception:
				await websocket.send_text(json.dumps({"type": "error", "detail": "Payload must be JSON"}))
				continue
			if not isinstance(payload, dict):
				await websocket.send_text(json.dumps({"type": "error", "detail": "Payload must be a JSON object"}))
				continue
			try:
				await handler.handle(websocket, payload)
			except WebSocketDisconnect:
				break
	finally:
		await orchestrator.close()
	try:
		await websocket.close()
	except Exception:
		pass
