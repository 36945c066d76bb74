import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from main import create_app
from services.errors import CredentialRejected
from services.orchestration.campaign_orchestrator import CampaignOrchestrator
from tests.conftest import (
	FakeSessionFactory,
	FakeSessionHandle,
	RecordingImageGenerator,
	RecordingTextGenerator,
	make_campaign,
	png_bytes,
)

BOOTS = {"topic": "Summer boots sale", "audience": "hikers", "tone": "Exciting", "image_size": "2K"}


@pytest.fixture
def app(monkeypatch):
	monkeypatch.setenv("KEY_SELECTION_HOST", "submitted")
	monkeypatch.setenv("ASSUME_AUTHORIZED_WITHOUT_HOST", "true")
	return create_app()


@pytest.fixture
def client(app):
	with TestClient(app) as test_client:
		yield test_client


def _select_key(client):
	response = client.post("/api/credentials/select", json={"api_key": "browser-key"})
	assert response.status_code == 200
	return response.json()


def _install_generators(app, text_outcomes, image_outcomes=None):
	text = RecordingTextGenerator(text_outcomes)
	image = RecordingImageGenerator(image_outcomes)
	app.state.campaign_orchestrator = CampaignOrchestrator(app.state.credential_gate, text, image)
	return text, image


def test_health_reports_gate(client):
	response = client.get("/health")
	assert response.status_code == 200
	assert response.json()["credentials"]["status"] == "not_ready"


def test_key_selection_flow(client):
	assert client.get("/api/credentials").json()["ready"] is False

	response = client.post("/api/credentials/select", json={})
	assert response.status_code == 409
	assert response.json()["detail"] == "Session expired or invalid. Please select a key again."

	state = _select_key(client)
	assert state["ready"] is True
	assert state["last_error"] is None
	assert client.post("/api/credentials/check").json()["ready"] is True


def test_campaign_requires_topic(client, app):
	_select_key(client)
	text, _ = _install_generators(app, [make_campaign()])

	response = client.post("/api/campaign", json={"topic": "  "})

	assert response.status_code == 400
	assert text.calls == []


def test_campaign_requires_selected_key(client, app):
	text, _ = _install_generators(app, [make_campaign()])

	response = client.post("/api/campaign", json=BOOTS)

	assert response.status_code == 401
	assert text.calls == []


def test_campaign_generation_end_to_end(client, app):
	_select_key(client)
	text, image = _install_generators(app, [make_campaign()])

	response = client.post("/api/campaign", json=BOOTS)
	assert response.status_code == 202
	started = response.json()
	assert started["is_generating_text"] is True
	assert started["result"] is None
	assert started["request"]["topic"] == "Summer boots sale"

	snapshot = client.get("/api/campaign").json()
	assert snapshot["result"]["subject_lines"] == ["A", "B", "C"]
	assert snapshot["result"]["body_copy"] == "**Hi**"
	assert snapshot["image"]["size"] == "2K"
	assert snapshot["image"]["width"] == 40
	assert snapshot["image"]["height"] == 30
	assert snapshot["is_generating_text"] is False
	assert snapshot["is_generating_image"] is False
	assert text.calls[0]["credentials"].api_key == "browser-key"
	assert [call["prompt"] for call in image.calls] == ["boots in mountains"]

	download = client.get("/api/campaign/image")
	assert download.status_code == 200
	assert download.content == png_bytes()
	assert "campaign-image.png" in download.headers["content-disposition"]

	thumbnail = client.get("/api/campaign/image/thumbnail")
	assert thumbnail.status_code == 200
	assert thumbnail.headers["content-type"] == "image/png"
	assert Image.open(io.BytesIO(thumbnail.content)).size == (40, 30)


def test_regenerate_image(client, app):
	_select_key(client)
	text, image = _install_generators(app, [make_campaign()])

	assert client.post("/api/campaign/image", json={}).status_code == 409
	assert client.get("/api/campaign/image").status_code == 404

	client.post("/api/campaign", json=BOOTS)
	response = client.post("/api/campaign/image", json={"image_size": "4K"})

	assert response.status_code == 200
	assert response.json()["image"]["size"] == "4K"
	assert len(text.calls) == 1
	assert len(image.calls) == 2


def test_rejected_key_sends_user_back_to_selection(client, app):
	_select_key(client)
	_, image = _install_generators(app, [CredentialRejected()])

	client.post("/api/campaign", json=BOOTS)

	credentials = client.get("/api/credentials").json()
	assert credentials["ready"] is False
	assert credentials["forced_reselection"] is True
	assert client.get("/api/campaign").json()["error"] == CredentialRejected.default_message
	assert image.calls == []

	assert client.post("/api/credentials/select", json={}).status_code == 409
	reselected = client.post("/api/credentials/select", json={"api_key": "rotated-key"}).json()
	assert reselected["ready"] is True
	assert reselected["forced_reselection"] is False


def test_chat_websocket_streams_reply(client, app):
	_select_key(client)
	app.state.chat_session_factory = FakeSessionFactory(FakeSessionHandle([["Hel", "lo wor", "ld"]]))

	with client.websocket_connect("/ws/chat") as websocket:
		opened = websocket.receive_json()
		assert opened["type"] == "chat.transcript"
		assert opened["credentials_ready"] is True
		assert len(opened["transcript"]) == 1

		websocket.send_json({"type": "chat.send", "text": "Tagline please", "request_id": "r1"})
		frames = []
		while True:
			frame = websocket.receive_json()
			frames.append(frame)
			if frame["type"] in ("chat.done", "chat.error", "error"):
				break

	assert frames[0]["type"] == "chat.message"
	assert frames[0]["message"]["role"] == "user"
	assert frames[0]["message"]["text"] == "Tagline please"
	deltas = [frame for frame in frames if frame["type"] == "chat.delta"]
	done = frames[-1]
	assert done["type"] == "chat.done"
	assert done["request_id"] == "r1"
	assert done["message"]["text"] == "Hello world"
	assert [delta["message"]["text"] for delta in deltas] == ["", "Hel", "Hello wor", "Hello world"]
	assert len({delta["message"]["id"] for delta in deltas}) == 1
	assert [entry["role"] for entry in done["transcript"]] == ["model", "user", "model"]


def test_chat_websocket_rejects_bad_frames(client, app):
	_select_key(client)
	app.state.chat_session_factory = FakeSessionFactory(FakeSessionHandle([]))

	with client.websocket_connect("/ws/chat") as websocket:
		websocket.receive_json()

		websocket.send_text("not json")
		assert websocket.receive_json()["detail"] == "Payload must be JSON"

		websocket.send_json({"type": "chat.unknown", "request_id": 7})
		error = websocket.receive_json()
		assert error == {"type": "error", "request_id": 7, "detail": "Unsupported message type."}

		websocket.send_json({"type": "chat.send", "text": "   "})
		assert websocket.receive_json()["detail"] == "Message text is required."


def test_chat_session_is_closed_when_socket_disconnects(client, app):
	_select_key(client)
	handle = FakeSessionHandle([])
	app.state.chat_session_factory = FakeSessionFactory(handle)

	with client.websocket_connect("/ws/chat") as websocket:
		websocket.receive_json()
		assert not handle.closed

	assert handle.closed
