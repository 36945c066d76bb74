"""Chat transcript models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChatRole(str, Enum):
	USER = "user"
	MODEL = "model"


@dataclass
class ChatMessage:
	"""One transcript entry.

	`message_id` is assigned from a per-transcript counter at creation time and
	is the lookup key used to grow a streaming model reply in place.
	"""

	message_id: int
	role: ChatRole
	text: str
	is_error: bool = False

	def to_dict(self) -> dict:
		return {
			"id": self.message_id,
			"role": self.role.value,
			"text": self.text,
			"is_error": self.is_error,
		}
