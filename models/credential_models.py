"""Credential gate state models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class GateStatus(str, Enum):
	UNRESOLVED = "unresolved"
	READY = "ready"
	NOT_READY = "not_ready"


@dataclass
class CredentialState:
	"""Snapshot of the credential gate.

	Attributes:
		status: Current gate state.
		present: Whether a usable key is believed to be available.
		forced_reselection: Set after the Gemini API rejected the key; cleared on reselection.
		last_error: User-facing explanation for the last failure, if any.
	"""

	status: GateStatus = GateStatus.UNRESOLVED
	present: bool = False
	forced_reselection: bool = False
	last_error: Optional[str] = None

	@property
	def ready(self) -> bool:
		return self.status is GateStatus.READY

	def to_dict(self) -> dict:
		return {
			"status": self.status.value,
			"ready": self.ready,
			"present": self.present,
			"forced_reselection": self.forced_reselection,
			"last_error": self.last_error,
		}


@dataclass(frozen=True)
class CredentialConfig:
	"""Credentials handed to a single generation call.

	`api_key=None` lets google-genai fall back to the environment-injected key.
	"""

	api_key: Optional[str] = field(default=None, repr=False)
