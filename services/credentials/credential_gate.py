"""Credential gate guarding every Gemini call.

State machine::

    UNRESOLVED -> READY | NOT_READY      (check_availability)
    NOT_READY  -> READY                  (request_selection)
    READY      -> NOT_READY (forced)     (report_authorization_failure)

The gate never reads key material itself; it asks the host for the currently
selected key each time `current_config` is called so a rotated key is picked
up by the very next request.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from models.credential_models import CredentialConfig, CredentialState, GateStatus
from services.credentials.key_host import ENTITY_NOT_FOUND, HostSelectionError, KeySelectionHost
from services.errors import CredentialRejected, CredentialUnavailable, SessionInvalidated

LOGGER = logging.getLogger(__name__)

PROBE_FAILED = "Failed to verify API key status."
SELECTION_FAILED = "Failed to select key. Please try again."
NO_HOST_NOT_AUTHORIZED = "No key selection host is configured and environment credentials are not assumed."


class CredentialGate:
	"""Track whether a usable API key is available for generation."""

	def __init__(self, host: Optional[KeySelectionHost] = None, assume_authorized_without_host: bool = True) -> None:
		self.host = host
		self.assume_authorized_without_host = assume_authorized_without_host
		self._state = CredentialState()

	@property
	def state(self) -> CredentialState:
		return replace(self._state)

	@property
	def is_ready(self) -> bool:
		return self._state.ready

	async def check_availability(self) -> CredentialState:
		"""Probe the host and resolve the gate to READY or NOT_READY."""
		if self._state.forced_reselection:
			self._transition(GateStatus.NOT_READY, present=False)
			return self.state

		if self.host is None:
			if self.assume_authorized_without_host:
				LOGGER.warning("No key selection host configured; assuming environment key is present.")
				self._transition(GateStatus.READY, present=True, last_error=None)
			else:
				self._transition(GateStatus.NOT_READY, present=False, last_error=NO_HOST_NOT_AUTHORIZED)
			return self.state

		try:
			selected = await self.host.has_selected_api_key()
		except Exception:
			LOGGER.exception("Error checking API key status")
			self._transition(GateStatus.NOT_READY, present=False, last_error=PROBE_FAILED)
			return self.state

		if selected:
			self._transition(GateStatus.READY, present=True, last_error=None)
		else:
			self._transition(GateStatus.NOT_READY, present=False)
		return self.state

	async def request_selection(self) -> CredentialState:
		"""Run the host's interactive selection and report the resulting state.

		Raises:
			SessionInvalidated: The host reported that the requested entity was not found.
			CredentialUnavailable: Any other selection failure.
		"""
		if self.host is None:
			return await self.check_availability()

		try:
			await self.host.open_select_key()
		except HostSelectionError as exc:
			if ENTITY_NOT_FOUND.rstrip(".") in str(exc):
				error = SessionInvalidated()
				self._transition(GateStatus.NOT_READY, present=False, last_error=error.message)
				raise error from exc
			LOGGER.error("Key selection failed: %s", exc)
			self._transition(GateStatus.NOT_READY, present=False, last_error=SELECTION_FAILED)
			raise CredentialUnavailable(SELECTION_FAILED) from exc

		self._transition(GateStatus.READY, present=True, forced_reselection=False, last_error=None)
		return self.state

	def report_authorization_failure(self, reason: Optional[str] = None) -> CredentialState:
		"""Force the gate back to NOT_READY after the API rejected the key."""
		LOGGER.warning("Authorization failure reported; forcing key reselection (%s)", reason or "no detail")
		if self.host is not None:
			self.host.discard_selected_key()
		self._transition(
			GateStatus.NOT_READY,
			present=False,
			forced_reselection=True,
			last_error=CredentialRejected.default_message,
		)
		return self.state

	def ensure_ready(self) -> None:
		if not self.is_ready:
			raise CredentialUnavailable(self._state.last_error or CredentialUnavailable.default_message)

	def current_config(self) -> CredentialConfig:
		"""Return credentials for one call, re-reading the host every time."""
		if self.host is None:
			return CredentialConfig()
		return CredentialConfig(api_key=self.host.selected_api_key())

	def _transition(self, status: GateStatus, **changes) -> None:
		previous = self._state.status
		self._state = replace(self._state, status=status, **changes)
		if previous is not status:
			LOGGER.info("Credential gate %s -> %s", previous.value, status.value)
