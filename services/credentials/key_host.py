"""Key-selection host capability consumed by the credential gate."""

from __future__ import annotations

from typing import Optional, Protocol

ENTITY_NOT_FOUND = "Requested entity was not found."


class HostSelectionError(Exception):
	"""Raised by a host when interactive key selection fails."""


class KeySelectionHost(Protocol):
	"""Anything that can report and select an API key on the user's behalf."""

	async def has_selected_api_key(self) -> bool: ...

	async def open_select_key(self) -> None: ...

	def selected_api_key(self) -> Optional[str]: ...

	def discard_selected_key(self) -> None: ...


class SubmittedKeyHost:
	"""Host that holds a key submitted from the browser.

	The key lives only here. Callers stage a candidate with `stage_key` and
	promote it with `open_select_key`; the gate reads it back through
	`selected_api_key` on every generation call.
	"""

	def __init__(self) -> None:
		self._staged: Optional[str] = None
		self._selected: Optional[str] = None

	def stage_key(self, api_key: Optional[str]) -> None:
		cleaned = (api_key or "").strip()
		self._staged = cleaned or None

	async def has_selected_api_key(self) -> bool:
		return self._selected is not None

	async def open_select_key(self) -> None:
		"""Promote the staged key, keeping the current one when nothing new was staged."""
		if self._staged is not None:
			self._selected, self._staged = self._staged, None
			return
		if self._selected is None:
			raise HostSelectionError(ENTITY_NOT_FOUND)

	def selected_api_key(self) -> Optional[str]:
		return self._selected

	def discard_selected_key(self) -> None:
		"""Forget the selected key after the API refused it."""
		self._selected = None
