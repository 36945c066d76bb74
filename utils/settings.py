"""Environment-driven configuration for the Gemini-backed campaign service."""

from __future__ import annotations

import os
from dataclasses import dataclass

KEY_HOST_SUBMITTED = "submitted"
KEY_HOST_NONE = "none"
_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} must be an integer.") from exc


@dataclass(frozen=True)
class GenerationSettings:
    """Model names and generation knobs.

    Attributes:
        text_model: Model used for structured campaign copy.
        image_model: Model used for campaign visuals.
        chat_model: Model backing the assistant chat.
        image_aspect_ratio: Fixed aspect ratio for every campaign image.
        thinking_budget: Thinking tokens granted to the copywriting call.
        key_selection_host: Which key-selection host to wire up (`submitted` or `none`).
        assume_authorized_without_host: When no host is wired, treat the environment as
            already authorized (credentials injected out-of-band).
        log_level: Root logging level name.
    """

    text_model: str = "gemini-3-pro-preview"
    image_model: str = "gemini-3-pro-image-preview"
    chat_model: str = "gemini-3-pro-preview"
    image_aspect_ratio: str = "4:3"
    thinking_budget: int = 1024
    key_selection_host: str = KEY_HOST_SUBMITTED
    assume_authorized_without_host: bool = True
    log_level: str = "INFO"


def load_settings() -> GenerationSettings:
    """Build settings from environment variables, falling back to defaults."""
    defaults = GenerationSettings()
    host = (os.getenv("KEY_SELECTION_HOST") or defaults.key_selection_host).strip().lower()
    if host not in {KEY_HOST_SUBMITTED, KEY_HOST_NONE}:
        raise RuntimeError(
            f"KEY_SELECTION_HOST={host!r} is not supported. "
            f"Use '{KEY_HOST_SUBMITTED}' or '{KEY_HOST_NONE}'."
        )
    return GenerationSettings(
        text_model=os.getenv("GEMINI_TEXT_MODEL", defaults.text_model),
        image_model=os.getenv("GEMINI_IMAGE_MODEL", defaults.image_model),
        chat_model=os.getenv("GEMINI_CHAT_MODEL", defaults.chat_model),
        image_aspect_ratio=os.getenv("CAMPAIGN_IMAGE_ASPECT_RATIO", defaults.image_aspect_ratio),
        thinking_budget=_env_int("CAMPAIGN_THINKING_BUDGET", defaults.thinking_budget),
        key_selection_host=host,
        assume_authorized_without_host=_env_bool(
            "ASSUME_AUTHORIZED_WITHOUT_HOST", defaults.assume_authorized_without_host
        ),
        log_level=(os.getenv("LOG_LEVEL") or defaults.log_level).upper(),
    )
