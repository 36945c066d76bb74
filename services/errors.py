"""Error taxonomy shared by the generation client and orchestrators."""

from __future__ import annotations

from typing import Optional


class GenerationError(Exception):
    """Base class for failures surfaced to the campaign and chat views.

    Attributes:
        message: Human-readable text suitable for showing next to the control
            that triggered the call.
    """

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class CredentialUnavailable(GenerationError):
    """No usable API key is selected."""

    default_message = "Select an API key before generating."


class CredentialRejected(GenerationError):
    """The key is present but the Gemini API refused it."""

    default_message = "The previous API key was invalid or does not have permission for this model."


class SessionInvalidated(GenerationError):
    """Key selection reported that the requested entity no longer exists."""

    default_message = "Session expired or invalid. Please select a key again."


class MalformedResponse(GenerationError):
    """The structured payload was missing or did not match the campaign schema."""

    default_message = "The model returned an incomplete campaign. Please try again."


class NoImageReturned(GenerationError):
    """The image model answered without an inline image part."""

    default_message = "No image data returned from Gemini"


class UpstreamError(GenerationError):
    """Transport or service failure reported by the Gemini API."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class UserInputInvalid(GenerationError):
    """A required field was empty; raised before any call is issued."""

    default_message = "A campaign topic is required."
