"""Campaign domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Tone(str, Enum):
    """Voice requested for the campaign copy."""

    PROFESSIONAL = "Professional"
    EXCITING = "Exciting"
    FRIENDLY = "Friendly"
    URGENT = "Urgent"
    WITTY = "Witty"


class ImageSize(str, Enum):
    """Resolution tier accepted by the image model."""

    ONE_K = "1K"
    TWO_K = "2K"
    FOUR_K = "4K"


@dataclass(frozen=True)
class CampaignRequest:
    """User input for one generation attempt.

    Attributes:
        topic: What the campaign is about. Required, must not be blank.
        audience: Free-text description of who the email targets.
        tone: Voice for the copy.
        image_size: Resolution tier for the first generated image.
    """

    topic: str
    audience: str = ""
    tone: Tone = Tone.PROFESSIONAL
    image_size: ImageSize = ImageSize.ONE_K

    @property
    def is_blank(self) -> bool:
        return not self.topic.strip()


@dataclass
class CampaignResult:
    """Copy produced by the text model.

    Attributes:
        subject_lines: Ordered subject line candidates (three are requested).
        body_copy: Email body in Markdown.
        image_prompt: Visual description handed to the image model.
    """

    subject_lines: List[str]
    body_copy: str
    image_prompt: str


@dataclass
class GeneratedImage:
    """Image returned by the image model, kept base64-encoded.

    `width` and `height` are measured once when the image is stored and stay
    None when the payload could not be read as an image.
    """

    encoded_bytes: str
    size: ImageSize
    mime_type: str = "image/png"
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class CampaignSnapshot:
    """Read-only view of the campaign orchestrator state."""

    request: Optional[CampaignRequest] = None
    result: Optional[CampaignResult] = None
    image: Optional[GeneratedImage] = None
    image_size: ImageSize = ImageSize.ONE_K
    is_generating_text: bool = False
    is_generating_image: bool = False
    error: Optional[str] = None
