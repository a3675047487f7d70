"""Generative model interface shared by identification and nutrition."""

import base64
import binascii
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class InlineImage:
    """Base64 image payload sent alongside a prompt."""

    data: str
    mime_type: str

    @classmethod
    def from_bytes(cls, image_bytes: bytes) -> "InlineImage":
        """Encode raw image bytes."""
        return cls(
            data=base64.b64encode(image_bytes).decode("utf-8"),
            mime_type=_detect_mime_type(image_bytes),
        )

    @classmethod
    def from_base64(cls, data: str) -> "InlineImage":
        """Wrap an already-encoded payload, sniffing its MIME type."""
        try:
            header = base64.b64decode(data[:16])
        except (binascii.Error, ValueError):
            header = b""
        return cls(data=data, mime_type=_detect_mime_type(header))

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class GenerativeClient(Protocol):
    """Interface for text and vision prompts against a generative model."""

    async def generate(self, *, prompt: str, image: InlineImage | None = None) -> str:
        """Return the model's text response for a prompt."""


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
