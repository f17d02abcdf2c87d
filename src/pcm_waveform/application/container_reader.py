"""Port for audio container readers that expose raw PCM payloads."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pcm_waveform.domain.models import FormatDescriptor


@dataclass(frozen=True, slots=True)
class ReadFailureError(ValueError):
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"

    def as_dict(self) -> dict[str, str]:
        return {"code": "read_failure", "path": self.path, "message": self.message}


class AudioContainerReader(Protocol):
    """Reads a container's format header and its complete PCM payload."""

    def read_format(self, path: Path) -> FormatDescriptor:
        """Parse the format header without reading the sample payload."""

    def read_pcm(self, path: Path) -> bytes:
        """Return the interleaved PCM bytes of the whole stream."""
