"""Domain value objects describing validation, decoding and rendering policy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pcm_waveform.format_contract import (
    COMPANDED_ENCODINGS,
    DEFAULT_HEADROOM,
    MAX_BITS_PER_SAMPLE,
    MAX_CHANNEL_COUNT,
    EncodingKind,
)


class TruncationMode(str, Enum):
    """What to do with a trailing partial frame."""

    CLAMP = "clamp"
    STRICT = "strict"


@dataclass(frozen=True, slots=True)
class FormatPolicy:
    """Limits a format descriptor must satisfy before decoding."""

    max_channel_count: int = MAX_CHANNEL_COUNT
    max_bits_per_sample: int = MAX_BITS_PER_SAMPLE
    companded_encodings: frozenset[EncodingKind] = COMPANDED_ENCODINGS


@dataclass(frozen=True, slots=True)
class DecodePolicy:
    """Decoder behavior for malformed or ambiguous payloads."""

    truncation: TruncationMode = TruncationMode.CLAMP
    detect_8bit_signedness: bool = True
    format_policy: FormatPolicy = FormatPolicy()


@dataclass(frozen=True, slots=True)
class RenderPolicy:
    """Scaling parameters for the rendering surface."""

    headroom: float = DEFAULT_HEADROOM


DEFAULT_FORMAT_POLICY = FormatPolicy()
DEFAULT_DECODE_POLICY = DecodePolicy()
DEFAULT_RENDER_POLICY = RenderPolicy()
