"""Format descriptor validation.

This module rejects stream shapes the decoder cannot handle. It only inspects
the descriptor, so it runs before any PCM payload is read from the container.
"""

from __future__ import annotations

from dataclasses import dataclass

from pcm_waveform.domain.models import FormatDescriptor
from pcm_waveform.domain.policies import DEFAULT_FORMAT_POLICY, FormatPolicy
from pcm_waveform.format_contract import LINEAR_INTEGER_ENCODINGS, SUPPORTED_BITS_PER_SAMPLE

REASON_CHANNELS = "channels"
REASON_DEPTH = "depth"
REASON_ENCODING = "encoding"


@dataclass(frozen=True, slots=True)
class UnsupportedFormatError(ValueError):
    reason: str
    message: str

    def __str__(self) -> str:
        return self.message

    def as_dict(self) -> dict[str, str]:
        return {"code": "unsupported_format", "reason": self.reason, "message": self.message}


def format_rejection(
    descriptor: FormatDescriptor, policy: FormatPolicy = DEFAULT_FORMAT_POLICY
) -> UnsupportedFormatError | None:
    """Return the first rule the descriptor violates, or ``None`` when it is decodable."""

    if descriptor.channel_count > policy.max_channel_count or descriptor.channel_count < 1:
        return UnsupportedFormatError(
            REASON_CHANNELS,
            f"Only mono or stereo audio is supported (got {descriptor.channel_count} channels).",
        )
    if descriptor.bits_per_sample > policy.max_bits_per_sample:
        return UnsupportedFormatError(
            REASON_DEPTH,
            f"Audio deeper than {policy.max_bits_per_sample} bits per sample is not supported.",
        )
    if descriptor.bits_per_sample == 8 and descriptor.encoding in policy.companded_encodings:
        return UnsupportedFormatError(
            REASON_ENCODING,
            f"{descriptor.encoding.value} encoding is not supported.",
        )
    if descriptor.bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
        return UnsupportedFormatError(
            REASON_DEPTH,
            f"{descriptor.bits_per_sample}-bit samples are not supported.",
        )
    if descriptor.encoding not in LINEAR_INTEGER_ENCODINGS:
        return UnsupportedFormatError(
            REASON_ENCODING,
            f"{descriptor.encoding.value} encoding is not supported; only linear integer PCM is decoded.",
        )
    return None


def format_rejection_reason(
    descriptor: FormatDescriptor, policy: FormatPolicy = DEFAULT_FORMAT_POLICY
) -> str | None:
    rejection = format_rejection(descriptor, policy)
    return rejection.reason if rejection else None


def validate_format(
    descriptor: FormatDescriptor, policy: FormatPolicy = DEFAULT_FORMAT_POLICY
) -> FormatDescriptor:
    rejection = format_rejection(descriptor, policy)
    if rejection is not None:
        raise rejection
    return descriptor
