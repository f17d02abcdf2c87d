"""PCM format contract shared by readers, validation and decoding.

Invariants
----------
* Only mono and stereo linear integer PCM at 8, 16 or 24 bits is decoded.
* Companded 8-bit encodings (A-law, mu-law) are never decoded.
* 16-bit payloads reach the decoder in low-byte-first order.
"""

from __future__ import annotations

from enum import Enum


class ByteOrder(str, Enum):
    """Byte order of multi-byte samples in a PCM payload."""

    LITTLE = "little"
    BIG = "big"


class EncodingKind(str, Enum):
    """Sample encodings a container can announce."""

    PCM_SIGNED = "PCM_SIGNED"
    PCM_UNSIGNED = "PCM_UNSIGNED"
    PCM_FLOAT = "PCM_FLOAT"
    ULAW = "ULAW"
    ALAW = "ALAW"


SUPPORTED_BITS_PER_SAMPLE: tuple[int, ...] = (8, 16, 24)
MAX_CHANNEL_COUNT = 2
MAX_BITS_PER_SAMPLE = 24

COMPANDED_ENCODINGS: frozenset[EncodingKind] = frozenset({EncodingKind.ULAW, EncodingKind.ALAW})
LINEAR_INTEGER_ENCODINGS: frozenset[EncodingKind] = frozenset(
    {EncodingKind.PCM_SIGNED, EncodingKind.PCM_UNSIGNED}
)

# Vertical headroom reserved above the peak when scaling a waveform.
DEFAULT_HEADROOM = 1.2

# Container extensions handled by the native chunk parser (lower-case, with leading dot).
NATIVE_CONTAINER_EXTENSIONS: tuple[str, ...] = (".wav", ".wave", ".aif", ".aiff", ".aifc")
