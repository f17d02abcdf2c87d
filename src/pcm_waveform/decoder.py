"""Interleaved linear PCM decoding into per-channel integer samples."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

from pcm_waveform.domain.models import AudioSampleSet, BitDepth, FormatDescriptor
from pcm_waveform.domain.policies import DEFAULT_DECODE_POLICY, DecodePolicy, TruncationMode
from pcm_waveform.format_contract import ByteOrder
from pcm_waveform.format_validation import validate_format
from pcm_waveform.statistics import SampleStatistics

logger = logging.getLogger(__name__)

PCMBuffer = Union[bytes, bytearray, memoryview]

_SIGN_BIT_24 = 0x800000


@dataclass(frozen=True, slots=True)
class TruncatedBufferError(ValueError):
    buffer_length: int
    frame_size_bytes: int

    @property
    def trailing_bytes(self) -> int:
        return self.buffer_length % self.frame_size_bytes

    def __str__(self) -> str:
        return (
            f"PCM buffer of {self.buffer_length} bytes ends with a partial frame "
            f"({self.trailing_bytes} of {self.frame_size_bytes} bytes)."
        )

    def as_dict(self) -> dict[str, str]:
        return {"code": "truncated_buffer", "message": str(self)}


def is_8bit_unsigned(raw: np.ndarray) -> bool:
    """Guess whether 8-bit samples are already offset-free.

    Containers often mislabel the signedness of 8-bit PCM. A byte that reads
    negative as signed 8-bit (above 127 unsigned) marks the stream as one that
    needs the 128 offset flipped before samples are read as signed values.
    """

    return not bool(np.any(raw & 0x80))


def ensure_8bit_unsigned(raw: np.ndarray) -> np.ndarray:
    """Flip the 128 offset of every byte when the stream needs it."""

    if is_8bit_unsigned(raw):
        return raw
    return raw + np.uint8(128)


def _decode_8bit(raw: np.ndarray, descriptor: FormatDescriptor, policy: DecodePolicy) -> np.ndarray:
    if policy.detect_8bit_signedness:
        raw = ensure_8bit_unsigned(raw)
    return raw.view(np.int8).astype(np.int32)


def _decode_16bit(raw: np.ndarray, descriptor: FormatDescriptor, policy: DecodePolicy) -> np.ndarray:
    # Low byte first for every stream; readers hand over 16-bit payloads in that order.
    return raw.view("<i2").astype(np.int32)


def _decode_24bit(raw: np.ndarray, descriptor: FormatDescriptor, policy: DecodePolicy) -> np.ndarray:
    triplets = raw.reshape(-1, 3).astype(np.int32)
    if descriptor.byte_order == ByteOrder.BIG:
        words = (triplets[:, 0] << 16) | (triplets[:, 1] << 8) | triplets[:, 2]
    else:
        words = (triplets[:, 2] << 16) | (triplets[:, 1] << 8) | triplets[:, 0]
    return words - ((words & _SIGN_BIT_24) << 1)


_DECODERS: dict[BitDepth, Callable[[np.ndarray, FormatDescriptor, DecodePolicy], np.ndarray]] = {
    BitDepth.EIGHT: _decode_8bit,
    BitDepth.SIXTEEN: _decode_16bit,
    BitDepth.TWENTY_FOUR: _decode_24bit,
}


def _whole_frame_length(buffer_length: int, descriptor: FormatDescriptor, policy: DecodePolicy) -> int:
    frame_size = descriptor.frame_size_bytes
    usable = (buffer_length // frame_size) * frame_size
    if usable != buffer_length:
        if policy.truncation == TruncationMode.STRICT:
            raise TruncatedBufferError(buffer_length, frame_size)
        logger.warning(
            "Dropping trailing partial PCM frame",
            extra={
                "buffer_length": buffer_length,
                "frame_size_bytes": frame_size,
                "dropped_bytes": buffer_length - usable,
            },
        )
    return usable


def decode_pcm(
    buffer: PCMBuffer,
    descriptor: FormatDescriptor,
    policy: DecodePolicy = DEFAULT_DECODE_POLICY,
) -> AudioSampleSet:
    """Decode an interleaved PCM buffer into an :class:`AudioSampleSet`.

    The descriptor is validated first so unsupported shapes fail before any
    output is allocated. Frames are read in stream order with channel 0 first;
    a trailing partial frame is dropped or rejected according to
    ``policy.truncation``.
    """

    validate_format(descriptor, policy.format_policy)
    decode = _DECODERS[BitDepth.from_bits(descriptor.bits_per_sample)]

    usable = _whole_frame_length(len(memoryview(buffer).cast("B")), descriptor, policy)
    if usable:
        raw = np.frombuffer(buffer, dtype=np.uint8, count=usable)
    else:
        raw = np.zeros(0, dtype=np.uint8)
    frame_count = usable // descriptor.frame_size_bytes

    samples = decode(raw, descriptor, policy).reshape(frame_count, descriptor.channel_count)
    statistics = SampleStatistics().observe(samples)

    channels = []
    for index in range(descriptor.channel_count):
        channel = np.ascontiguousarray(samples[:, index])
        channel.setflags(write=False)
        channels.append(channel)

    logger.debug(
        "Decoded PCM buffer",
        extra={
            "frame_count": frame_count,
            "channel_count": descriptor.channel_count,
            "bits_per_sample": descriptor.bits_per_sample,
            **statistics.as_dict(),
        },
    )
    return AudioSampleSet(descriptor=descriptor, channels=tuple(channels), statistics=statistics)
