"""Domain models for PCM format description and decoded sample sets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import numpy as np

from pcm_waveform.format_contract import COMPANDED_ENCODINGS, ByteOrder, EncodingKind
from pcm_waveform.statistics import SampleStatistics


class BitDepth(IntEnum):
    """Decodable sample widths; each selects one decode path."""

    EIGHT = 8
    SIXTEEN = 16
    TWENTY_FOUR = 24

    @classmethod
    def from_bits(cls, bits_per_sample: int) -> BitDepth:
        try:
            return cls(bits_per_sample)
        except ValueError as exc:
            raise ValueError(f"No decode path for {bits_per_sample}-bit samples.") from exc


@dataclass(frozen=True, slots=True)
class FormatDescriptor:
    """Immutable shape of an audio stream as announced by its container."""

    channel_count: int
    bits_per_sample: int
    byte_order: ByteOrder
    encoding: EncodingKind
    sample_rate: float
    frame_rate: float
    frame_count: int | None = None

    @property
    def bytes_per_sample(self) -> int:
        return (self.bits_per_sample + 7) // 8

    @property
    def frame_size_bytes(self) -> int:
        return self.channel_count * self.bytes_per_sample

    @property
    def is_big_endian(self) -> bool:
        return self.byte_order == ByteOrder.BIG

    @property
    def is_companded(self) -> bool:
        return self.encoding in COMPANDED_ENCODINGS

    @property
    def duration_seconds(self) -> float | None:
        if self.frame_count is None or not self.frame_rate:
            return None
        return self.frame_count / self.frame_rate

    def as_dict(self) -> dict[str, Any]:
        return {
            "encoding": self.encoding.value,
            "bits_per_sample": self.bits_per_sample,
            "channel_count": self.channel_count,
            "sample_rate": self.sample_rate,
            "frame_rate": self.frame_rate,
            "frame_size_bytes": self.frame_size_bytes,
            "frame_count": self.frame_count,
            "big_endian": self.is_big_endian,
        }


@dataclass(frozen=True, slots=True)
class AudioSampleSet:
    """Per-channel integer samples and extrema produced by one decode."""

    descriptor: FormatDescriptor
    channels: tuple[np.ndarray, ...]
    statistics: SampleStatistics

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def frame_count(self) -> int:
        return int(self.channels[0].shape[0]) if self.channels else 0

    @property
    def sample_min(self) -> int:
        return self.statistics.sample_min

    @property
    def sample_max(self) -> int:
        return self.statistics.sample_max

    @property
    def biggest_sample(self) -> float:
        return self.statistics.biggest_sample

    @property
    def duration_seconds(self) -> float:
        if not self.descriptor.frame_rate:
            return 0.0
        return self.frame_count / self.descriptor.frame_rate

    def channel(self, index: int) -> np.ndarray:
        """Return the samples of one channel. Index 0 is valid for mono and stereo."""

        if not 0 <= index < len(self.channels):
            raise IndexError(f"Channel {index} out of range for {len(self.channels)}-channel audio.")
        return self.channels[index]

    def summary(self) -> dict[str, Any]:
        summary = self.descriptor.as_dict()
        summary.update(
            {
                "frame_count": self.frame_count,
                "sample_min": self.sample_min,
                "sample_max": self.sample_max,
                "biggest_sample": self.biggest_sample,
                "duration_seconds": self.duration_seconds,
            }
        )
        return summary
