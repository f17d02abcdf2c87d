"""libsndfile-backed reader for linear PCM containers beyond WAV/AIFF."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import soundfile as sf

from pcm_waveform.application.container_reader import ReadFailureError
from pcm_waveform.domain.models import FormatDescriptor
from pcm_waveform.format_contract import LINEAR_INTEGER_ENCODINGS, ByteOrder, EncodingKind

_SUBTYPES: dict[str, tuple[int, EncodingKind]] = {
    "PCM_S8": (8, EncodingKind.PCM_SIGNED),
    "PCM_U8": (8, EncodingKind.PCM_UNSIGNED),
    "PCM_16": (16, EncodingKind.PCM_SIGNED),
    "PCM_24": (24, EncodingKind.PCM_SIGNED),
    "PCM_32": (32, EncodingKind.PCM_SIGNED),
    "FLOAT": (32, EncodingKind.PCM_FLOAT),
    "DOUBLE": (64, EncodingKind.PCM_FLOAT),
    "ULAW": (8, EncodingKind.ULAW),
    "ALAW": (8, EncodingKind.ALAW),
}

# Containers whose payload is always compressed, whatever subtype libsndfile reports.
_COMPRESSED_FORMATS = frozenset({"FLAC", "OGG", "MPEG"})


def _pack_interleaved(samples: np.ndarray, descriptor: FormatDescriptor) -> bytes:
    """Pack right-aligned integer samples into little-endian PCM bytes."""

    bits = descriptor.bits_per_sample
    if bits == 8 and descriptor.encoding == EncodingKind.PCM_UNSIGNED:
        return (samples + 128).astype(np.uint8).tobytes()
    if bits == 8:
        return samples.astype(np.int8).tobytes()
    if bits == 16:
        return samples.astype("<i2").tobytes()
    if bits == 24:
        return samples.astype("<i4").view(np.uint8).reshape(-1, 4)[:, :3].tobytes()
    return samples.astype("<i4").tobytes()


class SoundFileReader:
    """Exposes libsndfile-readable linear PCM (AU, W64, CAF, RF64, ...) as raw bytes.

    libsndfile always decodes to native integers, so the payload is re-packed
    into interleaved little-endian bytes and the descriptor says so.
    """

    def _info(self, path: Path):
        try:
            return sf.info(str(path))
        except (RuntimeError, OSError) as exc:
            raise ReadFailureError(str(path), "Unsupported or unreadable audio container.") from exc

    def read_format(self, path: Path) -> FormatDescriptor:
        info = self._info(path)
        if info.format in _COMPRESSED_FORMATS:
            raise ReadFailureError(str(path), f"Compressed {info.format} containers are not supported.")
        try:
            bits, encoding = _SUBTYPES[info.subtype]
        except KeyError as exc:
            raise ReadFailureError(
                str(path), f"Compressed or non-PCM codec {info.subtype!r} is not supported."
            ) from exc

        return FormatDescriptor(
            channel_count=int(info.channels),
            bits_per_sample=bits,
            byte_order=ByteOrder.LITTLE,
            encoding=encoding,
            sample_rate=float(info.samplerate),
            frame_rate=float(info.samplerate),
            frame_count=int(info.frames),
        )

    def read_pcm(self, path: Path) -> bytes:
        descriptor = self.read_format(path)
        if descriptor.encoding not in LINEAR_INTEGER_ENCODINGS:
            raise ReadFailureError(
                str(path), f"{descriptor.encoding.value} payloads cannot be exposed as linear PCM."
            )

        try:
            data, _sample_rate = sf.read(str(path), dtype="int32", always_2d=True)
        except (RuntimeError, OSError) as exc:
            raise ReadFailureError(str(path), "Audio payload is unreadable.") from exc

        # libsndfile left-aligns every depth in int32; rows are frames, so ravel() interleaves.
        samples = data.ravel() >> (32 - descriptor.bits_per_sample)
        return _pack_interleaved(samples, descriptor)
