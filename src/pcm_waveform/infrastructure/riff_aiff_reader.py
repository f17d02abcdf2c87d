"""Native RIFF/WAVE and AIFF/AIFF-C container reader.

Chunk headers are walked with seeks so :meth:`RiffAiffReader.read_format`
never touches the sample payload. The payload itself is only read by
:meth:`RiffAiffReader.read_pcm`.
"""

from __future__ import annotations

import logging
import math
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

import numpy as np

from pcm_waveform.application.container_reader import ReadFailureError
from pcm_waveform.domain.models import FormatDescriptor
from pcm_waveform.format_contract import ByteOrder, EncodingKind

logger = logging.getLogger(__name__)

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_IEEE_FLOAT = 0x0003
WAVE_FORMAT_ALAW = 0x0006
WAVE_FORMAT_MULAW = 0x0007
WAVE_FORMAT_EXTENSIBLE = 0xFFFE

# AIFF-C compression type -> (encoding, byte order, bits override)
_AIFC_COMPRESSION: dict[bytes, tuple[EncodingKind, ByteOrder, int | None]] = {
    b"NONE": (EncodingKind.PCM_SIGNED, ByteOrder.BIG, None),
    b"twos": (EncodingKind.PCM_SIGNED, ByteOrder.BIG, None),
    b"sowt": (EncodingKind.PCM_SIGNED, ByteOrder.LITTLE, None),
    b"raw ": (EncodingKind.PCM_UNSIGNED, ByteOrder.BIG, None),
    b"ulaw": (EncodingKind.ULAW, ByteOrder.BIG, 8),
    b"ULAW": (EncodingKind.ULAW, ByteOrder.BIG, 8),
    b"alaw": (EncodingKind.ALAW, ByteOrder.BIG, 8),
    b"ALAW": (EncodingKind.ALAW, ByteOrder.BIG, 8),
    b"fl32": (EncodingKind.PCM_FLOAT, ByteOrder.BIG, 32),
    b"FL32": (EncodingKind.PCM_FLOAT, ByteOrder.BIG, 32),
    b"fl64": (EncodingKind.PCM_FLOAT, ByteOrder.BIG, 64),
    b"FL64": (EncodingKind.PCM_FLOAT, ByteOrder.BIG, 64),
}


@dataclass(frozen=True, slots=True)
class _ParsedContainer:
    descriptor: FormatDescriptor
    data_offset: int
    data_length: int
    swap_16bit: bool


def recognizes(header: bytes) -> bool:
    """True when the first 12 bytes of a file carry a RIFF/WAVE or AIFF signature."""

    if header[:4] in (b"RIFF", b"RIFX") and header[8:12] == b"WAVE":
        return True
    return header[:4] == b"FORM" and header[8:12] in (b"AIFF", b"AIFC")


def extended_to_float(raw: bytes) -> float:
    """Decode an 80-bit IEEE 754 extended-precision number (AIFF sample rate)."""

    exponent = ((raw[0] & 0x7F) << 8) | raw[1]
    mantissa = int.from_bytes(raw[2:10], "big")
    if exponent == 0 and mantissa == 0:
        return 0.0
    value = math.ldexp(mantissa, exponent - 16383 - 63)
    return -value if raw[0] & 0x80 else value


def _iter_chunks(handle: BinaryIO, size_format: str) -> Iterator[tuple[bytes, int, int]]:
    offset = 12
    while True:
        handle.seek(offset)
        header = handle.read(8)
        if len(header) < 8:
            return
        (chunk_size,) = struct.unpack(size_format, header[4:8])
        yield header[:4], offset + 8, chunk_size
        offset += 8 + chunk_size + (chunk_size % 2)


def _read_body(handle: BinaryIO, start: int, size: int, path: Path) -> bytes:
    handle.seek(start)
    body = handle.read(size)
    if len(body) < size:
        raise ReadFailureError(str(path), "Corrupted chunk structure.")
    return body


def _wave_encoding(audio_format: int, bits: int, path: Path) -> EncodingKind:
    if audio_format == WAVE_FORMAT_PCM:
        return EncodingKind.PCM_UNSIGNED if bits == 8 else EncodingKind.PCM_SIGNED
    if audio_format == WAVE_FORMAT_IEEE_FLOAT:
        return EncodingKind.PCM_FLOAT
    if audio_format == WAVE_FORMAT_ALAW:
        return EncodingKind.ALAW
    if audio_format == WAVE_FORMAT_MULAW:
        return EncodingKind.ULAW
    raise ReadFailureError(str(path), f"Unsupported WAV codec format code: {audio_format}.")


def _parse_wave(handle: BinaryIO, path: Path, byte_order: ByteOrder) -> _ParsedContainer:
    endian = ">" if byte_order == ByteOrder.BIG else "<"
    fmt: tuple[int, int, int, int] | None = None
    data: tuple[int, int] | None = None

    for chunk_id, start, size in _iter_chunks(handle, endian + "I"):
        if chunk_id == b"fmt ":
            if size < 16:
                raise ReadFailureError(str(path), "Corrupted WAV fmt chunk.")
            body = _read_body(handle, start, min(size, 40), path)
            audio_format, channels, sample_rate, _byte_rate, _block_align, bits = struct.unpack(
                endian + "HHIIHH", body[:16]
            )
            if audio_format == WAVE_FORMAT_EXTENSIBLE and len(body) >= 26:
                (audio_format,) = struct.unpack(endian + "H", body[24:26])
            fmt = (audio_format, channels, sample_rate, bits)
        elif chunk_id == b"data":
            data = (start, size)

    if fmt is None or data is None:
        raise ReadFailureError(str(path), "Incomplete WAV metadata.")

    audio_format, channels, sample_rate, bits = fmt
    encoding = _wave_encoding(audio_format, bits, path)
    return _build(path, channels, bits, sample_rate, encoding, byte_order, data)


def _parse_aiff(handle: BinaryIO, path: Path, is_aifc: bool) -> _ParsedContainer:
    comm: tuple[int, int, int, float, bytes] | None = None
    data: tuple[int, int] | None = None

    for chunk_id, start, size in _iter_chunks(handle, ">I"):
        if chunk_id == b"COMM":
            minimum = 22 if is_aifc else 18
            if size < minimum:
                raise ReadFailureError(str(path), "Corrupted AIFF COMM chunk.")
            body = _read_body(handle, start, minimum, path)
            channels, frames, bits = struct.unpack(">hIh", body[:8])
            compression = body[18:22] if is_aifc else b"NONE"
            comm = (channels, frames, bits, extended_to_float(body[8:18]), compression)
        elif chunk_id == b"SSND":
            if size < 8:
                raise ReadFailureError(str(path), "Corrupted AIFF SSND chunk.")
            (data_offset,) = struct.unpack(">I", _read_body(handle, start, 4, path))
            data = (start + 8 + data_offset, max(size - 8 - data_offset, 0))

    if comm is None or data is None:
        raise ReadFailureError(str(path), "Incomplete AIFF metadata.")

    channels, frames, bits, sample_rate, compression = comm
    try:
        encoding, byte_order, bits_override = _AIFC_COMPRESSION[compression]
    except KeyError as exc:
        name = compression.decode("latin-1")
        raise ReadFailureError(str(path), f"Unsupported AIFF-C compression type: {name!r}.") from exc
    if encoding == EncodingKind.PCM_UNSIGNED and (bits_override or bits) > 8:
        raise ReadFailureError(
            str(path), f"Unsigned AIFF-C samples wider than 8 bits are not supported ({bits} bits)."
        )

    parsed = _build(path, channels, bits_override or bits, sample_rate, encoding, byte_order, data)
    if frames and parsed.descriptor.frame_count != frames:
        logger.info(
            "AIFF frame count disagrees with SSND payload",
            extra={"path": str(path), "declared_frames": frames, "payload_frames": parsed.descriptor.frame_count},
        )
    return parsed


def _build(
    path: Path,
    channels: int,
    bits: int,
    sample_rate: float,
    encoding: EncodingKind,
    byte_order: ByteOrder,
    data: tuple[int, int],
) -> _ParsedContainer:
    if channels <= 0 or bits <= 0 or sample_rate <= 0:
        raise ReadFailureError(str(path), "Invalid channel count, bit depth or sample rate.")

    swap_16bit = bits == 16 and byte_order == ByteOrder.BIG
    data_offset, data_length = data
    frame_size = channels * ((bits + 7) // 8)
    descriptor = FormatDescriptor(
        channel_count=channels,
        bits_per_sample=bits,
        byte_order=ByteOrder.LITTLE if swap_16bit else byte_order,
        encoding=encoding,
        sample_rate=float(sample_rate),
        frame_rate=float(sample_rate),
        frame_count=data_length // frame_size,
    )
    return _ParsedContainer(descriptor, data_offset, data_length, swap_16bit)


def _swap_16bit(payload: bytes) -> bytes:
    even = len(payload) - (len(payload) % 2)
    if not even:
        return payload
    swapped = np.frombuffer(payload, dtype=">i2", count=even // 2).astype("<i2").tobytes()
    return swapped + payload[even:]


class RiffAiffReader:
    """Reads WAV (RIFF and RIFX) and AIFF/AIFF-C files without third-party codecs."""

    def _parse(self, path: Path) -> _ParsedContainer:
        try:
            with path.open("rb") as handle:
                header = handle.read(12)
                if header[:4] in (b"RIFF", b"RIFX") and header[8:12] == b"WAVE":
                    byte_order = ByteOrder.BIG if header[:4] == b"RIFX" else ByteOrder.LITTLE
                    return _parse_wave(handle, path, byte_order)
                if header[:4] == b"FORM" and header[8:12] in (b"AIFF", b"AIFC"):
                    return _parse_aiff(handle, path, is_aifc=header[8:12] == b"AIFC")
        except OSError as exc:
            raise ReadFailureError(str(path), "Audio file is unreadable.") from exc
        raise ReadFailureError(str(path), "Unsupported or unrecognized audio container.")

    def read_format(self, path: Path) -> FormatDescriptor:
        return self._parse(path).descriptor

    def read_pcm(self, path: Path) -> bytes:
        parsed = self._parse(path)
        try:
            with path.open("rb") as handle:
                handle.seek(parsed.data_offset)
                payload = handle.read(parsed.data_length)
        except OSError as exc:
            raise ReadFailureError(str(path), "Audio file is unreadable.") from exc

        if len(payload) < parsed.data_length:
            logger.warning(
                "PCM payload shorter than its chunk header declares",
                extra={"path": str(path), "declared_bytes": parsed.data_length, "read_bytes": len(payload)},
            )
        if parsed.swap_16bit:
            payload = _swap_16bit(payload)
        return payload
