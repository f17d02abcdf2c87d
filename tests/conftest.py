from __future__ import annotations

import io
import struct
import wave
from pathlib import Path

import numpy as np
import pytest

from pcm_waveform.domain.models import FormatDescriptor
from pcm_waveform.format_contract import ByteOrder, EncodingKind


def make_descriptor(**overrides) -> FormatDescriptor:
    values = {
        "channel_count": 1,
        "bits_per_sample": 16,
        "byte_order": ByteOrder.LITTLE,
        "encoding": EncodingKind.PCM_SIGNED,
        "sample_rate": 44_100.0,
        "frame_rate": 44_100.0,
    }
    values.update(overrides)
    return FormatDescriptor(**values)


def make_wav_bytes(*, frames: bytes, channels: int = 1, sample_width: int = 2, sample_rate: int = 8_000) -> bytes:
    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(channels)
            wav.setsampwidth(sample_width)
            wav.setframerate(sample_rate)
            wav.writeframes(frames)
        return buffer.getvalue()


def make_riff_bytes(
    *,
    format_code: int,
    channels: int,
    bits: int,
    data: bytes,
    sample_rate: int = 8_000,
    big_endian: bool = False,
) -> bytes:
    endian = ">" if big_endian else "<"
    block_align = channels * ((bits + 7) // 8)
    fmt = struct.pack(endian + "HHIIHH", format_code, channels, sample_rate, sample_rate * block_align, block_align, bits)
    body = b"WAVE"
    body += b"fmt " + struct.pack(endian + "I", len(fmt)) + fmt
    body += b"data" + struct.pack(endian + "I", len(data)) + data + (b"\x00" if len(data) % 2 else b"")
    magic = b"RIFX" if big_endian else b"RIFF"
    return magic + struct.pack(endian + "I", len(body)) + body


def extended_bytes(rate: int) -> bytes:
    exponent = rate.bit_length() - 1
    mantissa = rate << (63 - exponent)
    return (exponent + 16383).to_bytes(2, "big") + mantissa.to_bytes(8, "big")


def make_aiff_bytes(
    *,
    channels: int,
    bits: int,
    data: bytes,
    sample_rate: int = 44_100,
    compression: bytes | None = None,
) -> bytes:
    frame_size = channels * ((bits + 7) // 8)
    frames = len(data) // frame_size
    comm = struct.pack(">hIh", channels, frames, bits) + extended_bytes(sample_rate)
    if compression is not None:
        comm += compression + b"\x00\x00"
    ssnd = struct.pack(">II", 0, 0) + data
    body = b"AIFC" if compression is not None else b"AIFF"
    body += b"COMM" + struct.pack(">I", len(comm)) + comm
    body += b"SSND" + struct.pack(">I", len(ssnd)) + ssnd + (b"\x00" if len(ssnd) % 2 else b"")
    return b"FORM" + struct.pack(">I", len(body)) + body


@pytest.fixture
def stereo_wav(tmp_path: Path) -> Path:
    frames = np.array([[1000, -1000], [2000, -2500], [0, 300]], dtype="<i2").tobytes()
    path = tmp_path / "stereo.wav"
    path.write_bytes(make_wav_bytes(frames=frames, channels=2))
    return path


@pytest.fixture
def three_channel_wav(tmp_path: Path) -> Path:
    path = tmp_path / "surround.wav"
    path.write_bytes(make_wav_bytes(frames=b"\x00\x00" * 3 * 4, channels=3))
    return path
