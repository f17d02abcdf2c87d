from __future__ import annotations

import logging

import numpy as np
import pytest

from conftest import make_descriptor
from pcm_waveform.decoder import TruncatedBufferError, decode_pcm, ensure_8bit_unsigned, is_8bit_unsigned
from pcm_waveform.domain.policies import DecodePolicy, TruncationMode
from pcm_waveform.format_contract import ByteOrder, EncodingKind
from pcm_waveform.format_validation import UnsupportedFormatError


def _samples(buffer: bytes, **descriptor_fields) -> list[list[int]]:
    sample_set = decode_pcm(buffer, make_descriptor(**descriptor_fields))
    return [channel.tolist() for channel in sample_set.channels]


def test_16bit_extremes_are_low_byte_first() -> None:
    assert _samples(bytes([0xFF, 0x7F])) == [[32767]]
    assert _samples(bytes([0x00, 0x80])) == [[-32768]]


def test_16bit_ignores_big_endian_flag() -> None:
    assert _samples(bytes([0xFF, 0x7F]), byte_order=ByteOrder.BIG) == [[32767]]


def test_16bit_stereo_channels_have_equal_length_and_range() -> None:
    buffer = np.random.default_rng(7).integers(0, 256, size=4_000, dtype=np.uint8).tobytes()

    sample_set = decode_pcm(buffer, make_descriptor(channel_count=2))

    assert sample_set.channel_count == 2
    assert sample_set.frame_count == 1_000
    for channel in sample_set.channels:
        assert channel.shape == (1_000,)
        assert channel.min() >= -32768
        assert channel.max() <= 32767


def test_16bit_stereo_deinterleaves_channel_zero_first() -> None:
    buffer = np.array([1, -1, 2, -2, 3, -3], dtype="<i2").tobytes()

    assert _samples(buffer, channel_count=2) == [[1, 2, 3], [-1, -2, -3]]


def test_24bit_big_endian_sign_extension() -> None:
    assert _samples(bytes([0x7F, 0xFF, 0xFF]), bits_per_sample=24, byte_order=ByteOrder.BIG) == [[8388607]]
    assert _samples(bytes([0xFF, 0x00, 0x00]), bits_per_sample=24, byte_order=ByteOrder.BIG) == [[-65536]]
    assert _samples(bytes([0x80, 0x00, 0x00]), bits_per_sample=24, byte_order=ByteOrder.BIG) == [[-8388608]]


def test_24bit_little_endian_sign_extension() -> None:
    assert _samples(bytes([0xFF, 0xFF, 0x7F]), bits_per_sample=24) == [[8388607]]
    assert _samples(bytes([0x00, 0x00, 0x80]), bits_per_sample=24) == [[-8388608]]
    assert _samples(bytes([0xFF, 0xFF, 0xFF]), bits_per_sample=24) == [[-1]]


def test_24bit_stereo_deinterleaves() -> None:
    buffer = bytes([0x01, 0x00, 0x00, 0xFF, 0xFF, 0xFF, 0x02, 0x00, 0x00, 0xFE, 0xFF, 0xFF])

    assert _samples(buffer, channel_count=2, bits_per_sample=24) == [[1, 2], [-1, -2]]


def test_8bit_offset_stream_is_flipped_to_signed() -> None:
    buffer = bytes([0x80, 0x81, 0x7F, 0x00])

    assert _samples(buffer, bits_per_sample=8, encoding=EncodingKind.PCM_UNSIGNED) == [[0, 1, -1, -128]]


def test_8bit_stream_without_high_bytes_is_used_as_is() -> None:
    buffer = bytes([0x00, 0x10, 0x7F])

    assert _samples(buffer, bits_per_sample=8) == [[0, 16, 127]]


def test_8bit_signedness_detection_can_be_disabled() -> None:
    policy = DecodePolicy(detect_8bit_signedness=False)

    sample_set = decode_pcm(bytes([0x80, 0x01]), make_descriptor(bits_per_sample=8), policy)

    assert sample_set.channels[0].tolist() == [-128, 1]


def test_8bit_stereo_deinterleaves() -> None:
    assert _samples(bytes([0x10, 0x20, 0x11, 0x21]), channel_count=2, bits_per_sample=8) == [[16, 17], [32, 33]]


def test_8bit_helpers() -> None:
    flat = np.array([0, 5, 127], dtype=np.uint8)
    offset = np.array([0x80, 0xFF], dtype=np.uint8)

    assert is_8bit_unsigned(flat)
    assert not is_8bit_unsigned(offset)
    assert ensure_8bit_unsigned(flat) is flat
    assert ensure_8bit_unsigned(offset).tolist() == [0x00, 0x7F]


@pytest.mark.parametrize("bits", [8, 16, 24])
def test_all_zero_buffer_has_zero_statistics(bits: int) -> None:
    sample_set = decode_pcm(bytes(2 * 3 * 10), make_descriptor(channel_count=2, bits_per_sample=bits))

    assert sample_set.sample_min == 0
    assert sample_set.sample_max == 0
    assert sample_set.biggest_sample == 0.0


def test_statistics_span_all_channels() -> None:
    buffer = np.array([100, -5, 7, -200], dtype="<i2").tobytes()

    sample_set = decode_pcm(buffer, make_descriptor(channel_count=2))

    assert sample_set.sample_min == -200
    assert sample_set.sample_max == 100
    assert sample_set.biggest_sample == 100.0
    assert isinstance(sample_set.biggest_sample, float)


def test_partial_frame_is_clamped_by_default(caplog) -> None:
    buffer = bytes(4 * 3 - 1)

    with caplog.at_level(logging.WARNING, logger="pcm_waveform.decoder"):
        sample_set = decode_pcm(buffer, make_descriptor(channel_count=2))

    assert sample_set.frame_count == len(buffer) // 4
    assert "partial PCM frame" in caplog.text


def test_partial_8bit_stereo_frame_is_clamped() -> None:
    sample_set = decode_pcm(bytes([1, 2, 3, 4, 5]), make_descriptor(channel_count=2, bits_per_sample=8))

    assert sample_set.frame_count == 2
    assert [channel.tolist() for channel in sample_set.channels] == [[1, 3], [2, 4]]


def test_partial_frame_rejected_in_strict_mode() -> None:
    policy = DecodePolicy(truncation=TruncationMode.STRICT)

    with pytest.raises(TruncatedBufferError) as exc:
        decode_pcm(bytes(7), make_descriptor(channel_count=2, bits_per_sample=24), policy)

    assert exc.value.trailing_bytes == 1
    assert exc.value.as_dict()["code"] == "truncated_buffer"


def test_unsupported_descriptor_fails_before_decoding() -> None:
    with pytest.raises(UnsupportedFormatError) as exc:
        decode_pcm(bytes(12), make_descriptor(channel_count=3))

    assert exc.value.reason == "channels"


def test_decoding_is_idempotent() -> None:
    buffer = np.random.default_rng(3).integers(0, 256, size=600, dtype=np.uint8).tobytes()
    descriptor = make_descriptor(channel_count=2, bits_per_sample=24, byte_order=ByteOrder.BIG)

    first = decode_pcm(buffer, descriptor)
    second = decode_pcm(buffer, descriptor)

    assert first.statistics == second.statistics
    for left, right in zip(first.channels, second.channels):
        assert np.array_equal(left, right)


def test_sample_set_is_read_only() -> None:
    sample_set = decode_pcm(bytes(4), make_descriptor())

    with pytest.raises(ValueError):
        sample_set.channels[0][0] = 1


def test_accepts_bytearray_and_memoryview() -> None:
    payload = bytes([0xFF, 0x7F, 0x00, 0x80])

    from_bytearray = decode_pcm(bytearray(payload), make_descriptor())
    from_view = decode_pcm(memoryview(payload), make_descriptor())

    assert from_bytearray.channels[0].tolist() == [32767, -32768]
    assert from_view.channels[0].tolist() == [32767, -32768]


def test_empty_buffer_decodes_to_empty_channels() -> None:
    sample_set = decode_pcm(b"", make_descriptor(channel_count=2))

    assert sample_set.frame_count == 0
    assert [channel.size for channel in sample_set.channels] == [0, 0]
    assert sample_set.biggest_sample == 0.0


def test_summary_reports_duration_from_decoded_frames() -> None:
    sample_set = decode_pcm(bytes(2 * 44_100), make_descriptor())

    summary = sample_set.summary()

    assert summary["frame_count"] == 44_100
    assert summary["duration_seconds"] == pytest.approx(1.0)
    assert summary["encoding"] == "PCM_SIGNED"
    assert summary["big_endian"] is False
