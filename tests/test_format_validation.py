from __future__ import annotations

import pytest

from conftest import make_descriptor
from pcm_waveform.domain.policies import FormatPolicy
from pcm_waveform.format_contract import ByteOrder, EncodingKind
from pcm_waveform.format_validation import (
    UnsupportedFormatError,
    format_rejection_reason,
    validate_format,
)


@pytest.mark.parametrize("channels", [1, 2])
@pytest.mark.parametrize("bits", [8, 16, 24])
def test_validate_accepts_mono_and_stereo_linear_pcm(channels: int, bits: int) -> None:
    descriptor = make_descriptor(channel_count=channels, bits_per_sample=bits)

    assert validate_format(descriptor) is descriptor
    assert format_rejection_reason(descriptor) is None


def test_validate_accepts_unsigned_8bit() -> None:
    descriptor = make_descriptor(bits_per_sample=8, encoding=EncodingKind.PCM_UNSIGNED)

    assert format_rejection_reason(descriptor) is None


def test_validate_rejects_three_channels_regardless_of_other_fields() -> None:
    descriptor = make_descriptor(channel_count=3, bits_per_sample=32, encoding=EncodingKind.ULAW)

    with pytest.raises(UnsupportedFormatError) as exc:
        validate_format(descriptor)

    assert exc.value.reason == "channels"


def test_validate_rejects_zero_channels() -> None:
    assert format_rejection_reason(make_descriptor(channel_count=0)) == "channels"


def test_validate_rejects_32bit_regardless_of_encoding() -> None:
    for encoding in (EncodingKind.PCM_SIGNED, EncodingKind.PCM_FLOAT):
        descriptor = make_descriptor(bits_per_sample=32, encoding=encoding, byte_order=ByteOrder.BIG)
        assert format_rejection_reason(descriptor) == "depth"


@pytest.mark.parametrize("encoding", [EncodingKind.ULAW, EncodingKind.ALAW])
def test_validate_rejects_companded_8bit(encoding: EncodingKind) -> None:
    descriptor = make_descriptor(bits_per_sample=8, encoding=encoding)

    with pytest.raises(UnsupportedFormatError) as exc:
        validate_format(descriptor)

    assert exc.value.reason == "encoding"
    assert exc.value.as_dict()["code"] == "unsupported_format"
    assert encoding.value in str(exc.value)


def test_validate_rejects_depth_without_decode_path() -> None:
    assert format_rejection_reason(make_descriptor(bits_per_sample=12)) == "depth"


def test_validate_rejects_float_encoding_within_supported_depth() -> None:
    descriptor = make_descriptor(bits_per_sample=24, encoding=EncodingKind.PCM_FLOAT)

    assert format_rejection_reason(descriptor) == "encoding"


def test_validate_honors_custom_policy() -> None:
    policy = FormatPolicy(max_channel_count=1, max_bits_per_sample=16)

    assert format_rejection_reason(make_descriptor(channel_count=2), policy) == "channels"
    assert format_rejection_reason(make_descriptor(bits_per_sample=24), policy) == "depth"


def test_frame_size_matches_channels_times_bytes_per_sample() -> None:
    assert make_descriptor(channel_count=2, bits_per_sample=24).frame_size_bytes == 6
    assert make_descriptor(channel_count=1, bits_per_sample=8).frame_size_bytes == 1
    assert make_descriptor(channel_count=2, bits_per_sample=12).frame_size_bytes == 4
