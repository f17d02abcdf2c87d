"""Public package exports for pcm_waveform with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "AudioSampleSet",
    "BitDepth",
    "FormatDescriptor",
    "ByteOrder",
    "EncodingKind",
    "SampleStatistics",
    "UnsupportedFormatError",
    "validate_format",
    "format_rejection_reason",
    "TruncatedBufferError",
    "decode_pcm",
    "DegenerateSampleSetError",
    "ScaleFactors",
    "compute_scale",
    "decimation_increment",
    "waveform_points",
    "x_scale_factor",
    "y_scale_factor",
    "ReadFailureError",
    "LoadAudioSample",
]

_EXPORT_MODULES: dict[str, str] = {
    "AudioSampleSet": "pcm_waveform.domain.models",
    "BitDepth": "pcm_waveform.domain.models",
    "FormatDescriptor": "pcm_waveform.domain.models",
    "ByteOrder": "pcm_waveform.format_contract",
    "EncodingKind": "pcm_waveform.format_contract",
    "SampleStatistics": "pcm_waveform.statistics",
    "UnsupportedFormatError": "pcm_waveform.format_validation",
    "validate_format": "pcm_waveform.format_validation",
    "format_rejection_reason": "pcm_waveform.format_validation",
    "TruncatedBufferError": "pcm_waveform.decoder",
    "decode_pcm": "pcm_waveform.decoder",
    "DegenerateSampleSetError": "pcm_waveform.scaling",
    "ScaleFactors": "pcm_waveform.scaling",
    "compute_scale": "pcm_waveform.scaling",
    "decimation_increment": "pcm_waveform.scaling",
    "waveform_points": "pcm_waveform.scaling",
    "x_scale_factor": "pcm_waveform.scaling",
    "y_scale_factor": "pcm_waveform.scaling",
    "ReadFailureError": "pcm_waveform.application.container_reader",
    "LoadAudioSample": "pcm_waveform.application.sample_service",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'pcm_waveform' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
