"""Domain layer: format descriptors, sample sets, policies and events."""

from .events import DomainEvent, FormatValidated, SampleLoadFailed, SampleSetDecoded
from .models import AudioSampleSet, BitDepth, FormatDescriptor
from .policies import (
    DEFAULT_DECODE_POLICY,
    DEFAULT_FORMAT_POLICY,
    DEFAULT_RENDER_POLICY,
    DecodePolicy,
    FormatPolicy,
    RenderPolicy,
    TruncationMode,
)

__all__ = [
    "DomainEvent",
    "FormatValidated",
    "SampleSetDecoded",
    "SampleLoadFailed",
    "AudioSampleSet",
    "BitDepth",
    "FormatDescriptor",
    "FormatPolicy",
    "DecodePolicy",
    "RenderPolicy",
    "TruncationMode",
    "DEFAULT_FORMAT_POLICY",
    "DEFAULT_DECODE_POLICY",
    "DEFAULT_RENDER_POLICY",
]
