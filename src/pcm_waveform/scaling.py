"""Viewport scaling for waveform rendering.

The rendering surface supplies a pixel width and height; these helpers turn a
decoded :class:`AudioSampleSet` into horizontal and vertical scale factors, a
decimation stride, and the polyline the surface draws for one channel.
"""

from __future__ import annotations

from dataclasses import dataclass

from pcm_waveform.domain.models import AudioSampleSet
from pcm_waveform.domain.policies import DEFAULT_RENDER_POLICY, RenderPolicy
from pcm_waveform.format_contract import DEFAULT_HEADROOM


class DegenerateSampleSetError(ValueError):
    """Raised when a sample set cannot be scaled to a viewport."""

    def as_dict(self) -> dict[str, str]:
        return {"code": "degenerate_sample_set", "message": str(self)}


@dataclass(frozen=True, slots=True)
class ScaleFactors:
    x_scale: float
    y_scale: float
    increment: int


def _channel_length(sample_set: AudioSampleSet) -> int:
    length = sample_set.frame_count
    if length == 0:
        raise DegenerateSampleSetError("Sample set has no decoded frames.")
    return length


def x_scale_factor(sample_set: AudioSampleSet, viewport_width: int) -> float:
    """Pixels per sample along the horizontal axis."""

    return viewport_width / float(_channel_length(sample_set))


def y_scale_factor(
    sample_set: AudioSampleSet, viewport_height: int, headroom: float = DEFAULT_HEADROOM
) -> float:
    """Pixels per sample unit, leaving ``headroom`` above the biggest sample."""

    biggest = sample_set.biggest_sample
    if biggest == 0:
        raise DegenerateSampleSetError("Sample set is silent; no vertical scale exists.")
    return viewport_height / (biggest * 2 * headroom)


def decimation_increment(sample_set: AudioSampleSet, x_scale: float) -> int:
    """Number of samples advanced per rendered point, rounded toward zero."""

    length = _channel_length(sample_set)
    if x_scale <= 0:
        raise DegenerateSampleSetError(f"Horizontal scale must be positive, got {x_scale}.")
    return int(length / (length * x_scale))


def compute_scale(
    sample_set: AudioSampleSet,
    viewport_width: int,
    viewport_height: int,
    policy: RenderPolicy = DEFAULT_RENDER_POLICY,
) -> ScaleFactors:
    x_scale = x_scale_factor(sample_set, viewport_width)
    return ScaleFactors(
        x_scale=x_scale,
        y_scale=y_scale_factor(sample_set, viewport_height, policy.headroom),
        increment=decimation_increment(sample_set, x_scale),
    )


def waveform_points(
    sample_set: AudioSampleSet,
    channel_index: int,
    viewport_width: int,
    viewport_height: int,
    policy: RenderPolicy = DEFAULT_RENDER_POLICY,
) -> list[tuple[int, int]]:
    """Polyline for one channel, starting on the center line at x=0.

    One point is emitted every ``increment`` samples; when the viewport is
    wider than the channel the stride is one sample.
    """

    samples = sample_set.channel(channel_index)
    scale = compute_scale(sample_set, viewport_width, viewport_height, policy)
    step = max(scale.increment, 1)
    center = viewport_height // 2

    points = [(0, center)]
    for x_index, sample in enumerate(samples[step::step].tolist(), start=1):
        points.append((x_index, int(center - sample * scale.y_scale)))
    return points
