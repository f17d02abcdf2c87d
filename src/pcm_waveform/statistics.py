"""Running sample extrema tracked while decoding."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class SampleStatistics:
    """Extrema observed across every channel of a decoded stream.

    Both extrema start at zero, so ``sample_min <= 0 <= sample_max`` always
    holds. The accumulator is never mutated; :meth:`observe` returns a new one.
    """

    sample_min: int = 0
    sample_max: int = 0

    def observe(self, samples: np.ndarray) -> SampleStatistics:
        """Return the accumulator updated with the extrema of ``samples``."""

        if samples.size == 0:
            return self

        block_min = int(samples.min())
        block_max = int(samples.max())
        return SampleStatistics(
            sample_min=block_min if block_min < self.sample_min else self.sample_min,
            sample_max=block_max if block_max > self.sample_max else self.sample_max,
        )

    @property
    def biggest_sample(self) -> float:
        """Normalization reference: the maximum unless it does not exceed the minimum."""

        if self.sample_max > self.sample_min:
            return float(self.sample_max)
        return float(abs(self.sample_min))

    def as_dict(self) -> dict[str, float]:
        return {
            "sample_min": self.sample_min,
            "sample_max": self.sample_max,
            "biggest_sample": self.biggest_sample,
        }
