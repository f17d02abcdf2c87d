import numpy as np

from pcm_waveform.statistics import SampleStatistics


def test_observe_returns_new_accumulator() -> None:
    start = SampleStatistics()

    updated = start.observe(np.array([3, -9, 4]))

    assert start == SampleStatistics(0, 0)
    assert updated == SampleStatistics(sample_min=-9, sample_max=4)


def test_observe_keeps_zero_floor_and_ceiling() -> None:
    stats = SampleStatistics().observe(np.array([5, 10]))

    assert stats.sample_min == 0
    assert stats.sample_max == 10


def test_equal_values_do_not_replace_extrema() -> None:
    stats = SampleStatistics(sample_min=-4, sample_max=4).observe(np.array([-4, 4]))

    assert stats == SampleStatistics(sample_min=-4, sample_max=4)


def test_empty_block_is_ignored() -> None:
    stats = SampleStatistics(sample_min=-1, sample_max=2)

    assert stats.observe(np.array([], dtype=np.int32)) is stats


def test_biggest_sample_prefers_maximum_over_deeper_minimum() -> None:
    assert SampleStatistics(sample_min=-300, sample_max=20).biggest_sample == 20.0
    assert SampleStatistics(sample_min=-3, sample_max=20).biggest_sample == 20.0
    assert SampleStatistics(sample_min=-7, sample_max=-7).biggest_sample == 7.0
    assert SampleStatistics().as_dict() == {"sample_min": 0, "sample_max": 0, "biggest_sample": 0.0}


def test_decoded_negative_peak_does_not_drive_biggest_sample() -> None:
    stats = SampleStatistics().observe(np.array([10, -1000]))

    assert (stats.sample_min, stats.sample_max) == (-1000, 10)
    assert stats.biggest_sample == 10.0
