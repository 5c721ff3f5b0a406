"""Tests for ideal-curve, sample-point and transform-input generation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from aliaslab.errors import EmptyOutputRequestedError, InvalidFrequencyError
from aliaslab.processing.signal import (
    generate_sample_points,
    generate_signal,
    generate_transform_input,
    sample_count,
)


class TestGenerateSignal:
    def test_zero_points_yields_empty_curve(self) -> None:
        curve = generate_signal(3.0, 0.0, 0)
        assert len(curve) == 0
        assert curve.as_points() == []

    def test_negative_points_rejected(self) -> None:
        with pytest.raises(EmptyOutputRequestedError):
            generate_signal(3.0, 0.0, -1)

    def test_quarter_period_values(self) -> None:
        curve = generate_signal(1.0, 0.0, 4)
        np.testing.assert_allclose(curve.x, [0.0, math.pi / 2, math.pi, 3 * math.pi / 2], atol=1e-6)
        np.testing.assert_allclose(curve.y, [0.0, 1.0, 0.0, -1.0], atol=1e-6)

    def test_axis_stops_short_of_two_pi(self) -> None:
        curve = generate_signal(2.0, 0.0, 100)
        assert float(curve.x[0]) == 0.0
        assert float(curve.x[-1]) < 2 * math.pi

    def test_phase_is_in_units_of_pi(self) -> None:
        curve = generate_signal(1.0, 0.5, 8)
        # sin(x + π/2) == cos(x)
        np.testing.assert_allclose(curve.y, np.cos(curve.x.astype(np.float64)), atol=1e-6)

    def test_amplitude_bounded(self) -> None:
        curve = generate_signal(9.7, 1.3, 1000)
        assert float(np.max(np.abs(curve.y))) <= 1.0

    def test_curve_arrays_are_read_only(self) -> None:
        curve = generate_signal(1.0, 0.0, 4)
        with pytest.raises(ValueError):
            curve.y[0] = 5.0


class TestGenerateSamplePoints:
    @pytest.mark.parametrize(
        ("sampling_hz", "expected"),
        [(10.0, 11), (10.5, 11), (0.5, 1), (20.0, 21), (9.99, 10), (1.0, 2)],
    )
    def test_count_is_floor_plus_one(self, sampling_hz: float, expected: int) -> None:
        assert sample_count(sampling_hz) == expected
        assert len(generate_sample_points(3.0, sampling_hz, 0.0)) == expected

    def test_last_point_at_one_full_period(self) -> None:
        curve = generate_sample_points(3.0, 10.0, 0.0)
        assert float(curve.x[-1]) == pytest.approx(2 * math.pi, rel=1e-6)

    def test_times_use_display_axis(self) -> None:
        curve = generate_sample_points(1.0, 4.0, 0.0)
        np.testing.assert_allclose(
            curve.x, [0.0, math.pi / 2, math.pi, 3 * math.pi / 2, 2 * math.pi], atol=1e-6
        )
        np.testing.assert_allclose(curve.y, [0.0, 1.0, 0.0, -1.0, 0.0], atol=1e-6)

    def test_samples_lie_on_signal(self) -> None:
        curve = generate_sample_points(7.0, 10.0, 0.25)
        expected = np.sin(7.0 * curve.x.astype(np.float64) + 0.25 * math.pi)
        np.testing.assert_allclose(curve.y, expected, atol=1e-5)

    @pytest.mark.parametrize("sampling_hz", [0.0, -1.0, float("nan")])
    def test_invalid_sampling_frequency(self, sampling_hz: float) -> None:
        with pytest.raises(InvalidFrequencyError):
            generate_sample_points(3.0, sampling_hz, 0.0)


class TestGenerateTransformInput:
    def test_length_and_dtype(self) -> None:
        samples = generate_transform_input(3.0, 10.0, 0.0, 200)
        assert samples.shape == (200,)
        assert samples.dtype == np.float32

    def test_physical_sample_times(self) -> None:
        # 2.5 Hz sampled at 10 Hz: a quarter period per sample.
        samples = generate_transform_input(2.5, 10.0, 0.0, 4)
        np.testing.assert_allclose(samples, [0.0, 1.0, 0.0, -1.0], atol=1e-6)

    def test_phase_offset_applied(self) -> None:
        samples = generate_transform_input(3.0, 10.0, 0.5, 1)
        assert float(samples[0]) == pytest.approx(1.0)

    def test_zero_sampling_rejected(self) -> None:
        with pytest.raises(InvalidFrequencyError):
            generate_transform_input(3.0, 0.0, 0.0, 10)
