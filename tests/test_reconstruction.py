"""Tests for the spectral synthesis and sinc interpolation paths."""

from __future__ import annotations

import math

import numpy as np
import pytest

from aliaslab.errors import EmptyOutputRequestedError
from aliaslab.models import (
    ReconstructionMethod,
    ReconstructionPolicy,
    Spectrum,
)
from aliaslab.processing.fft import compute_spectrum
from aliaslab.processing.reconstruction import (
    fourier_synthesis,
    full_spectrum_synthesis,
    hann_edge_window,
    output_axis,
    reconstruct,
    rescale_to_unit,
    sinc_interpolation,
    sinc_kernel,
)
from aliaslab.processing.signal import generate_sample_points, generate_transform_input


def _spectrum(signal_hz: float, sampling_hz: float, phase: float = 0.0) -> Spectrum:
    n = int(round(20 * sampling_hz))
    samples = generate_transform_input(signal_hz, sampling_hz, phase, n)
    return Spectrum(fft_size=n, sampling_frequency=sampling_hz, values=compute_spectrum(samples))


class TestOutputAxis:
    def test_zero_points_rejected(self) -> None:
        with pytest.raises(EmptyOutputRequestedError):
            output_axis(0)

    def test_spans_half_open_period(self) -> None:
        x = output_axis(4)
        np.testing.assert_allclose(x, [0.0, math.pi / 2, math.pi, 3 * math.pi / 2])


class TestFourierSynthesis:
    def test_recovers_sinusoid_below_nyquist(self) -> None:
        y = fourier_synthesis(_spectrum(3.0, 10.0), 400)
        x = output_axis(400)
        np.testing.assert_allclose(y, np.sin(3.0 * x), atol=1e-3)

    def test_recovers_phase(self) -> None:
        y = fourier_synthesis(_spectrum(3.0, 10.0, phase=0.5), 400)
        x = output_axis(400)
        np.testing.assert_allclose(y, np.cos(3.0 * x), atol=1e-3)

    def test_aliased_signal_reconstructs_as_alias(self) -> None:
        # 7 Hz sampled at 10 Hz yields exactly the samples of -sin(2π·3t).
        y = fourier_synthesis(_spectrum(7.0, 10.0), 400)
        x = output_axis(400)
        np.testing.assert_allclose(y, -np.sin(3.0 * x), atol=1e-3)

    def test_dc_offset_excluded(self) -> None:
        n = 40
        spectrum = Spectrum(
            fft_size=n,
            sampling_frequency=2.0,
            values=compute_spectrum(np.full(n, 0.75, dtype=np.float32)),
        )
        np.testing.assert_allclose(fourier_synthesis(spectrum, 50), 0.0, atol=1e-4)


class TestFullSpectrumSynthesis:
    def test_matches_fourier_synthesis_for_zero_mean_signal(self) -> None:
        spectrum = _spectrum(3.0, 10.0, phase=0.3)
        np.testing.assert_allclose(
            full_spectrum_synthesis(spectrum, 300),
            fourier_synthesis(spectrum, 300),
            atol=1e-3,
        )

    def test_includes_dc_offset(self) -> None:
        n = 40
        spectrum = Spectrum(
            fft_size=n,
            sampling_frequency=2.0,
            values=compute_spectrum(np.full(n, 0.75, dtype=np.float32)),
        )
        np.testing.assert_allclose(full_spectrum_synthesis(spectrum, 50), 0.75, atol=1e-4)


class TestSincInterpolation:
    def test_kernel_at_zero_is_one(self) -> None:
        assert float(sinc_kernel(np.array([0.0]))[0]) == 1.0

    def test_kernel_zero_crossings(self) -> None:
        out = sinc_kernel(np.array([math.pi, 2 * math.pi, -math.pi]))
        np.testing.assert_allclose(out, 0.0, atol=1e-12)

    def test_passes_through_samples(self) -> None:
        samples = generate_sample_points(3.0, 10.0, 0.0)
        # 20 output points put every other point on a sample time.
        y = sinc_interpolation(samples, 10.0, 20)
        np.testing.assert_allclose(y[::2], samples.y[:10], atol=1e-4)

    def test_edge_window_tapers_first_sample(self) -> None:
        samples = generate_sample_points(3.0, 10.0, 0.5)
        plain = sinc_interpolation(samples, 10.0, 20)
        tapered = sinc_interpolation(samples, 10.0, 20, edge_window=True)
        assert plain[0] == pytest.approx(1.0, abs=1e-4)
        assert tapered[0] == pytest.approx(0.0, abs=1e-4)

    def test_hann_window_short_inputs_are_identity(self) -> None:
        np.testing.assert_array_equal(hann_edge_window(2), [1.0, 1.0])
        assert hann_edge_window(5)[0] == 0.0


class TestRescale:
    def test_maps_to_unit_range(self) -> None:
        np.testing.assert_allclose(rescale_to_unit(np.array([0.0, 1.0, 2.0])), [-1.0, 0.0, 1.0])

    def test_flat_curve_maps_to_zero(self) -> None:
        np.testing.assert_array_equal(rescale_to_unit(np.full(5, 3.0)), np.zeros(5))

    def test_empty_passthrough(self) -> None:
        assert rescale_to_unit(np.array([])).size == 0


class TestReconstructDispatch:
    def test_default_policy_is_unscaled_fourier_synthesis(self) -> None:
        policy = ReconstructionPolicy()
        assert policy.method is ReconstructionMethod.FOURIER_SYNTHESIS
        assert policy.rescale is False
        spectrum = _spectrum(3.0, 10.0)
        curve = reconstruct(policy, 200, spectrum=spectrum)
        np.testing.assert_allclose(curve.y, fourier_synthesis(spectrum, 200), atol=1e-6)

    def test_rescale_fills_unit_range(self) -> None:
        # 3.33 Hz falls between 0.05 Hz bins, so the raw amplitude is not exactly 1.
        spectrum = _spectrum(3.33, 10.0)
        curve = reconstruct(
            ReconstructionPolicy(rescale=True), 500, spectrum=spectrum
        )
        assert float(np.min(curve.y)) == pytest.approx(-1.0, abs=1e-6)
        assert float(np.max(curve.y)) == pytest.approx(1.0, abs=1e-6)

    def test_sinc_requires_samples(self) -> None:
        policy = ReconstructionPolicy(method=ReconstructionMethod.SINC_INTERPOLATION)
        with pytest.raises(ValueError):
            reconstruct(policy, 10, spectrum=_spectrum(3.0, 10.0))

    def test_spectral_requires_spectrum(self) -> None:
        with pytest.raises(ValueError):
            reconstruct(ReconstructionPolicy(), 10)

    def test_zero_points_rejected(self) -> None:
        with pytest.raises(EmptyOutputRequestedError):
            reconstruct(ReconstructionPolicy(), 0, spectrum=_spectrum(3.0, 10.0))

    def test_output_curve_length(self) -> None:
        samples = generate_sample_points(3.0, 10.0, 0.0)
        curve = reconstruct(
            ReconstructionPolicy(method=ReconstructionMethod.SINC_INTERPOLATION),
            123,
            samples=samples,
            sampling_frequency=10.0,
        )
        assert len(curve) == 123
