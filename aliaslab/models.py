"""Value objects shared by the engine and its callers.

Replaces ad-hoc tuples with typed dataclasses: parameters, curves, the
complex spectrum and the reconstruction policy.  Arrays held by
:class:`Curve` and :class:`Spectrum` are made read-only on construction so a
value served from a cache cannot be corrupted by the caller that received it.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import numpy as np

from .constants import DEFAULT_DISPLAY_MAX_HZ, MIN_FFT_SIZE
from .errors import DomainError, InvalidFrequencyError, InvalidTransformSizeError


def _readonly(values: Any, dtype: Any) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


def _require_frequency(name: str, value: float) -> float:
    out = float(value)
    if not math.isfinite(out) or out <= 0.0:
        raise InvalidFrequencyError(f"{name} must be a finite value > 0, got {value!r}")
    return out


class SpectralWindow(StrEnum):
    """Window applied to the transform input before the FFT."""

    NONE = "none"
    BLACKMAN_HARRIS = "blackman_harris"


class ReconstructionMethod(StrEnum):
    """Canonical reconstruction algorithms."""

    FOURIER_SYNTHESIS = "fourier_synthesis"
    FULL_SPECTRUM = "full_spectrum"
    SINC_INTERPOLATION = "sinc_interpolation"


@dataclass(frozen=True, slots=True)
class ReconstructionPolicy:
    """Which reconstruction to run and how to post-process it.

    ``rescale`` min-max rescales every reconstruction to ``[-1, 1]``;
    ``edge_window`` applies a Hann taper over sample index and is only
    meaningful for :attr:`ReconstructionMethod.SINC_INTERPOLATION`.
    """

    method: ReconstructionMethod = ReconstructionMethod.FOURIER_SYNTHESIS
    rescale: bool = False
    edge_window: bool = False

    @property
    def uses_spectrum(self) -> bool:
        return self.method is not ReconstructionMethod.SINC_INTERPOLATION


@dataclass(frozen=True, slots=True)
class FftSizeMode:
    """Auto sizing from the sampling frequency, or an explicit custom size.

    Build with :meth:`auto` or :meth:`custom`; ``custom_size is None`` means
    auto.
    """

    custom_size: int | None = None

    def __post_init__(self) -> None:
        if self.custom_size is None:
            return
        if isinstance(self.custom_size, bool):
            raise InvalidTransformSizeError(
                f"custom FFT size must be an integer, got {self.custom_size!r}"
            )
        try:
            size = operator.index(self.custom_size)
        except TypeError:
            raise InvalidTransformSizeError(
                f"custom FFT size must be an integer, got {self.custom_size!r}"
            ) from None
        if size < MIN_FFT_SIZE:
            raise InvalidTransformSizeError(
                f"custom FFT size must be >= {MIN_FFT_SIZE}, got {size}"
            )
        object.__setattr__(self, "custom_size", size)

    @classmethod
    def auto(cls) -> FftSizeMode:
        return cls(None)

    @classmethod
    def custom(cls, size: int) -> FftSizeMode:
        return cls(size)

    @property
    def is_auto(self) -> bool:
        return self.custom_size is None

    def __str__(self) -> str:
        return "auto" if self.custom_size is None else str(self.custom_size)


@dataclass(frozen=True, slots=True)
class Parameters:
    """The configuration driving every computation of a session.

    ``phase_offset`` is in units of π.  Only positivity and finiteness are
    checked here; the demonstration envelope (signal ≤ 10 Hz, sampling
    ≤ 20 Hz, phase in ``[0, 2)``) is the caller's business.
    """

    signal_frequency: float
    sampling_frequency: float
    phase_offset: float = 0.0
    fft_size_mode: FftSizeMode = FftSizeMode()

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "signal_frequency",
            _require_frequency("signal_frequency", self.signal_frequency),
        )
        object.__setattr__(
            self,
            "sampling_frequency",
            _require_frequency("sampling_frequency", self.sampling_frequency),
        )
        phase = float(self.phase_offset)
        if not math.isfinite(phase):
            raise DomainError(f"phase_offset must be finite, got {self.phase_offset!r}")
        object.__setattr__(self, "phase_offset", phase)
        if not isinstance(self.fft_size_mode, FftSizeMode):
            raise TypeError(f"fft_size_mode must be an FftSizeMode, got {self.fft_size_mode!r}")

    @property
    def nyquist_frequency(self) -> float:
        return self.sampling_frequency / 2.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "signal_frequency_hz": self.signal_frequency,
            "sampling_frequency_hz": self.sampling_frequency,
            "phase_offset": self.phase_offset,
            "fft_size": str(self.fft_size_mode),
        }


@dataclass(frozen=True, slots=True, eq=False)
class Curve:
    """Ordered ``(x, y)`` points; ``x`` is the normalised ``[0, 2π)`` axis."""

    x: np.ndarray
    y: np.ndarray

    def __post_init__(self) -> None:
        x = _readonly(self.x, np.float32)
        y = _readonly(self.y, np.float32)
        if x.shape != y.shape or x.ndim != 1:
            raise ValueError(f"Curve x/y must be 1-D and equal length, got {x.shape} and {y.shape}")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @classmethod
    def empty(cls) -> Curve:
        return cls(np.empty(0, dtype=np.float32), np.empty(0, dtype=np.float32))

    def __len__(self) -> int:
        return int(self.x.size)

    def as_points(self) -> list[tuple[float, float]]:
        return list(zip(self.x.tolist(), self.y.tolist(), strict=True))

    def to_dict(self) -> dict[str, list[float]]:
        return {"x": self.x.tolist(), "y": self.y.tolist()}


@dataclass(frozen=True, slots=True, eq=False)
class Spectrum:
    """Complex DFT of ``fft_size`` real samples taken at ``sampling_frequency``.

    Bin ``k <= N/2`` represents ``k * fs / N``; bins above ``N/2`` are the
    negative frequencies ``(k - N) * fs / N``.
    """

    fft_size: int
    sampling_frequency: float
    values: np.ndarray

    def __post_init__(self) -> None:
        values = _readonly(self.values, np.complex64)
        if values.ndim != 1 or values.size != self.fft_size:
            raise InvalidTransformSizeError(
                f"spectrum length {values.size} does not match fft_size {self.fft_size}"
            )
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return self.fft_size

    @property
    def resolution_hz(self) -> float:
        return self.sampling_frequency / self.fft_size

    def bin_frequency(self, k: int) -> float:
        """Signed frequency of bin *k*."""
        if not 0 <= k < self.fft_size:
            raise IndexError(f"bin {k} out of range for fft_size {self.fft_size}")
        signed_k = k if k <= self.fft_size // 2 else k - self.fft_size
        return signed_k * self.resolution_hz

    def frequencies(self) -> np.ndarray:
        k = np.arange(self.fft_size)
        signed_k = np.where(k <= self.fft_size // 2, k, k - self.fft_size)
        return (signed_k * self.resolution_hz).astype(np.float32)

    def magnitudes(self) -> np.ndarray:
        """Normalised magnitude ``|X[k]| / N`` per bin."""
        return (np.abs(self.values) / np.float32(self.fft_size)).astype(np.float32)

    def phases(self) -> np.ndarray:
        return np.angle(self.values).astype(np.float32)

    def peak_bin(self) -> int:
        """Index of the strongest non-DC bin in ``1..N/2``."""
        half = self.fft_size // 2
        return int(np.argmax(np.abs(self.values[1 : half + 1]))) + 1

    def peak_frequency(self) -> float:
        return self.peak_bin() * self.resolution_hz

    def display_magnitudes(
        self, max_hz: float = DEFAULT_DISPLAY_MAX_HZ
    ) -> tuple[np.ndarray, np.ndarray]:
        """Frequencies and magnitudes from DC up to *max_hz*, capped at Nyquist."""
        display_points = min(math.ceil(max_hz / self.resolution_hz), self.fft_size // 2)
        display_points = max(0, display_points)
        freqs = (np.arange(display_points) * self.resolution_hz).astype(np.float32)
        return freqs, self.magnitudes()[:display_points]


@dataclass(frozen=True, slots=True)
class AliasingReport:
    """What a viewer should be told about the current parameters."""

    signal_frequency: float
    sampling_frequency: float
    nyquist_frequency: float
    aliased: bool
    apparent_frequency: float
    peak_frequency: float

    def message(self) -> str:
        if not self.aliased:
            return (
                f"Signal {self.signal_frequency:.1f} Hz is below Nyquist "
                f"({self.nyquist_frequency:.1f} Hz)"
            )
        return (
            f"Aliasing detected! Signal: {self.signal_frequency:.1f} Hz appears as: "
            f"{self.apparent_frequency:.1f} Hz (Nyquist: {self.nyquist_frequency:.1f} Hz)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "signal_frequency_hz": self.signal_frequency,
            "sampling_frequency_hz": self.sampling_frequency,
            "nyquist_frequency_hz": self.nyquist_frequency,
            "aliased": self.aliased,
            "apparent_frequency_hz": self.apparent_frequency,
            "peak_frequency_hz": self.peak_frequency,
        }
