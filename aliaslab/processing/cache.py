"""Single-slot memoization for per-frame engine calls.

A :class:`Memo` holds at most one ``(key, value)`` pair.  A lookup with an
equal key is served from the slot; any other key recomputes and replaces the
slot wholesale.  There is no partial reuse and no eviction policy beyond that
replacement.

The ``*_key`` functions below are the only place that decides which inputs a
computation depends on.  Each builds on the key of the computation it
consumes, so a parameter added to the sample-point key automatically reaches
the spectrum and reconstruction keys as well.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..models import Parameters, ReconstructionPolicy, SpectralWindow

LOGGER = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

SignalKey = tuple[float, float, int]
SamplePointsKey = tuple[float, float, float]
SpectrumKey = tuple[SamplePointsKey, int, SpectralWindow]
ReconstructionKey = tuple[Any, int, ReconstructionPolicy]


class Memo(Generic[K, V]):
    """One cached value for one computation kind."""

    __slots__ = ("name", "_key", "_value", "_filled", "hits", "misses")

    def __init__(self, name: str) -> None:
        self.name = name
        self._key: K | None = None
        self._value: V | None = None
        self._filled = False
        self.hits = 0
        self.misses = 0

    @property
    def is_empty(self) -> bool:
        return not self._filled

    @property
    def key(self) -> K | None:
        return self._key

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        if self._filled and self._key == key:
            self.hits += 1
            return self._value  # type: ignore[return-value]
        value = compute()
        self._key = key
        self._value = value
        self._filled = True
        self.misses += 1
        LOGGER.debug("Recomputed %s for key %s", self.name, key)
        return value

    def clear(self) -> None:
        self._key = None
        self._value = None
        self._filled = False

    def stats(self) -> dict[str, int]:
        return {"hits": self.hits, "misses": self.misses}


# -- key derivation ----------------------------------------------------------


def signal_key(params: Parameters, n_points: int) -> SignalKey:
    return (params.signal_frequency, params.phase_offset, int(n_points))


def sample_points_key(params: Parameters) -> SamplePointsKey:
    return (params.signal_frequency, params.sampling_frequency, params.phase_offset)


def spectrum_key(params: Parameters, fft_size: int, window: SpectralWindow) -> SpectrumKey:
    return (sample_points_key(params), int(fft_size), window)


def reconstruction_key(
    params: Parameters,
    fft_size: int,
    n_points: int,
    policy: ReconstructionPolicy,
    window: SpectralWindow,
) -> ReconstructionKey:
    """Sinc reconstruction never reads the spectrum, so its key stops at the samples."""
    if policy.uses_spectrum:
        upstream: Any = spectrum_key(params, fft_size, window)
    else:
        upstream = sample_points_key(params)
    return (upstream, int(n_points), policy)


@dataclass(slots=True)
class ComputationCache:
    """The four memos an engine session owns."""

    signal: Memo[SignalKey, Any] = field(default_factory=lambda: Memo("signal"))
    sample_points: Memo[SamplePointsKey, Any] = field(
        default_factory=lambda: Memo("sample_points")
    )
    spectrum: Memo[SpectrumKey, Any] = field(default_factory=lambda: Memo("spectrum"))
    reconstruction: Memo[ReconstructionKey, Any] = field(
        default_factory=lambda: Memo("reconstruction")
    )

    def memos(self) -> tuple[Memo[Any, Any], ...]:
        return (self.signal, self.sample_points, self.spectrum, self.reconstruction)

    def clear(self) -> None:
        """Reset every slot to empty; counters are kept."""
        for memo in self.memos():
            memo.clear()

    def stats(self) -> dict[str, dict[str, int]]:
        return {memo.name: memo.stats() for memo in self.memos()}
