"""Signal processing package.

This package contains the aliasing computation engine:

- :mod:`~aliaslab.processing.signal`: ideal curve, sample points and
  transform input generation.
- :mod:`~aliaslab.processing.fft`: pure FFT sizing and spectral functions.
- :mod:`~aliaslab.processing.reconstruction`: Fourier synthesis and sinc
  interpolation back to the time domain.
- :mod:`~aliaslab.processing.cache`: single-slot memos and their key
  derivation.
- :mod:`~aliaslab.processing.engine`: the stateful :class:`AliasingEngine`
  session that ties everything together.
"""

from .cache import ComputationCache, Memo
from .engine import AliasingEngine, Frame, aliased_frequency
from .fft import compute_spectrum, resolve_fft_size, round_up_even

__all__ = [
    "AliasingEngine",
    "ComputationCache",
    "Frame",
    "Memo",
    "aliased_frequency",
    "compute_spectrum",
    "resolve_fft_size",
    "round_up_even",
]
