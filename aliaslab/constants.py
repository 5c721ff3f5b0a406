"""Numeric constants shared across the package.

Every numeric literal that appears in more than one module should live here
so that a change only needs to happen in one place.
"""

from __future__ import annotations

import math
from typing import Final

TWO_PI: Final[float] = 2.0 * math.pi
"""Length of the normalised display axis; curves span ``[0, 2π)``."""

# ---------------------------------------------------------------------------
# Transform sizing
# ---------------------------------------------------------------------------
AUTO_FFT_SAMPLES_PER_HZ: Final[int] = 20
"""Auto FFT size is ``round_up_even(20 * sampling_frequency)``."""

MIN_FFT_SIZE: Final[int] = 2
"""Smallest transform size with a defined Nyquist bin."""

SIZE_ROUNDING_EPSILON: Final[float] = 1e-6
"""Tolerance when rounding a float product up to an integer FFT size, so
float noise such as ``20 * 0.1 == 2.0000000000000004`` does not add a bin."""

BLACKMAN_HARRIS_COEFFS: Final[tuple[float, float, float, float]] = (
    0.35875,
    0.48829,
    0.14128,
    0.01168,
)
"""4-term Blackman-Harris window coefficients ``(a0, a1, a2, a3)``."""

# ---------------------------------------------------------------------------
# Demonstration envelope (enforced by callers, never by the engine)
# ---------------------------------------------------------------------------
MAX_SIGNAL_FREQUENCY_HZ: Final[float] = 10.0
MAX_SAMPLING_FREQUENCY_HZ: Final[float] = 20.0
MIN_FREQUENCY_HZ: Final[float] = 0.1
"""Lowest slider value; clamping target for zero/negative config values."""

PHASE_PERIOD: Final[float] = 2.0
"""Phase offsets are expressed in units of π and wrap at ``2``."""

DEFAULT_SIGNAL_FREQUENCY_HZ: Final[float] = 3.0
DEFAULT_SAMPLING_FREQUENCY_HZ: Final[float] = 10.0

# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------
DEFAULT_DISPLAY_MAX_HZ: Final[float] = 20.0
"""Upper edge of the spectrum view handed to renderers."""

DEFAULT_N_POINTS: Final[int] = 800
