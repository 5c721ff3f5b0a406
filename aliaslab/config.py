from __future__ import annotations

import logging
import math
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    DEFAULT_DISPLAY_MAX_HZ,
    DEFAULT_N_POINTS,
    DEFAULT_SAMPLING_FREQUENCY_HZ,
    DEFAULT_SIGNAL_FREQUENCY_HZ,
    MAX_SAMPLING_FREQUENCY_HZ,
    MAX_SIGNAL_FREQUENCY_HZ,
    MIN_FFT_SIZE,
    MIN_FREQUENCY_HZ,
    PHASE_PERIOD,
)
from .models import (
    FftSizeMode,
    Parameters,
    ReconstructionMethod,
    ReconstructionPolicy,
    SpectralWindow,
)
from .processing.engine import AliasingEngine

LOGGER = logging.getLogger(__name__)

VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG: dict[str, Any] = {
    "parameters": {
        "signal_frequency_hz": DEFAULT_SIGNAL_FREQUENCY_HZ,
        "sampling_frequency_hz": DEFAULT_SAMPLING_FREQUENCY_HZ,
        "phase_offset": 0.0,
        "fft_size": "auto",
    },
    "spectrum": {
        "window": SpectralWindow.NONE.value,
        "display_max_hz": DEFAULT_DISPLAY_MAX_HZ,
    },
    "reconstruction": {
        "method": ReconstructionMethod.FOURIER_SYNTHESIS.value,
        "rescale": False,
        "edge_window": False,
    },
    "display": {"n_points": DEFAULT_N_POINTS},
    "logging": {"level": "INFO"},
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _clamp_frequency(name: str, value: float, maximum: float) -> float:
    if not math.isfinite(value) or value <= 0.0:
        LOGGER.warning(
            "parameters.%s=%s is not positive, clamped to %s", name, value, MIN_FREQUENCY_HZ
        )
        return MIN_FREQUENCY_HZ
    if value > maximum:
        LOGGER.warning("parameters.%s=%s exceeds maximum %s, clamped", name, value, maximum)
        return maximum
    return value


def parse_fft_size(value: Any) -> FftSizeMode:
    """``"auto"`` (or ``None``) → auto mode, an integer ≥ 2 → custom size."""
    if value is None or (isinstance(value, str) and value.strip().lower() == "auto"):
        return FftSizeMode.auto()
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"parameters.fft_size must be 'auto' or an integer, got {value!r}") from None
    if size < MIN_FFT_SIZE:
        raise ValueError(f"parameters.fft_size must be >= {MIN_FFT_SIZE}, got {size}")
    return FftSizeMode.custom(size)


@dataclass(slots=True)
class ParametersConfig:
    signal_frequency_hz: float
    sampling_frequency_hz: float
    phase_offset: float
    fft_size: FftSizeMode

    def __post_init__(self) -> None:
        # The engine accepts any positive frequency; the demonstration envelope
        # is applied here, on the caller side.
        self.signal_frequency_hz = _clamp_frequency(
            "signal_frequency_hz", float(self.signal_frequency_hz), MAX_SIGNAL_FREQUENCY_HZ
        )
        self.sampling_frequency_hz = _clamp_frequency(
            "sampling_frequency_hz", float(self.sampling_frequency_hz), MAX_SAMPLING_FREQUENCY_HZ
        )
        phase = float(self.phase_offset)
        if not math.isfinite(phase):
            LOGGER.warning("parameters.phase_offset=%s is not finite, reset to 0", phase)
            phase = 0.0
        wrapped = phase % PHASE_PERIOD
        if wrapped != phase:
            LOGGER.warning(
                "parameters.phase_offset=%s is outside [0, %s), wrapped to %s",
                phase,
                PHASE_PERIOD,
                wrapped,
            )
        self.phase_offset = wrapped

    def to_parameters(self) -> Parameters:
        return Parameters(
            signal_frequency=self.signal_frequency_hz,
            sampling_frequency=self.sampling_frequency_hz,
            phase_offset=self.phase_offset,
            fft_size_mode=self.fft_size,
        )


@dataclass(slots=True)
class SpectrumConfig:
    window: SpectralWindow
    display_max_hz: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.display_max_hz) or self.display_max_hz <= 0:
            LOGGER.warning(
                "spectrum.display_max_hz=%s is not positive, reset to %s",
                self.display_max_hz,
                DEFAULT_DISPLAY_MAX_HZ,
            )
            self.display_max_hz = DEFAULT_DISPLAY_MAX_HZ


@dataclass(slots=True)
class DisplayConfig:
    n_points: int

    def __post_init__(self) -> None:
        if not isinstance(self.n_points, int) or self.n_points < 1:
            LOGGER.warning("display.n_points=%s is below minimum 1, clamped to 1", self.n_points)
            self.n_points = 1


@dataclass(slots=True)
class LoggingConfig:
    level: str

    def __post_init__(self) -> None:
        level = str(self.level).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {VALID_LOG_LEVELS}, got {self.level!r}")
        self.level = level


@dataclass(slots=True)
class AppConfig:
    parameters: ParametersConfig
    spectrum: SpectrumConfig
    reconstruction: ReconstructionPolicy
    display: DisplayConfig
    logging: LoggingConfig
    config_path: Path | None = None

    def build_engine(self) -> AliasingEngine:
        return AliasingEngine(
            self.parameters.to_parameters(),
            policy=self.reconstruction,
            window=self.spectrum.window,
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"{path} is not valid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def _section(merged: dict[str, Any], name: str) -> dict[str, Any]:
    value = merged[name]
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a mapping, got {value!r}")
    return value


def _parse_enum(enum_cls: type, section: str, value: Any) -> Any:
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{section} must be one of: {valid}; got {value!r}") from None


def _parse_bool(section: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "on", "1"):
            return True
        if text in ("false", "no", "off", "0"):
            return False
    raise ValueError(f"{section} must be true or false, got {value!r}")


def _parse_number(section: str, value: Any, cast: type) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"{section} must be a number, got {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"{section} must be a number, got {value!r}") from None


def config_from_mapping(override: dict[str, Any], config_path: Path | None = None) -> AppConfig:
    merged = _deep_merge(deepcopy(DEFAULT_CONFIG), override)
    params_cfg = _section(merged, "parameters")
    spectrum_cfg = _section(merged, "spectrum")
    recon_cfg = _section(merged, "reconstruction")
    display_cfg = _section(merged, "display")
    logging_cfg = _section(merged, "logging")
    return AppConfig(
        parameters=ParametersConfig(
            signal_frequency_hz=_parse_number(
                "parameters.signal_frequency_hz", params_cfg["signal_frequency_hz"], float
            ),
            sampling_frequency_hz=_parse_number(
                "parameters.sampling_frequency_hz", params_cfg["sampling_frequency_hz"], float
            ),
            phase_offset=_parse_number(
                "parameters.phase_offset", params_cfg.get("phase_offset", 0.0), float
            ),
            fft_size=parse_fft_size(params_cfg.get("fft_size", "auto")),
        ),
        spectrum=SpectrumConfig(
            window=_parse_enum(SpectralWindow, "spectrum.window", spectrum_cfg["window"]),
            display_max_hz=_parse_number(
                "spectrum.display_max_hz",
                spectrum_cfg.get("display_max_hz", DEFAULT_DISPLAY_MAX_HZ),
                float,
            ),
        ),
        reconstruction=ReconstructionPolicy(
            method=_parse_enum(ReconstructionMethod, "reconstruction.method", recon_cfg["method"]),
            rescale=_parse_bool("reconstruction.rescale", recon_cfg.get("rescale", False)),
            edge_window=_parse_bool(
                "reconstruction.edge_window", recon_cfg.get("edge_window", False)
            ),
        ),
        display=DisplayConfig(
            n_points=_parse_number("display.n_points", display_cfg["n_points"], int)
        ),
        logging=LoggingConfig(level=str(logging_cfg["level"])),
        config_path=config_path,
    )


def load_config(config_path: Path | None = None) -> AppConfig:
    if config_path is None:
        return config_from_mapping({})
    path = config_path.resolve()
    return config_from_mapping(_read_config_file(path), config_path=path)
