from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import (
    VALID_LOG_LEVELS,
    AppConfig,
    DisplayConfig,
    ParametersConfig,
    load_config,
    parse_fft_size,
)
from .errors import DomainError
from .json_utils import safe_json_dumps
from .models import ReconstructionMethod, ReconstructionPolicy, SpectralWindow

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sample a sinusoid, analyse its spectrum and report aliasing"
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--signal-hz", type=float, default=None, help="Signal frequency (Hz)")
    parser.add_argument("--sampling-hz", type=float, default=None, help="Sampling frequency (Hz)")
    parser.add_argument("--phase", type=float, default=None, help="Phase offset in units of π")
    parser.add_argument(
        "--fft-size",
        default=None,
        help="'auto' (20 x sampling frequency, rounded up to even) or an explicit size",
    )
    parser.add_argument(
        "--method",
        choices=[m.value for m in ReconstructionMethod],
        default=None,
        help="Reconstruction algorithm",
    )
    parser.add_argument(
        "--window",
        choices=[w.value for w in SpectralWindow],
        default=None,
        help="Window applied before the FFT",
    )
    parser.add_argument(
        "--rescale",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Min-max rescale the reconstruction to [-1, 1]",
    )
    parser.add_argument("--points", type=int, default=None, help="Output points per curve")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to write the full frame as JSON",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Logging level (default from config)",
    )
    return parser.parse_args(argv)


def _apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    params = cfg.parameters
    # Rebuilt rather than mutated so the envelope clamps see the overrides.
    cfg.parameters = ParametersConfig(
        signal_frequency_hz=params.signal_frequency_hz if args.signal_hz is None else args.signal_hz,
        sampling_frequency_hz=(
            params.sampling_frequency_hz if args.sampling_hz is None else args.sampling_hz
        ),
        phase_offset=params.phase_offset if args.phase is None else args.phase,
        fft_size=params.fft_size if args.fft_size is None else parse_fft_size(args.fft_size),
    )

    policy = cfg.reconstruction
    cfg.reconstruction = ReconstructionPolicy(
        method=ReconstructionMethod(args.method) if args.method else policy.method,
        rescale=policy.rescale if args.rescale is None else args.rescale,
        edge_window=policy.edge_window,
    )
    if args.window is not None:
        cfg.spectrum.window = SpectralWindow(args.window)
    if args.points is not None:
        cfg.display = DisplayConfig(n_points=args.points)
    return cfg


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.config is not None and not args.config.exists():
        print(f"Error: config file not found: {args.config}", file=sys.stderr)
        return 1
    try:
        cfg = _apply_overrides(load_config(args.config), args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=args.log_level or cfg.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        engine = cfg.build_engine()
        frame = engine.frame(cfg.display.n_points, display_max_hz=cfg.spectrum.display_max_hz)
    except DomainError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    report = frame.report
    print(f"signal:     {report.signal_frequency:.3f} Hz")
    print(f"sampling:   {report.sampling_frequency:.3f} Hz")
    print(f"nyquist:    {report.nyquist_frequency:.3f} Hz")
    print(f"fft size:   {frame.spectrum.fft_size} (resolution {frame.spectrum.resolution_hz:.4f} Hz)")
    print(f"peak:       {report.peak_frequency:.3f} Hz")
    print(f"aliased:    {'yes' if report.aliased else 'no'}")
    print(f"apparent:   {report.apparent_frequency:.3f} Hz")
    print(report.message())

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(safe_json_dumps(frame, indent=2), encoding="utf-8")
        print(f"wrote frame: {args.output}")
    LOGGER.debug("Engine stats: %s", engine.stats())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
