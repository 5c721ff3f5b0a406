"""Tests for the ``json_utils`` frame serialisation helpers."""

from __future__ import annotations

import json
import logging

import numpy as np
import pytest

from aliaslab.json_utils import safe_json_dumps, sanitize_for_json, sanitize_value
from aliaslab.models import Curve, Parameters
from aliaslab.processing import AliasingEngine


class TestSanitizeForJson:
    def test_nan_replaced_with_none(self) -> None:
        cleaned, had = sanitize_for_json({"peak": float("nan"), "ok": 42})
        assert cleaned == {"peak": None, "ok": 42}
        assert had is True

    def test_infinities_replaced_with_none(self) -> None:
        cleaned, had = sanitize_for_json([float("inf"), float("-inf"), 1.5])
        assert cleaned == [None, None, 1.5]
        assert had is True

    def test_plain_values_untouched(self) -> None:
        data = {"s": "hello", "i": 42, "b": True, "n": None, "l": [1, 2.5]}
        cleaned, had = sanitize_for_json(data)
        assert cleaned == data
        assert had is False

    def test_numpy_array_becomes_list(self) -> None:
        cleaned, had = sanitize_for_json({"y": np.array([0.5, np.nan], dtype=np.float32)})
        assert cleaned == {"y": [0.5, None]}
        assert had is True

    def test_numpy_scalars_become_native(self) -> None:
        cleaned, _ = sanitize_for_json([np.float32(0.25), np.int64(7), np.bool_(True)])
        assert cleaned == [0.25, 7, True]
        assert type(cleaned[1]) is int

    def test_complex_becomes_pair(self) -> None:
        cleaned, _ = sanitize_for_json(
            {"bin": complex(1.0, -2.0), "arr": np.array([3 + 4j], dtype=np.complex64)}
        )
        assert cleaned == {"bin": [1.0, -2.0], "arr": [[3.0, 4.0]]}

    def test_to_dict_objects_expanded(self) -> None:
        cleaned, had = sanitize_for_json(
            {"curve": Curve(np.array([0.0, 1.0]), np.array([0.5, -0.5]))}
        )
        assert cleaned == {"curve": {"x": [0.0, 1.0], "y": [0.5, -0.5]}}
        assert had is False

    def test_tuple_becomes_list(self) -> None:
        cleaned, _ = sanitize_for_json((1.0, (2.0, 3.0)))
        assert cleaned == [1.0, [2.0, 3.0]]


class TestSanitizeValue:
    def test_logs_warning_when_values_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="aliaslab.json_utils"):
            assert sanitize_value([float("nan")]) == [None]
        assert "non-finite" in caplog.text

    def test_silent_for_clean_values(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="aliaslab.json_utils"):
            assert sanitize_value({"a": 1.0}) == {"a": 1.0}
        assert caplog.records == []


class TestSafeJsonDumps:
    def test_output_is_strict_json(self) -> None:
        text = safe_json_dumps({"a": float("nan"), "b": [1, float("inf")]})
        assert json.loads(text) == {"a": None, "b": [1, None]}

    def test_indent(self) -> None:
        assert safe_json_dumps({"a": 1}, indent=2) == '{\n  "a": 1\n}'

    def test_frame_serialises(self) -> None:
        engine = AliasingEngine(Parameters(signal_frequency=7.0, sampling_frequency=10.0))
        data = json.loads(safe_json_dumps(engine.frame(32)))
        assert data["report"]["aliased"] is True
        assert data["report"]["apparent_frequency_hz"] == pytest.approx(3.0)
        assert data["parameters"]["fft_size"] == "auto"
        assert len(data["signal"]["y"]) == 32
        assert len(data["sample_points"]["x"]) == 11
        assert data["spectrum"]["fft_size"] == 200
        assert len(data["spectrum"]["freq"]) == len(data["spectrum"]["magnitude"]) == 100
