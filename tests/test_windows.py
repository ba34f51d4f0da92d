import logging

import numpy as np
import pytest

from zerodxc.diagram import (
    WindowSpec,
    check_windowing,
    diagram_shape,
    expected_positions,
    normalize_base_width,
    window_bounds,
    window_positions,
)
from zerodxc.exceptions import ConfigurationError, WindowingError


def test_window_spec_widths():
    spec = WindowSpec(base_width=10, width_count=3)
    assert spec.max_width == 30
    assert [spec.width(w) for w in (1, 2, 3)] == [10, 20, 30]
    with pytest.raises(IndexError):
        spec.width(4)


@pytest.mark.parametrize("kwargs", [
    {"base_width": 1, "width_count": 2},
    {"base_width": 10, "width_count": 0},
    {"base_width": 10, "width_count": 2, "delay": -1},
])
def test_window_spec_rejects_bad_values(kwargs):
    with pytest.raises(ConfigurationError):
        WindowSpec(**kwargs)


def test_positions_follow_formula():
    spec = WindowSpec(base_width=10, width_count=1)
    positions = window_positions(1000, spec)
    assert positions[0] == 4
    assert positions[-1] == 994
    assert np.all(np.diff(positions) == 10)
    assert len(positions) == len(range(4, 995, 10)) == 100


def test_positions_shrink_with_delay():
    spec = WindowSpec(base_width=10, width_count=2)
    delayed = WindowSpec(base_width=10, width_count=2, delay=15)
    plain = window_positions(200, spec)
    shifted = window_positions(200, delayed)
    assert shifted[0] == plain[0] == 9
    assert shifted[-1] < 200 - 10 - 15
    assert len(shifted) < len(plain)


def test_every_window_stays_inside_sequence():
    n = 137
    spec = WindowSpec(base_width=8, width_count=4, delay=3)
    for k in window_positions(n, spec):
        for level in range(1, spec.width_count + 1):
            lo, hi = window_bounds(int(k), level, spec)
            assert lo >= 0
            assert hi + spec.delay <= n
            assert hi - lo == spec.width(level)


def test_diagram_shape_depends_on_length_and_spec_only():
    spec = WindowSpec(base_width=6, width_count=3)
    assert diagram_shape(500, spec) == (3, len(window_positions(500, spec)))


def test_odd_base_width_is_normalized_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="zerodxc"):
        spec = normalize_base_width(WindowSpec(base_width=7, width_count=2))
    assert spec.base_width == 6
    assert "reduced to 6" in caplog.text


def test_even_base_width_is_unchanged(caplog):
    spec = WindowSpec(base_width=8, width_count=2)
    with caplog.at_level(logging.WARNING, logger="zerodxc"):
        assert normalize_base_width(spec) is spec
    assert caplog.text == ""


def test_check_windowing_rejects_infeasible_settings():
    spec = WindowSpec(base_width=50, width_count=4)
    assert expected_positions(200, spec) < 1
    with pytest.raises(WindowingError):
        check_windowing(200, spec)


def test_check_windowing_counts_delay():
    spec = WindowSpec(base_width=10, width_count=2, delay=8)
    assert expected_positions(100, spec) == 0
    with pytest.raises(WindowingError):
        check_windowing(100, spec)
    assert check_windowing(100, WindowSpec(10, 2, delay=7)).delay == 7


def test_check_windowing_returns_normalized_spec():
    spec = check_windowing(300, WindowSpec(base_width=9, width_count=2))
    assert spec.base_width == 8
    assert len(window_positions(300, spec)) > 0
