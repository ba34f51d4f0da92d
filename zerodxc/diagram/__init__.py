"""
Windowed cross-correlation diagrams.

This module provides the window specification, the position index set
shared by every diagram row, and the correlation diagram engine.
"""

from .windows import (
    WindowSpec,
    normalize_base_width,
    window_positions,
    window_bounds,
    diagram_shape,
    expected_positions,
    check_windowing,
)

from .core import (
    windowed_pearson,
    compute_diagram,
    check_window_variance,
)

__all__ = [
    # Windows
    'WindowSpec',
    'normalize_base_width',
    'window_positions',
    'window_bounds',
    'diagram_shape',
    'expected_positions',
    'check_windowing',
    # Engine
    'windowed_pearson',
    'compute_diagram',
    'check_window_variance',
]
