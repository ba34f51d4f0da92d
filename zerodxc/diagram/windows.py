"""
Window specification and position index set for correlation diagrams.

A diagram has one row per window-width level ``w = 1..width_count`` (width
``w * base_width``) and one column per window centre ``k``. The centres are
the same for every level, so diagrams computed from different pairs of
sequences with the same length and spec line up cell by cell.
"""

import logging
from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np

from ..exceptions import ConfigurationError, WindowingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowSpec:
    """
    Windowing parameters of a correlation diagram.

    Parameters
    ----------
    base_width : int
        Width of the narrowest window, in samples. Must be even before any
        computation; see :func:`normalize_base_width`.
    width_count : int
        Number of window-width levels (rows of the diagram).
    delay : int, default 0
        Symmetric delay ``tau``; 0 disables delay averaging.
    """

    base_width: int
    width_count: int
    delay: int = 0

    def __post_init__(self):
        if self.base_width < 2:
            raise ConfigurationError(
                f"base width must be at least 2 samples, got {self.base_width}")
        if self.width_count < 1:
            raise ConfigurationError(
                f"number of window widths must be positive, got {self.width_count}")
        if self.delay < 0:
            raise ConfigurationError(f"delay must be non-negative, got {self.delay}")

    @property
    def max_width(self) -> int:
        """Width of the widest window."""
        return self.width_count * self.base_width

    def width(self, level: int) -> int:
        """Window width at 1-based ``level``."""
        if not 1 <= level <= self.width_count:
            raise IndexError(f"level {level} outside 1..{self.width_count}")
        return level * self.base_width

    def normalized(self) -> 'WindowSpec':
        """Return a copy with an even base width."""
        return normalize_base_width(self)


def normalize_base_width(spec: WindowSpec) -> WindowSpec:
    """
    Reduce an odd base width by one.

    Windows are centred on a sample, so their half width must be an integer.
    An odd value is not rejected; it is decremented and a warning is logged.
    """
    if spec.base_width % 2 == 0:
        return spec

    fixed = spec.base_width - 1
    logger.warning("window base width was an odd number; it is now reduced to %d", fixed)
    return replace(spec, base_width=fixed)


def window_positions(n_samples: int, spec: WindowSpec) -> np.ndarray:
    """
    Window centres shared by every level of a diagram.

    Parameters
    ----------
    n_samples : int
        Length of the analysed sequences.
    spec : WindowSpec
        Windowing parameters (base width already even).

    Returns
    -------
    np.ndarray of int
        Centres ``k`` from ``W*B/2 - 1`` (inclusive) to
        ``N - W*B/2 - delay`` (exclusive) with stride ``B``.
    """
    half_max = spec.max_width // 2
    return np.arange(half_max - 1, n_samples - half_max - spec.delay,
                     spec.base_width, dtype=int)


def window_bounds(position: int, level: int, spec: WindowSpec) -> Tuple[int, int]:
    """
    Half-open sample range ``[lo, hi)`` of the window at ``position``.

    The window holds ``level * base_width`` samples, from
    ``position - half + 1`` to ``position + half`` inclusive.
    """
    half = spec.width(level) // 2
    return position - half + 1, position + half + 1


def diagram_shape(n_samples: int, spec: WindowSpec) -> Tuple[int, int]:
    """Shape ``(levels, positions)`` of a diagram for sequences of ``n_samples``."""
    return spec.width_count, len(window_positions(n_samples, spec))


def expected_positions(n_samples: int, spec: WindowSpec) -> int:
    """
    Coarse diagram size used to reject infeasible windowing.

    ``floor((N - B*W) / B) - delay``; evaluated on the requested (possibly
    odd) base width.
    """
    delay = spec.delay if spec.delay > 0 else 0
    return (n_samples - spec.base_width * spec.width_count) // spec.base_width - delay


def check_windowing(n_samples: int, spec: WindowSpec) -> WindowSpec:
    """
    Validate a spec against the sequence length and normalize it.

    Parameters
    ----------
    n_samples : int
        Length of the sequences to analyse.
    spec : WindowSpec
        Requested windowing, base width possibly odd.

    Returns
    -------
    WindowSpec
        Spec with an even base width, guaranteed to give at least one
        window position.

    Raises
    ------
    WindowingError
        If the settings leave no window position.
    """
    if expected_positions(n_samples, spec) < 1:
        raise WindowingError(
            "windowing settings are invalid: negative diagram size expected "
            f"(length {n_samples}, base width {spec.base_width}, "
            f"{spec.width_count} widths, delay {spec.delay})")

    spec = normalize_base_width(spec)

    if len(window_positions(n_samples, spec)) < 1:
        raise WindowingError(
            f"windowing settings leave no window position for length {n_samples}")

    return spec
