"""
Windowed zero-delay cross-correlation diagrams.

This module computes the Pearson correlation of two sequences over sliding
windows of several widths. Row ``w - 1`` of a diagram holds the correlations
of the level-``w`` windows (width ``w * base_width``) centred on the shared
window positions, left to right in time.
"""

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from typing import Union

from .windows import WindowSpec, normalize_base_width, window_positions, diagram_shape
from ..exceptions import InputConsistencyError, WindowingError


ArrayLike = Union[np.ndarray, list]


def _as_pair(seq_a: ArrayLike, seq_b: ArrayLike):
    a = np.asarray(seq_a, dtype=float)
    b = np.asarray(seq_b, dtype=float)

    if a.ndim != 1 or b.ndim != 1:
        raise InputConsistencyError("sequences must be one-dimensional")
    if a.shape != b.shape:
        raise InputConsistencyError(
            f"sequences must have the same length, got {a.size} and {b.size}")

    return a, b


def windowed_pearson(x: np.ndarray,
                     y: np.ndarray,
                     starts: np.ndarray,
                     width: int,
                     lag: int = 0) -> np.ndarray:
    """
    Pearson correlation of ``x`` and ``y`` over many windows at once.

    Parameters
    ----------
    x, y : np.ndarray, shape (N,)
        Input sequences
    starts : np.ndarray of int
        First sample of each window of ``x``
    width : int
        Number of samples per window
    lag : int, default 0
        Windows of ``y`` start ``lag`` samples after those of ``x``

    Returns
    -------
    np.ndarray, shape (len(starts),)
        Correlation per window. Windows where either operand is constant
        give NaN.
    """
    wx = sliding_window_view(x, width)[starts]
    wy = sliding_window_view(y, width)[starts + lag]

    dx = wx - wx.mean(axis=1, keepdims=True)
    dy = wy - wy.mean(axis=1, keepdims=True)

    num = np.einsum('ij,ij->i', dx, dy)
    den = np.sqrt(np.einsum('ij,ij->i', dx, dx) * np.einsum('ij,ij->i', dy, dy))

    with np.errstate(invalid='ignore', divide='ignore'):
        r = num / den

    # Rounding can push |r| slightly above 1 for (nearly) identical windows
    return np.clip(r, -1.0, 1.0)


def compute_diagram(seq_a: ArrayLike,
                    seq_b: ArrayLike,
                    window_spec: WindowSpec) -> np.ndarray:
    """
    Compute the correlation diagram of two sequences.

    Parameters
    ----------
    seq_a, seq_b : array-like, shape (N,)
        Sequences of equal length
    window_spec : WindowSpec
        Windowing parameters. An odd base width is reduced by one.

    Returns
    -------
    np.ndarray, shape (width_count, K)
        Correlation per level and window position, where ``K`` depends only
        on ``N`` and ``window_spec``.

    Notes
    -----
    With ``delay = tau > 0`` each cell is the mean of the correlation with
    ``seq_b`` shifted by ``+tau`` and by ``-tau`` relative to ``seq_a``. The
    ``-tau`` shift is read as ``seq_a`` advanced by ``tau``, so both reads
    stay inside the sequences for every valid position.
    """
    a, b = _as_pair(seq_a, seq_b)
    spec = normalize_base_width(window_spec)

    positions = window_positions(a.size, spec)
    diagram = np.empty(diagram_shape(a.size, spec), dtype=float)

    if positions.size == 0:
        return diagram

    for level in range(1, spec.width_count + 1):
        width = spec.width(level)
        starts = positions - width // 2 + 1

        if spec.delay > 0:
            forward = windowed_pearson(a, b, starts, width, lag=spec.delay)
            backward = windowed_pearson(b, a, starts, width, lag=spec.delay)
            diagram[level - 1] = 0.5 * (forward + backward)
        else:
            diagram[level - 1] = windowed_pearson(a, b, starts, width)

    return diagram


def check_window_variance(seq: ArrayLike,
                          window_spec: WindowSpec,
                          name: str = "sequence") -> None:
    """
    Reject a sequence that is constant over any window of the diagram.

    Wider windows at the same centre contain the narrowest one, so it is
    enough to check the level-1 windows (and their delayed copies).

    Raises
    ------
    WindowingError
        If some window has zero variance, which leaves the correlation
        undefined.
    """
    x = np.asarray(seq, dtype=float)
    spec = normalize_base_width(window_spec)
    positions = window_positions(x.size, spec)

    if positions.size == 0:
        return

    width = spec.base_width
    starts = positions - width // 2 + 1
    lags = (0, spec.delay) if spec.delay > 0 else (0,)

    for lag in lags:
        windows = sliding_window_view(x, width)[starts + lag]
        flat = np.ptp(windows, axis=1) == 0
        if np.any(flat):
            first = int(positions[np.argmax(flat)])
            raise WindowingError(
                f"{name} is constant in the window centred on sample {first}; "
                "correlation is undefined there")
