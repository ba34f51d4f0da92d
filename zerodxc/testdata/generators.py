"""
Synthetic sequence pairs with known correlation structure.

Used to validate correlation and p-value diagrams: pairs that are
independent, correlated throughout, or correlated only in one time segment.
"""

import numpy as np
import pandas as pd
from typing import Tuple, Optional
from scipy.signal import lfilter


def make_autocorrelated_series(n: int,
                               rho: float = 0.8,
                               seed: Optional[int] = None) -> np.ndarray:
    """
    AR(1) series ``x[t] = rho * x[t-1] + sqrt(1 - rho^2) * e[t]``.

    Parameters
    ----------
    n : int
        Number of time points
    rho : float, default 0.8
        Lag-1 autocorrelation, ``|rho| < 1``
    seed : int or None
        Random seed for reproducibility

    Returns
    -------
    np.ndarray, shape (n,)
    """
    if not -1 < rho < 1:
        raise ValueError("rho must lie strictly between -1 and 1")

    rng = np.random.default_rng(seed)
    noise = np.sqrt(1 - rho**2) * rng.standard_normal(n)
    return lfilter([1.0], [1.0, -rho], noise)


def make_independent_pair(n: int = 500,
                          rho_auto: float = 0.0,
                          seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Two independent series, optionally AR(1) with ``rho_auto``."""
    rng = np.random.default_rng(seed)
    seed_x, seed_y = rng.integers(0, 2**32, size=2)
    return (make_autocorrelated_series(n, rho_auto, seed_x),
            make_autocorrelated_series(n, rho_auto, seed_y))


def make_correlated_pair(n: int = 500,
                         rho: float = 0.8,
                         seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Two white-noise series with instantaneous correlation ``rho``.

    Returns
    -------
    x, y : np.ndarray, shape (n,)
    """
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    noise = rng.standard_normal(n)
    y = rho * x + np.sqrt(1 - rho**2) * noise
    return x, y


def make_transient_coupling_pair(n: int = 1000,
                                 start: Optional[int] = None,
                                 stop: Optional[int] = None,
                                 rho: float = 0.9,
                                 seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Independent series that are correlated only in ``[start, stop)``.

    Parameters
    ----------
    n : int, default 1000
        Number of time points
    start, stop : int or None
        Coupled segment; defaults to the middle third
    rho : float, default 0.9
        Correlation inside the segment
    seed : int or None
        Random seed for reproducibility

    Returns
    -------
    x, y : np.ndarray, shape (n,)
    """
    if start is None:
        start = n // 3
    if stop is None:
        stop = 2 * n // 3

    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    y = rng.standard_normal(n)
    y[start:stop] = rho * x[start:stop] + np.sqrt(1 - rho**2) * y[start:stop]
    return x, y


def make_test_dataframe(n: int = 1000, seed: Optional[int] = None) -> pd.DataFrame:
    """
    Dataframe with one column per test scenario, ready to save as a table.

    Columns: independent_X/Y, correlated_X/Y, transient_X/Y, autocorr_X/Y.
    """
    rng = np.random.default_rng(seed)
    seeds = rng.integers(0, 2**32, size=4)

    x_indep, y_indep = make_independent_pair(n, seed=seeds[0])
    x_corr, y_corr = make_correlated_pair(n, seed=seeds[1])
    x_trans, y_trans = make_transient_coupling_pair(n, seed=seeds[2])
    x_auto, y_auto = make_independent_pair(n, rho_auto=0.8, seed=seeds[3])

    return pd.DataFrame({
        'independent_X': x_indep,
        'independent_Y': y_indep,
        'correlated_X': x_corr,
        'correlated_Y': y_corr,
        'transient_X': x_trans,
        'transient_Y': y_trans,
        'autocorr_X': x_auto,
        'autocorr_Y': y_auto,
    })
