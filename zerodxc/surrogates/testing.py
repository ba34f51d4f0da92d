"""
Statistical significance testing using surrogate correlation diagrams.

This module provides the reduction that folds surrogate diagrams into
per-cell exceedance counts, the conversion of counts into p-values, and
multiple-testing corrections over the cells of a p-value diagram.
"""

import numpy as np
from typing import Literal, Tuple
from statsmodels.tsa.stattools import acf

from ..exceptions import ConfigurationError


def new_pvalue_counts(shape: Tuple[int, int]) -> np.ndarray:
    """Zero-filled per-cell exceedance counters for a diagram of ``shape``."""
    return np.zeros(shape, dtype=np.int64)


def update_pvalue_counts(counts: np.ndarray,
                         observed: np.ndarray,
                         surrogate: np.ndarray) -> np.ndarray:
    """
    Fold one surrogate diagram into the exceedance counts.

    Parameters
    ----------
    counts : np.ndarray of int, shape (W, K)
        Counts accumulated so far (not modified)
    observed : np.ndarray, shape (W, K)
        Correlation diagram of the analysed pair
    surrogate : np.ndarray, shape (W, K)
        Correlation diagram of one surrogate pair

    Returns
    -------
    np.ndarray of int, shape (W, K)
        New counts: one added where ``|surrogate| >= |observed|``

    Notes
    -----
    Two-sided: the comparison is on absolute values. NaN cells never count.
    The update is a pure function, so the order in which surrogate diagrams
    are folded in does not change the result.
    """
    if observed.shape != counts.shape or surrogate.shape != counts.shape:
        raise ValueError(
            f"diagram shapes differ: counts {counts.shape}, observed {observed.shape}, "
            f"surrogate {surrogate.shape}")

    with np.errstate(invalid='ignore'):
        exceeds = np.abs(surrogate) >= np.abs(observed)

    return counts + exceeds


def finalize_pvalue_diagram(counts: np.ndarray,
                            trial_count: int,
                            plus_one: bool = False) -> np.ndarray:
    """
    Convert exceedance counts to p-values.

    Parameters
    ----------
    counts : np.ndarray of int
        Exceedance counts after all trials
    trial_count : int
        Number of surrogate trials folded into ``counts``
    plus_one : bool, default False
        Use ``(k + 1) / (M + 1)`` instead of ``k / M`` to avoid p=0

    Returns
    -------
    np.ndarray of float
        P-value per cell, in [0, 1]
    """
    if trial_count < 1:
        raise ConfigurationError(
            f"number of surrogates must be positive, got {trial_count}")
    if np.any(counts > trial_count) or np.any(counts < 0):
        raise ValueError("counts must lie between 0 and the number of trials")

    if plus_one:
        return (counts + 1.0) / (trial_count + 1.0)
    return counts / float(trial_count)


def fdr_correction(p_values: np.ndarray,
                   alpha: float = 0.05,
                   method: Literal["bh", "by"] = "bh") -> Tuple[np.ndarray, float]:
    """
    False Discovery Rate correction for multiple testing.

    Parameters
    ----------
    p_values : np.ndarray
        Array of p-values (any shape; flattened internally)
    alpha : float, default 0.05
        Target false discovery rate
    method : {'bh', 'by'}, default 'bh'
        - 'bh': Benjamini-Hochberg procedure
        - 'by': Benjamini-Yekutieli procedure (more conservative)

    Returns
    -------
    significant : np.ndarray
        Boolean array, same shape as ``p_values``
    threshold : float
        Adjusted p-value threshold

    References
    ----------
    Benjamini, Y., & Hochberg, Y. (1995). Controlling the false discovery rate:
    a practical and powerful approach to multiple testing.
    Journal of the Royal Statistical Society, Series B, 57(1), 289-300.
    """
    p_values = np.asarray(p_values, dtype=float)
    flat = p_values.ravel()
    n = flat.size

    sorted_indices = np.argsort(flat, kind="stable")
    sorted_p = flat[sorted_indices]

    if method == "bh":
        thresholds = (np.arange(1, n + 1) / n) * alpha
    elif method == "by":
        c = np.sum(1.0 / np.arange(1, n + 1))
        thresholds = (np.arange(1, n + 1) / (n * c)) * alpha
    else:
        raise ValueError("method must be 'bh' or 'by'")

    # Largest i where p(i) <= threshold(i)
    significant_sorted = sorted_p <= thresholds
    significant = np.zeros(n, dtype=bool)

    if np.any(significant_sorted):
        max_i = np.where(significant_sorted)[0][-1]
        threshold = float(thresholds[max_i])
        significant[sorted_indices[:max_i + 1]] = True
    else:
        threshold = 0.0

    return significant.reshape(p_values.shape), threshold


def bonferroni_correction(p_values: np.ndarray,
                          alpha: float = 0.05) -> Tuple[np.ndarray, float]:
    """
    Bonferroni correction for multiple testing.

    Returns
    -------
    significant : np.ndarray
        Boolean array indicating significance after correction
    threshold : float
        Adjusted p-value threshold
    """
    p_values = np.asarray(p_values, dtype=float)
    threshold = alpha / p_values.size
    return p_values < threshold, threshold


def significance_mask(pvalues: np.ndarray,
                      alpha: float = 0.05,
                      correction: Literal["none", "bonferroni", "bh", "by"] = "none") -> np.ndarray:
    """
    Mark the significant cells of a p-value diagram.

    Parameters
    ----------
    pvalues : np.ndarray, shape (W, K)
        Finalized p-value diagram
    alpha : float, default 0.05
        Significance level
    correction : {'none', 'bonferroni', 'bh', 'by'}, default 'none'
        Multiple-testing correction across all cells

    Returns
    -------
    np.ndarray of bool, shape (W, K)
    """
    if correction == "none":
        return np.asarray(pvalues) < alpha
    if correction == "bonferroni":
        return bonferroni_correction(pvalues, alpha)[0]
    if correction in ("bh", "by"):
        return fdr_correction(pvalues, alpha, method=correction)[0]
    raise ValueError("correction must be 'none', 'bonferroni', 'bh' or 'by'")


def autocorrelation_mismatch(original: np.ndarray,
                             surrogate: np.ndarray,
                             nlags: int = 20) -> float:
    """
    Largest absolute ACF difference between a sequence and its surrogate.

    IAAFT surrogates should keep this small; plain shuffles do not.
    """
    nlags = min(nlags, len(original) - 1)
    acf_orig = acf(original, nlags=nlags, fft=True)
    acf_surr = acf(surrogate, nlags=nlags, fft=True)
    return float(np.max(np.abs(acf_orig - acf_surr)))
