"""
Monte-Carlo p-value diagrams for windowed zero-delay cross-correlation.

Each trial replaces both sequences with independent IAAFT surrogates,
recomputes the correlation diagram and counts, per cell, whether the
surrogate correlation is at least as extreme as the observed one. Trials
run sequentially or on a pool of worker threads; surrogate diagrams flow
back to the calling thread, which is the only one updating the counts.
"""

import logging
from dataclasses import dataclass
from functools import partial
from multiprocessing.pool import ThreadPool
from typing import Optional, Tuple

import numpy as np
from tqdm import tqdm

from ..config import RunMode, XCSettings
from ..diagram import (
    WindowSpec,
    check_window_variance,
    check_windowing,
    compute_diagram,
    diagram_shape,
    normalize_base_width,
)
from ..exceptions import ConfigurationError, InputConsistencyError
from ..io.loading import SequenceStore
from ..surrogates.generators import (
    DEFAULT_MAX_ITER,
    DEFAULT_TOLERANCE,
    SurrogateInvariants,
    generate_iaaft_surrogate,
    initialize_surrogate_generation,
)
from ..surrogates.testing import (
    finalize_pvalue_diagram,
    new_pvalue_counts,
    update_pvalue_counts,
)

logger = logging.getLogger(__name__)


@dataclass
class XCResult:
    """
    Outcome of one run.

    Attributes
    ----------
    observed : np.ndarray, shape (W, K)
        Correlation diagram of the analysed pair
    pvalues : np.ndarray or None
        P-value diagram; None in correlation-only mode
    window_spec : WindowSpec
        Windowing actually used (even base width)
    mode : RunMode
        Which diagram was requested
    trial_count : int
        Surrogate trials behind ``pvalues`` (0 in correlation-only mode)
    """

    observed: np.ndarray
    pvalues: Optional[np.ndarray]
    window_spec: WindowSpec
    mode: RunMode
    trial_count: int = 0

    @property
    def diagram(self) -> np.ndarray:
        """The diagram selected by ``mode``."""
        if self.mode is RunMode.CORRELATION:
            return self.observed
        return self.pvalues


def derive_trial_seeds(base_seed: int, trial: int) -> Tuple[np.random.SeedSequence, np.random.SeedSequence]:
    """
    Independent seeds for the two surrogates of trial ``trial``.

    A pure function of ``(base_seed, trial)``: the same trial always gets
    the same seeds whichever worker runs it, and no two trials or series
    share a stream.
    """
    parent = np.random.SeedSequence(base_seed, spawn_key=(trial,))
    seed_a, seed_b = parent.spawn(2)
    return seed_a, seed_b


def run_surrogate_trial(trial: int,
                        seq_a: np.ndarray,
                        seq_b: np.ndarray,
                        invariants_a: SurrogateInvariants,
                        invariants_b: SurrogateInvariants,
                        window_spec: WindowSpec,
                        base_seed: int,
                        tolerance: float = DEFAULT_TOLERANCE,
                        max_iter: int = DEFAULT_MAX_ITER) -> np.ndarray:
    """
    Correlation diagram of one surrogate pair.

    Reads only shared, read-only inputs; safe to run from several threads.
    """
    seed_a, seed_b = derive_trial_seeds(base_seed, trial)

    surr_a = generate_iaaft_surrogate(seq_a, invariants_a, tolerance,
                                      seed=seed_a, max_iter=max_iter)
    surr_b = generate_iaaft_surrogate(seq_b, invariants_b, tolerance,
                                      seed=seed_b, max_iter=max_iter)

    diagram = compute_diagram(surr_a, surr_b, window_spec)

    undefined = int(np.count_nonzero(np.isnan(diagram)))
    if undefined:
        logger.debug("surrogate trial %d: %d of %d cells undefined (constant window), "
                     "not counted", trial, undefined, diagram.size)

    return diagram


def compute_pvalue_diagram(seq_a: np.ndarray,
                           seq_b: np.ndarray,
                           window_spec: WindowSpec,
                           trial_count: int = 100,
                           tolerance: float = DEFAULT_TOLERANCE,
                           max_iter: int = DEFAULT_MAX_ITER,
                           parallel: bool = False,
                           n_jobs: Optional[int] = None,
                           seed: Optional[int] = None,
                           plus_one: bool = False,
                           verbose: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    Observed correlation diagram and its surrogate p-value diagram.

    Parameters
    ----------
    seq_a, seq_b : np.ndarray, shape (N,)
        Sequences to analyse
    window_spec : WindowSpec
        Windowing parameters
    trial_count : int, default 100
        Number of surrogate pairs (M)
    tolerance : float, default 0.01
        IAAFT spectral tolerance
    max_iter : int, default 1000
        IAAFT iteration cap
    parallel : bool, default False
        Run trials on a thread pool
    n_jobs : int or None
        Pool size; None uses the number of CPUs
    seed : int or None
        Base seed. Trial seeds are derived from it, so sequential and
        parallel runs with the same seed give the same p-values. None draws
        fresh entropy.
    plus_one : bool, default False
        Report ``(k + 1) / (M + 1)`` instead of ``k / M``
    verbose : bool, default False
        Show progress bar

    Returns
    -------
    observed : np.ndarray, shape (W, K)
        Correlation diagram of ``seq_a`` and ``seq_b``
    pvalues : np.ndarray, shape (W, K)
        Fraction of trials with ``|surrogate| >= |observed|`` per cell

    Raises
    ------
    ConfigurationError
        If ``trial_count`` is not positive.
    """
    if trial_count < 1:
        raise ConfigurationError(
            f"number of surrogates must be positive, got {trial_count}")

    seq_a = np.asarray(seq_a, dtype=float)
    seq_b = np.asarray(seq_b, dtype=float)
    if seq_a.shape != seq_b.shape:
        raise InputConsistencyError(
            f"sequences must have the same length, got {seq_a.size} and {seq_b.size}")

    window_spec = normalize_base_width(window_spec)

    # Step 1: observed diagram
    observed = compute_diagram(seq_a, seq_b, window_spec)

    # Step 2: surrogate invariants, shared read-only by all trials
    invariants_a = initialize_surrogate_generation(seq_a)
    invariants_b = initialize_surrogate_generation(seq_b)

    if seed is None:
        seed = np.random.SeedSequence().entropy

    trial = partial(
        run_surrogate_trial,
        seq_a=seq_a,
        seq_b=seq_b,
        invariants_a=invariants_a,
        invariants_b=invariants_b,
        window_spec=window_spec,
        base_seed=seed,
        tolerance=tolerance,
        max_iter=max_iter,
    )

    # Step 3: trials, folded into the counts as they complete
    counts = new_pvalue_counts(diagram_shape(seq_a.size, window_spec))

    if parallel:
        with ThreadPool(processes=n_jobs) as pool:
            iterator = tqdm(pool.imap_unordered(trial, range(trial_count)),
                            total=trial_count, desc="Surrogates (parallel)",
                            disable=not verbose)
            for surrogate_diagram in iterator:
                counts = update_pvalue_counts(counts, observed, surrogate_diagram)
    else:
        iterator = tqdm(range(trial_count), desc="Surrogates", disable=not verbose)
        for i in iterator:
            counts = update_pvalue_counts(counts, observed, trial(i))

    # Step 4: counts -> fractions
    return observed, finalize_pvalue_diagram(counts, trial_count, plus_one=plus_one)


def validate_selection(store: SequenceStore,
                       column_a: int,
                       column_b: int,
                       window_spec: WindowSpec) -> WindowSpec:
    """
    Check a column pair and windowing against the loaded data.

    Returns the normalized window spec. Everything is checked before any
    diagram is computed.
    """
    seq_a = store.column(column_a)
    seq_b = store.column(column_b)

    window_spec = check_windowing(store.length, window_spec)

    check_window_variance(seq_a, window_spec, name=f"column {column_a}")
    check_window_variance(seq_b, window_spec, name=f"column {column_b}")

    return window_spec


def run_xc_workflow(store: SequenceStore,
                    column_a: int,
                    column_b: int,
                    window_spec: WindowSpec,
                    mode: RunMode = RunMode.PVALUE,
                    trial_count: int = 100,
                    tolerance: float = DEFAULT_TOLERANCE,
                    max_iter: int = DEFAULT_MAX_ITER,
                    parallel: bool = False,
                    n_jobs: Optional[int] = None,
                    seed: Optional[int] = None,
                    plus_one: bool = False,
                    verbose: bool = False) -> XCResult:
    """
    Validate a selection and compute the requested diagram.

    Parameters
    ----------
    store : SequenceStore
        Loaded sequences
    column_a, column_b : int
        1-based column numbers of the pair to analyse
    window_spec : WindowSpec
        Requested windowing; an odd base width is reduced by one
    mode : RunMode, default RunMode.PVALUE
        Correlation diagram only, or p-value diagram
    trial_count, tolerance, max_iter, parallel, n_jobs, seed, plus_one, verbose
        See :func:`compute_pvalue_diagram`

    Returns
    -------
    XCResult
    """
    if mode is RunMode.PVALUE and trial_count < 1:
        raise ConfigurationError(
            f"number of surrogates must be positive, got {trial_count}")

    window_spec = validate_selection(store, column_a, column_b, window_spec)
    seq_a = store.column(column_a)
    seq_b = store.column(column_b)

    if mode is RunMode.CORRELATION:
        observed = compute_diagram(seq_a, seq_b, window_spec)
        return XCResult(observed=observed, pvalues=None,
                        window_spec=window_spec, mode=mode)

    if parallel:
        logger.info("running %d surrogate trials on %s threads",
                    trial_count, n_jobs or "all available")

    observed, pvalues = compute_pvalue_diagram(
        seq_a, seq_b, window_spec,
        trial_count=trial_count,
        tolerance=tolerance,
        max_iter=max_iter,
        parallel=parallel,
        n_jobs=n_jobs,
        seed=seed,
        plus_one=plus_one,
        verbose=verbose,
    )

    return XCResult(observed=observed, pvalues=pvalues, window_spec=window_spec,
                    mode=mode, trial_count=trial_count)


def run_from_settings(store: SequenceStore,
                      settings: XCSettings,
                      verbose: bool = False) -> XCResult:
    """Run :func:`run_xc_workflow` with parameters from ``settings``."""
    return run_xc_workflow(
        store,
        settings.column_a,
        settings.column_b,
        settings.window_spec,
        mode=settings.mode,
        trial_count=settings.trial_count,
        tolerance=settings.tolerance,
        max_iter=settings.max_iter,
        parallel=settings.parallel,
        n_jobs=settings.jobs if settings.parallel else None,
        seed=settings.seed,
        verbose=verbose,
    )
