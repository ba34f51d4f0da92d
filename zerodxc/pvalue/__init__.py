"""
Monte-Carlo significance of windowed cross-correlation.

This module provides the surrogate trial loop (sequential or threaded) and
the end-to-end workflow from loaded sequences to a correlation or p-value
diagram.
"""

from .workflow import (
    XCResult,
    derive_trial_seeds,
    run_surrogate_trial,
    compute_pvalue_diagram,
    validate_selection,
    run_xc_workflow,
    run_from_settings,
)

__all__ = [
    'XCResult',
    'derive_trial_seeds',
    'run_surrogate_trial',
    'compute_pvalue_diagram',
    'validate_selection',
    'run_xc_workflow',
    'run_from_settings',
]
