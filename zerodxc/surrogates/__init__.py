"""
Surrogate time series generation and significance testing.

This module provides IAAFT surrogates, which preserve the amplitude
distribution and power spectrum of a sequence while destroying its
cross-correlation with any other sequence, and the helpers that turn
surrogate correlation diagrams into p-values.
"""

from .generators import (
    SurrogateInvariants,
    initialize_surrogate_generation,
    spectral_deviation,
    generate_iaaft_surrogate,
    generate_iaaft_surrogates,
    generate_random_surrogates,
)

from .testing import (
    new_pvalue_counts,
    update_pvalue_counts,
    finalize_pvalue_diagram,
    fdr_correction,
    bonferroni_correction,
    significance_mask,
    autocorrelation_mismatch,
)

__all__ = [
    # Generators
    'SurrogateInvariants',
    'initialize_surrogate_generation',
    'spectral_deviation',
    'generate_iaaft_surrogate',
    'generate_iaaft_surrogates',
    'generate_random_surrogates',
    # Testing
    'new_pvalue_counts',
    'update_pvalue_counts',
    'finalize_pvalue_diagram',
    'fdr_correction',
    'bonferroni_correction',
    'significance_mask',
    'autocorrelation_mismatch',
]
