"""
Test data generation for validating correlation and p-value diagrams.

This module provides synthetic sequence pairs with known correlation
structure.
"""

from .generators import (
    make_autocorrelated_series,
    make_independent_pair,
    make_correlated_pair,
    make_transient_coupling_pair,
    make_test_dataframe,
)

__all__ = [
    'make_autocorrelated_series',
    'make_independent_pair',
    'make_correlated_pair',
    'make_transient_coupling_pair',
    'make_test_dataframe',
]
