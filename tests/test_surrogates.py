import numpy as np
import pytest

from zerodxc.exceptions import ConfigurationError
from zerodxc.surrogates import (
    autocorrelation_mismatch,
    bonferroni_correction,
    fdr_correction,
    finalize_pvalue_diagram,
    generate_iaaft_surrogate,
    generate_iaaft_surrogates,
    generate_random_surrogates,
    initialize_surrogate_generation,
    new_pvalue_counts,
    significance_mask,
    spectral_deviation,
    update_pvalue_counts,
)


def test_invariants(ar_series):
    inv = initialize_surrogate_generation(ar_series)
    assert np.array_equal(inv.sorted_values, np.sort(ar_series))
    assert np.allclose(inv.spectrum_magnitudes, np.abs(np.fft.fft(ar_series)))
    assert len(inv) == ar_series.size
    with pytest.raises(ValueError):
        inv.sorted_values[0] = 0.0


def test_invariants_reject_empty_input():
    with pytest.raises(ValueError):
        initialize_surrogate_generation(np.array([]))


@pytest.mark.parametrize("seed", [0, 1, 42])
@pytest.mark.parametrize("tolerance", [0.5, 0.05, 0.001])
def test_surrogate_keeps_value_set(ar_series, seed, tolerance):
    inv = initialize_surrogate_generation(ar_series)
    surrogate = generate_iaaft_surrogate(ar_series, inv, tolerance, seed=seed, max_iter=200)
    assert surrogate.shape == ar_series.shape
    assert np.array_equal(np.sort(surrogate), np.sort(ar_series))


def test_value_set_kept_with_ties():
    rng = np.random.default_rng(5)
    x = rng.integers(0, 4, size=256).astype(float)
    surrogate = generate_iaaft_surrogate(x, seed=9)
    assert np.array_equal(np.sort(surrogate), np.sort(x))


def test_non_convergence_still_keeps_value_set(ar_series):
    surrogate, residual, converged = generate_iaaft_surrogate(
        ar_series, tolerance=1e-12, seed=3, max_iter=2, return_residual=True)
    assert not converged
    assert residual > 1e-12
    assert np.array_equal(np.sort(surrogate), np.sort(ar_series))


def test_reported_residual_matches_spectrum(ar_series):
    inv = initialize_surrogate_generation(ar_series)
    tolerance = 0.01
    surrogate, residual, converged = generate_iaaft_surrogate(
        ar_series, inv, tolerance, seed=7, return_residual=True)
    assert residual == pytest.approx(spectral_deviation(surrogate, inv.spectrum_magnitudes))
    assert converged
    assert residual <= tolerance
    assert spectral_deviation(surrogate, inv.spectrum_magnitudes) <= tolerance


def test_spectral_deviation_of_original_is_zero(ar_series):
    inv = initialize_surrogate_generation(ar_series)
    assert spectral_deviation(ar_series, inv.spectrum_magnitudes) == pytest.approx(0.0, abs=1e-12)


def test_surrogates_are_seeded(ar_series):
    inv = initialize_surrogate_generation(ar_series)
    first = generate_iaaft_surrogate(ar_series, inv, seed=123)
    again = generate_iaaft_surrogate(ar_series, inv, seed=123)
    other = generate_iaaft_surrogate(ar_series, inv, seed=124)
    assert np.array_equal(first, again)
    assert not np.array_equal(first, other)
    assert not np.array_equal(first, ar_series)


def test_iaaft_keeps_autocorrelation_unlike_shuffle(ar_series):
    iaaft = generate_iaaft_surrogate(ar_series, tolerance=0.01, seed=2)
    shuffled = generate_random_surrogates(ar_series, 1, seed=2)[0]
    assert autocorrelation_mismatch(ar_series, iaaft, nlags=5) < 0.2
    assert autocorrelation_mismatch(ar_series, shuffled, nlags=5) > 0.5


def test_bad_parameters(ar_series):
    with pytest.raises(ValueError):
        generate_iaaft_surrogate(ar_series, tolerance=0.0)
    with pytest.raises(ValueError):
        generate_iaaft_surrogate(ar_series, max_iter=0)
    inv = initialize_surrogate_generation(ar_series[:100])
    with pytest.raises(ValueError):
        generate_iaaft_surrogate(ar_series, inv)


def test_batch_generators(ar_series):
    batch = generate_iaaft_surrogates(ar_series[:128], 3, tolerance=0.1, seed=1)
    assert batch.shape == (3, 128)
    for row in batch:
        assert np.array_equal(np.sort(row), np.sort(ar_series[:128]))
    assert np.array_equal(batch, generate_iaaft_surrogates(ar_series[:128], 3, tolerance=0.1, seed=1))

    shuffled = generate_random_surrogates(ar_series, 2, seed=0)
    assert shuffled.shape == (2, ar_series.size)
    assert np.array_equal(np.sort(shuffled[1]), np.sort(ar_series))


def test_update_counts_is_pure_and_two_sided():
    observed = np.array([[0.5, -0.5, 0.2], [0.1, np.nan, 0.9]])
    surrogate = np.array([[-0.6, 0.4, 0.2], [-0.1, 0.3, np.nan]])
    counts = new_pvalue_counts(observed.shape)

    updated = update_pvalue_counts(counts, observed, surrogate)

    assert counts.sum() == 0
    assert updated.tolist() == [[1, 0, 1], [1, 0, 0]]
    assert updated.dtype.kind == 'i'


def test_update_counts_order_does_not_matter():
    rng = np.random.default_rng(4)
    observed = rng.uniform(-1, 1, (3, 7))
    surrogates = [rng.uniform(-1, 1, (3, 7)) for _ in range(10)]

    forward = new_pvalue_counts(observed.shape)
    for s in surrogates:
        forward = update_pvalue_counts(forward, observed, s)
    backward = new_pvalue_counts(observed.shape)
    for s in reversed(surrogates):
        backward = update_pvalue_counts(backward, observed, s)

    assert np.array_equal(forward, backward)


def test_update_counts_rejects_shape_mismatch():
    with pytest.raises(ValueError):
        update_pvalue_counts(new_pvalue_counts((2, 3)), np.zeros((2, 3)), np.zeros((2, 4)))


def test_finalize():
    counts = np.array([[0, 5, 10]])
    assert finalize_pvalue_diagram(counts, 10).tolist() == [[0.0, 0.5, 1.0]]
    np.testing.assert_allclose(finalize_pvalue_diagram(counts, 10, plus_one=True),
                               [[1 / 11, 6 / 11, 1.0]])


def test_finalize_rejects_zero_trials():
    with pytest.raises(ConfigurationError):
        finalize_pvalue_diagram(np.zeros((1, 3), dtype=int), 0)
    with pytest.raises(ValueError):
        finalize_pvalue_diagram(np.array([[4]]), 3)


def test_multiple_testing_corrections():
    p = np.array([[0.001, 0.01, 0.03], [0.04, 0.2, 0.9]])

    bonf, threshold = bonferroni_correction(p, alpha=0.05)
    assert threshold == pytest.approx(0.05 / 6)
    assert bonf.tolist() == [[True, False, False], [False, False, False]]

    bh, _ = fdr_correction(p, alpha=0.05)
    assert bh.shape == p.shape
    assert bh.tolist() == [[True, True, False], [False, False, False]]

    assert np.array_equal(significance_mask(p, 0.05), p < 0.05)
    assert np.array_equal(significance_mask(p, 0.05, "bh"), bh)
    with pytest.raises(ValueError):
        significance_mask(p, 0.05, "holm")
