"""
Transient Coupling Example

This script builds two series that are correlated only in their middle
third, computes the correlation diagram and its p-value diagram, and
plots both.
"""

import numpy as np
import matplotlib.pyplot as plt

from zerodxc import WindowSpec, compute_diagram, compute_pvalue_diagram, window_positions
from zerodxc.surrogates import significance_mask
from zerodxc.testdata import make_transient_coupling_pair


def main():
    # ============================================================
    # 1. DATA
    # ============================================================
    n = 1500
    x, y = make_transient_coupling_pair(n, rho=0.7, seed=42)
    print(f"Series length: {n}, coupled segment: {n // 3}-{2 * n // 3}")

    # ============================================================
    # 2. CORRELATION DIAGRAM
    # ============================================================
    spec = WindowSpec(base_width=20, width_count=6)
    corr = compute_diagram(x, y, spec)
    print(f"Correlation diagram: {corr.shape[0]} widths x {corr.shape[1]} positions")

    # ============================================================
    # 3. P-VALUE DIAGRAM
    # ============================================================
    observed, pvalues = compute_pvalue_diagram(x, y, spec, trial_count=200,
                                               parallel=True, seed=7, verbose=True)
    significant = significance_mask(pvalues, alpha=0.05, correction="bh")
    print(f"Significant cells after FDR correction: {significant.sum()} / {significant.size}")

    # ============================================================
    # 4. PLOT
    # ============================================================
    positions = window_positions(n, spec)
    extent = [positions[0], positions[-1], 0.5, spec.width_count + 0.5]

    fig, axes = plt.subplots(2, 1, figsize=(9, 6), sharex=True)
    im0 = axes[0].imshow(observed, aspect='auto', origin='lower', extent=extent,
                         cmap='RdBu_r', vmin=-1, vmax=1)
    axes[0].set_ylabel('Width level')
    axes[0].set_title('Correlation diagram')
    fig.colorbar(im0, ax=axes[0])

    im1 = axes[1].imshow(np.log10(np.maximum(pvalues, 1.0 / 200)), aspect='auto',
                         origin='lower', extent=extent, cmap='viridis_r')
    axes[1].set_ylabel('Width level')
    axes[1].set_xlabel('Window centre (sample)')
    axes[1].set_title('log10 p-value')
    fig.colorbar(im1, ax=axes[1])

    plt.tight_layout()
    plt.show()


if __name__ == '__main__':
    main()
