import numpy as np
import pytest

from zerodxc.testdata import make_autocorrelated_series, make_correlated_pair


@pytest.fixture
def noise_pair():
    rng = np.random.default_rng(12345)
    return rng.standard_normal(300), rng.standard_normal(300)


@pytest.fixture
def correlated_pair():
    return make_correlated_pair(400, rho=0.9, seed=3)


@pytest.fixture
def ar_series():
    return make_autocorrelated_series(512, rho=0.8, seed=11)


@pytest.fixture
def write_table(tmp_path):
    def _write(columns, name="data.tsv", separator="\t"):
        path = tmp_path / name
        rows = zip(*columns)
        path.write_text("\n".join(separator.join(repr(float(v)) for v in row) for row in rows) + "\n")
        return path

    return _write
