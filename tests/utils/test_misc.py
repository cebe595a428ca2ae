import numpy as np
import pytest

from pymass.utils.misc import string_diag


@pytest.mark.parametrize("d, expected", [(np.ones(2), "[1., 1.]"), (np.array([0.5]), "[0.5]")])
def test_short_diagonal(d, expected):
    assert string_diag(d) == expected


def test_long_diagonal_is_cut():
    s = string_diag(np.arange(100.0))
    assert len(s) == 32
    assert s.endswith(" ...")
    assert s.startswith("[ 0.,  1.,")


def test_custom_width():
    assert string_diag(np.ones(10), n_chars=12) == "[1., 1., ..."
