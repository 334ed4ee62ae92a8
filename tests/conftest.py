"""Shared rings and algebras for the test suite."""

import pytest

from algebra_backend import GF, QQ, ZZ, ExtensionAlgebra, IdentityAlgebra, MonogenicAlgebra
from minimal_polynomial import minimal_polynomial


@pytest.fixture
def zsqrt2():
    """Z[sqrt 2] = ZZ[t]/(t^2 - 2)."""
    return MonogenicAlgebra(ZZ, (-2, 0, 1), domain_declared=True)


@pytest.fixture
def qsqrt2():
    """Q(sqrt 2) = QQ[t]/(t^2 - 2)."""
    return MonogenicAlgebra(QQ, (-2, 0, 1), field_declared=True)


@pytest.fixture
def qcbrt2():
    """Q(2^(1/3)) = QQ[t]/(t^3 - 2)."""
    return MonogenicAlgebra(QQ, (-2, 0, 0, 1), field_declared=True)


@pytest.fixture
def gf9():
    """GF(9) = GF(3)[t]/(t^2 + 1)."""
    return MonogenicAlgebra(GF(3), (1, 0, 1), field_declared=True)


@pytest.fixture
def qq_over_qq():
    return IdentityAlgebra(QQ)


@pytest.fixture
def sqrt2_minpoly(qsqrt2):
    return minimal_polynomial(ExtensionAlgebra(qsqrt2), qsqrt2.generator())
