"""Tests for the field-layer lemmas and explicit minimal polynomials."""

from fractions import Fraction

import pytest

from algebra_backend import GF, QQ, ZZ, ExtensionAlgebra, StructureError, UnsupportedStructureError
from minimal_polynomial import CertificateError, MinpolyConfig, PreconditionError, minimal_polynomial
from minpoly_field import (
    add_algebra_map,
    aeval_ne_zero_of_degree_lt,
    algebra_map_case,
    coeff_zero_eq_zero,
    coeff_zero_ne_zero,
    degree_le_of_nonzero,
    degree_pos,
    divides,
    eq_of_irreducible_of_monic,
    find_proper_factor,
    irreducible,
    minimal_polynomial_one,
    minimal_polynomial_zero,
    neg,
    nonzero,
    prime,
    prime_split,
    root_classification,
    unique,
)
from polynomial import Polynomial


def P(ring, *coeffs):
    return Polynomial(ring, coeffs)


MINPOLY_SQRT2 = P(QQ, -2, 0, 1)


def test_nonzero_and_degree_pos(sqrt2_minpoly):
    assert nonzero(sqrt2_minpoly).certificate["leading_coefficient"] == 1
    assert degree_pos(sqrt2_minpoly).certificate["degree"] == 2
    assert prime(sqrt2_minpoly).certificate["non_unit"]


def test_degree_le_of_nonzero(sqrt2_minpoly):
    fact = degree_le_of_nonzero(sqrt2_minpoly, MINPOLY_SQRT2.scale(3))
    assert fact.certificate["rhs"] == 2
    assert fact.certificate["normalized"] == MINPOLY_SQRT2
    with pytest.raises(PreconditionError):
        degree_le_of_nonzero(sqrt2_minpoly, Polynomial.zero(QQ))


def test_unique(sqrt2_minpoly):
    assert unique(sqrt2_minpoly, MINPOLY_SQRT2).certificate["polynomial"] == MINPOLY_SQRT2
    with pytest.raises(PreconditionError):
        unique(sqrt2_minpoly, MINPOLY_SQRT2 * P(QQ, 1, 1))
    with pytest.raises(PreconditionError):
        unique(sqrt2_minpoly, MINPOLY_SQRT2.scale(2))


def test_divides(sqrt2_minpoly):
    cofactor = P(QQ, -5, 1)
    fact = divides(sqrt2_minpoly, MINPOLY_SQRT2 * cofactor)
    assert fact.certificate["quotient"] == cofactor
    assert divides(sqrt2_minpoly, Polynomial.zero(QQ)).certificate["quotient"].is_zero()
    with pytest.raises(PreconditionError):
        divides(sqrt2_minpoly, Polynomial.X(QQ))


def test_prime_split(sqrt2_minpoly):
    other = P(QQ, 1, 1)
    left = prime_split(sqrt2_minpoly, MINPOLY_SQRT2, other)
    assert left.certificate["factor"] == 0
    assert left.certificate["quotient"] == Polynomial.one(QQ)
    right = prime_split(sqrt2_minpoly, other, MINPOLY_SQRT2 * other)
    assert right.certificate["factor"] == 1
    assert right.certificate["quotient"] == other
    with pytest.raises(PreconditionError):
        prime_split(sqrt2_minpoly, Polynomial.X(QQ), Polynomial.X(QQ))


def test_irreducible_over_rationals(sqrt2_minpoly):
    cert = irreducible(sqrt2_minpoly).certificate
    assert cert["mode"] == "prime_implies_irreducible"
    assert "exhaustive" not in cert


def test_irreducible_over_finite_field(gf9):
    m = minimal_polynomial(ExtensionAlgebra(gf9), gf9.generator())
    assert m.polynomial == P(GF(3), 1, 0, 1)
    assert irreducible(m).certificate["exhaustive"] is True


def test_find_proper_factor():
    F = GF(3)
    assert find_proper_factor(P(F, 1, 0, 1)) is None
    assert find_proper_factor(P(F, -1, 0, 1)) == P(F, 1, 1)
    with pytest.raises(PreconditionError):
        find_proper_factor(P(F, 1, 0, 1), config=MinpolyConfig(brute_force_limit=2))
    with pytest.raises(UnsupportedStructureError):
        find_proper_factor(MINPOLY_SQRT2)
    with pytest.raises(StructureError):
        find_proper_factor(P(ZZ, -2, 0, 1))


def test_aeval_ne_zero_of_degree_lt(sqrt2_minpoly, qsqrt2):
    fact = aeval_ne_zero_of_degree_lt(sqrt2_minpoly, P(QQ, -1, 1))
    assert fact.certificate["value"] == (-1, 1)
    with pytest.raises(PreconditionError):
        aeval_ne_zero_of_degree_lt(sqrt2_minpoly, MINPOLY_SQRT2)
    with pytest.raises(PreconditionError):
        aeval_ne_zero_of_degree_lt(sqrt2_minpoly, Polynomial.zero(QQ))


def test_eq_of_irreducible_of_monic(sqrt2_minpoly):
    assert eq_of_irreducible_of_monic(sqrt2_minpoly, MINPOLY_SQRT2).certificate["polynomial"] == MINPOLY_SQRT2
    with pytest.raises(PreconditionError):
        eq_of_irreducible_of_monic(sqrt2_minpoly, MINPOLY_SQRT2 * P(QQ, -1, 1))


def test_algebra_map_case_rationals(qq_over_qq):
    m = algebra_map_case(qq_over_qq, 3)
    assert m.polynomial.coeffs == (-3, 1)
    assert m.polynomial.coeffs == (Fraction(-3), Fraction(1))


def test_algebra_map_case_extension(qsqrt2):
    m = algebra_map_case(ExtensionAlgebra(qsqrt2), Fraction(2, 3))
    assert m.polynomial == P(QQ, Fraction(-2, 3), 1)
    assert m.x == qsqrt2.constant(Fraction(2, 3))


def test_zero_and_one(qq_over_qq, qsqrt2):
    assert minimal_polynomial_zero(qq_over_qq).polynomial.coeffs == (0, 1)
    assert minimal_polynomial_one(qq_over_qq).polynomial.coeffs == (-1, 1)
    assert minimal_polynomial_zero(ExtensionAlgebra(qsqrt2)).polynomial == Polynomial.X(QQ)


def test_field_layer_rejects_rings(zsqrt2):
    m = minimal_polynomial(ExtensionAlgebra(zsqrt2), zsqrt2.generator())
    with pytest.raises(StructureError):
        nonzero(m)
    with pytest.raises(StructureError):
        algebra_map_case(ExtensionAlgebra(zsqrt2), 3)


def test_root_classification(qsqrt2, sqrt2_minpoly):
    algebra = ExtensionAlgebra(qsqrt2)
    m = minimal_polynomial(algebra, qsqrt2.constant(5))
    assert root_classification(m, 5) == m.x
    with pytest.raises(PreconditionError):
        root_classification(m, 4)
    with pytest.raises(PreconditionError):
        root_classification(sqrt2_minpoly, 1)


def test_coeff_zero_iff_x_zero(qsqrt2, sqrt2_minpoly):
    algebra = ExtensionAlgebra(qsqrt2)
    m0 = minimal_polynomial(algebra, qsqrt2.zero())
    assert coeff_zero_eq_zero(m0) is True
    assert coeff_zero_eq_zero(sqrt2_minpoly) is False
    assert coeff_zero_ne_zero(sqrt2_minpoly).certificate["coeff_0"] == -2
    with pytest.raises(PreconditionError):
        coeff_zero_ne_zero(m0)


def test_coeff_zero_over_finite_field(gf9):
    m = minimal_polynomial(ExtensionAlgebra(gf9), (1, 1))
    assert coeff_zero_eq_zero(m) is False


def test_add_algebra_map(sqrt2_minpoly):
    shifted = add_algebra_map(sqrt2_minpoly, 1)
    assert shifted.polynomial == P(QQ, -1, -2, 1)


def test_neg(sqrt2_minpoly, qcbrt2):
    assert neg(sqrt2_minpoly).polynomial == MINPOLY_SQRT2
    m = minimal_polynomial(ExtensionAlgebra(qcbrt2), qcbrt2.generator())
    assert neg(m).polynomial == P(QQ, 2, 0, 0, 1)


def test_certificates_can_be_trusted(qsqrt2):
    cfg = MinpolyConfig(verify_certificates=False)
    m = minimal_polynomial(ExtensionAlgebra(qsqrt2), qsqrt2.generator(), config=cfg)
    assert divides(m, MINPOLY_SQRT2).certificate["quotient"] == Polynomial.one(QQ)
    assert m.config is cfg


def test_error_hierarchy():
    assert issubclass(CertificateError, RuntimeError)
