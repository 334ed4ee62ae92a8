"""Tests for dense polynomials over exact rings."""

from fractions import Fraction

import pytest

from algebra_backend import GF, QQ, ZZ, ChainRing, ExtensionAlgebra, RingHomomorphism, StructureError
from polynomial import DEGREE_BOT, Polynomial


def P(ring, *coeffs):
    return Polynomial(ring, coeffs)


def test_trailing_zeros_trimmed():
    p = P(ZZ, 1, 2, 0, 0)
    assert p.coeffs == (1, 2)
    assert p.degree == 1


def test_zero_polynomial_degree():
    z = Polynomial.zero(ZZ)
    assert z.degree == DEGREE_BOT
    assert z.degree < 0
    assert z.nat_degree == 0
    assert not z.is_monic()
    assert z.leading_coefficient == 0


def test_coefficient_access():
    p = P(ZZ, -2, 0, 1)
    assert p.is_monic()
    assert p.coeff(0) == -2
    assert p.coeff(7) == 0
    with pytest.raises(ValueError):
        p.coeff(-1)


def test_arithmetic():
    X = Polynomial.X(ZZ)
    one = Polynomial.one(ZZ)
    assert (X - one) * (X + one) == P(ZZ, -1, 0, 1)
    assert (X + one).pow(3).coeffs == (1, 3, 3, 1)
    assert -X == P(ZZ, 0, -1)
    assert P(ZZ, 1, 2).scale(3) == P(ZZ, 3, 6)
    assert Polynomial.monomial(ZZ, 2, 5) == P(ZZ, 0, 0, 5)


def test_ring_mismatch():
    with pytest.raises(ValueError):
        Polynomial.X(ZZ) + Polynomial.X(QQ)


def test_non_ring_rejected():
    with pytest.raises(TypeError):
        Polynomial(int, (1,))


def test_divmod_monic_over_integers():
    p = P(ZZ, 5, 2, 0, 1)
    q, r = p.divmod_monic(P(ZZ, 1, 0, 1))
    assert q == Polynomial.X(ZZ)
    assert r == P(ZZ, 5, 1)
    with pytest.raises(ValueError):
        p.divmod_monic(P(ZZ, 1, 2))


def test_divmod_monic_over_chain_ring():
    R = ChainRing(2, 3)
    p = P(R, 0, 0, 4)
    q, r = p.divmod_monic(P(R, 6, 1))
    assert q * P(R, 6, 1) + r == p
    assert r.degree < 1


def test_divmod_over_field():
    q, r = P(QQ, 0, 0, 1).divmod(P(QQ, 0, 2))
    assert q == P(QQ, 0, Fraction(1, 2))
    assert r.is_zero()
    with pytest.raises(StructureError):
        P(ZZ, 0, 0, 1).divmod(P(ZZ, 0, 2))
    with pytest.raises(ZeroDivisionError):
        P(QQ, 1).divmod(Polynomial.zero(QQ))


def test_units():
    assert P(ZZ, -1).is_unit()
    assert not P(ZZ, 2).is_unit()
    assert not Polynomial.X(ZZ).is_unit()
    assert P(QQ, 3).is_unit()
    with pytest.raises(StructureError):
        P(ChainRing(2, 2), 1).is_unit()


def test_eval_and_roots():
    p = P(ZZ, -4, 0, 1)
    assert p.eval(3) == 5
    assert p.is_root(2)
    assert p.is_root(-2)
    assert not p.is_root(1)


def test_aeval(zsqrt2):
    algebra = ExtensionAlgebra(zsqrt2)
    t = zsqrt2.generator()
    assert zsqrt2.is_zero(P(ZZ, -2, 0, 1).aeval(algebra, t))
    assert P(ZZ, 1, 1).aeval(algebra, t) == (1, 1)
    with pytest.raises(ValueError):
        P(QQ, 0, 1).aeval(algebra, t)


def test_compose_and_map():
    X = Polynomial.X(ZZ)
    assert (X * X).compose(X + Polynomial.one(ZZ)) == P(ZZ, 1, 2, 1)
    reduce3 = RingHomomorphism(ZZ, GF(3), lambda a: a)
    assert P(ZZ, 4, 0, 1).map(reduce3) == P(GF(3), 1, 0, 1)
    with pytest.raises(ValueError):
        P(QQ, 1).map(reduce3)


def test_map_can_drop_degree():
    reduce2 = RingHomomorphism(ZZ, GF(2), lambda a: a)
    assert P(ZZ, 1, 2).map(reduce2).degree == 0


def test_repr():
    assert repr(P(ZZ, -2, 0, 1)) == "X^2 - 2"
    assert repr(P(ZZ, 0, -1)) == "-X"
    assert repr(P(ZZ, 1, 3)) == "3*X + 1"
    assert repr(Polynomial.zero(ZZ)) == "0"


def test_hash_consistent_with_equality():
    assert {P(QQ, 1, 1), P(QQ, Fraction(1), Fraction(1))} == {P(QQ, 1, 1)}
