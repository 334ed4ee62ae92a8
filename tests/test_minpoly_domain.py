"""Tests for fraction fields and the integral-domain transport layer."""

from fractions import Fraction

import pytest

from algebra_backend import (
    GF,
    QQ,
    ZZ,
    ChainRing,
    ExtensionAlgebra,
    IdentityAlgebra,
    MonogenicAlgebra,
    RingHomomorphism,
    StructureError,
)
from fraction_field import FractionFieldEmbedding, fraction_field, induced_fraction_algebra
from minimal_polynomial import (
    PreconditionError,
    TransportObligationError,
    charpoly_witness,
    minimal_polynomial,
)
from minpoly_domain import (
    base_embedding_injective,
    degree_le_of_nonzero,
    divides,
    embedding_square_commutes,
    fraction_field_transport,
    induced_algebra_injective,
    minimal_polynomial_commutes_with_embedding,
    transport_to_fraction_field,
)
from polynomial import Polynomial


def P(ring, *coeffs):
    return Polynomial(ring, coeffs)


# ---------------------------------------------------------------------------
# fraction_field
# ---------------------------------------------------------------------------


def test_fraction_field_of_integers():
    emb = fraction_field(ZZ)
    assert emb.target == QQ
    assert emb(3) == Fraction(3)
    assert emb.map_poly(P(ZZ, -2, 0, 1)) == P(QQ, -2, 0, 1)


def test_fraction_field_of_field_is_identity():
    emb = fraction_field(GF(5))
    assert emb.target == GF(5)
    assert emb(7) == 2


def test_fraction_field_of_quadratic_integers(zsqrt2, qsqrt2):
    emb = fraction_field(zsqrt2)
    assert emb.target == qsqrt2
    assert emb((1, 1)) == (Fraction(1), Fraction(1))


def test_fraction_field_needs_domain():
    with pytest.raises(StructureError):
        fraction_field(ChainRing(2, 2))


def test_map_poly_detects_degree_loss():
    broken = FractionFieldEmbedding(ZZ, GF(2), RingHomomorphism(ZZ, GF(2), lambda a: a))
    with pytest.raises(StructureError):
        broken.map_poly(P(ZZ, 1, 2))


def test_induced_fraction_algebra(zsqrt2, qsqrt2):
    assert induced_fraction_algebra(ExtensionAlgebra(zsqrt2)) == ExtensionAlgebra(qsqrt2)
    assert induced_fraction_algebra(IdentityAlgebra(ZZ)) == IdentityAlgebra(QQ)


# ---------------------------------------------------------------------------
# transport obligations
# ---------------------------------------------------------------------------


def test_transport_discharges_obligations(zsqrt2):
    transport = fraction_field_transport(ExtensionAlgebra(zsqrt2), [3, -7])
    assert len(transport.obligations) == 3
    assert transport.obligations[0].certificate["checked"] == 4
    assert transport.push_element((2, 5)) == (2, 5)


def test_base_embedding_kernel_violation():
    reduce2 = FractionFieldEmbedding(ZZ, GF(2), RingHomomorphism(ZZ, GF(2), lambda a: a))
    with pytest.raises(TransportObligationError):
        base_embedding_injective(reduce2, [0, 1, 2])


def test_square_violation(zsqrt2):
    algebra = ExtensionAlgebra(zsqrt2)
    fraction_algebra = induced_fraction_algebra(algebra)
    doubled = FractionFieldEmbedding(ZZ, QQ, RingHomomorphism(ZZ, QQ, lambda a: Fraction(2 * a)))
    with pytest.raises(TransportObligationError):
        embedding_square_commutes(algebra, fraction_algebra, doubled, fraction_field(zsqrt2), [1])


def test_induced_map_injective(zsqrt2):
    fact = induced_algebra_injective(induced_fraction_algebra(ExtensionAlgebra(zsqrt2)))
    assert "field" in fact.certificate["reason"]
    with pytest.raises(TransportObligationError):
        induced_algebra_injective(ExtensionAlgebra(zsqrt2))


def test_transport_requires_domains():
    B = MonogenicAlgebra(ZZ, (0, 0, 1))
    with pytest.raises(StructureError):
        fraction_field_transport(ExtensionAlgebra(B))


# ---------------------------------------------------------------------------
# transported lemmas
# ---------------------------------------------------------------------------


def test_sqrt2_round_trip(zsqrt2):
    """ZZ in Z[sqrt 2]: map(minpoly) into QQ equals the minpoly of the transported root."""
    m = minimal_polynomial(ExtensionAlgebra(zsqrt2), zsqrt2.generator())
    fact = minimal_polynomial_commutes_with_embedding(m)
    m_frac = fact.certificate["fraction_minpoly"]
    assert fact.certificate["mapped"] == P(QQ, -2, 0, 1)
    assert m_frac.polynomial == P(QQ, -2, 0, 1)
    assert m_frac.base == QQ
    assert m_frac.x == (0, 1)


def test_transport_witness(zsqrt2):
    w = transport_to_fraction_field(charpoly_witness(ExtensionAlgebra(zsqrt2), (1, 1)))
    assert w.algebra.base == QQ
    assert w.x == (1, 1)
    assert w.polynomial == P(QQ, -1, -2, 1)
    with pytest.raises(TypeError):
        transport_to_fraction_field(P(ZZ, -2, 0, 1))


def test_transport_over_identity_algebra():
    m = minimal_polynomial(IdentityAlgebra(ZZ), -4)
    fact = minimal_polynomial_commutes_with_embedding(m)
    assert fact.certificate["mapped"] == P(QQ, 4, 1)


def test_transport_through_tower(zsqrt2):
    """Z[sqrt 2][u]/(u^2 - 3) over Z[sqrt 2]: Frac is Q(sqrt 2)(sqrt 3)."""
    B = MonogenicAlgebra(zsqrt2, (-3, 0, 1), domain_declared=True, variable="u")
    m = minimal_polynomial(ExtensionAlgebra(B), B.generator())
    assert m.polynomial == P(zsqrt2, -3, 0, 1)
    fact = minimal_polynomial_commutes_with_embedding(m)
    assert fact.certificate["fraction_minpoly"].degree == 2


def test_domain_degree_le_of_nonzero(zsqrt2):
    m = minimal_polynomial(ExtensionAlgebra(zsqrt2), zsqrt2.generator())
    fact = degree_le_of_nonzero(m, P(ZZ, -4, 0, 2))
    assert (fact.certificate["lhs"], fact.certificate["rhs"]) == (2, 2)
    with pytest.raises(PreconditionError):
        degree_le_of_nonzero(m, Polynomial.zero(ZZ))


def test_domain_divides(zsqrt2):
    m = minimal_polynomial(ExtensionAlgebra(zsqrt2), zsqrt2.generator())
    p = P(ZZ, -2, 0, 1) * P(ZZ, 3, 2)
    assert divides(m, p).certificate["quotient"] == P(ZZ, 3, 2)
    with pytest.raises(PreconditionError):
        divides(m, P(ZZ, -3, 0, 1))
