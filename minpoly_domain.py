#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Minimal polynomial over integral domains: transport through fraction fields
================================================================================

For integral domains A, B the field-layer results are obtained by embedding
both into their fields of fractions,

        A  ----algebra_map---->  B
        |                        |
    emb_A                     emb_B
        v                        v
     Frac(A) --induced map--> Frac(B)

applying minpoly_field there, and pulling the (in)equalities back along
emb_A, which preserves degree and zero-ness.

Transport obligations (discharged explicitly, never assumed)
------------------------------------------------------------
(a) emb_A is injective: its kernel is trivial on every element the transport
    pushes through it.
(b) The square commutes: emb_B(algebra_map a) == induced(emb_A a) for those
    elements.
(c) The induced map Frac(A) -> Frac(B) is injective: a ring map out of a field
    into a nonzero ring has trivial kernel, checked through 1 |-> 1 != 0.
Evaluation is compatible with the square: aeval(emb_A p, emb_B x) equals
emb_B(aeval(p, x)); this is checked for every transported witness.

If minpoly over Frac(A) has strictly smaller degree than the image of the
minpoly over A (A not integrally closed at x), the commuting-square equality
is false and TransportObligationError is raised.

================================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

import minpoly_field
from algebra_backend import Algebra, StructureError
from fraction_field import FractionFieldEmbedding, fraction_field, induced_fraction_algebra
from minimal_polynomial import (
    CertificateError,
    Fact,
    IntegralityWitness,
    MinimalPolynomial,
    TransportObligationError,
    _require_annihilator,
    _require_minpoly,
    construct,
)
from polynomial import Polynomial

_logger = logging.getLogger(__name__)


def _require_domain_algebra(algebra: Algebra) -> None:
    if not algebra.base.is_domain or not algebra.ring.is_domain:
        raise StructureError(f"domain layer needs A and B integral domains, got {algebra}")


# =============================================================================
# Transport obligations
# =============================================================================


def base_embedding_injective(embedding: FractionFieldEmbedding, elements: Iterable[Any]) -> Fact:
    """Obligation (a)."""
    checked = list(elements)
    if not embedding.kernel_trivial_on(checked):
        raise TransportObligationError(f"{embedding.source} -> {embedding.target} has a nontrivial kernel")
    return Fact("ker(A -> Frac A) = 0", {"checked": len(checked)})


def embedding_square_commutes(
    algebra: Algebra,
    fraction_algebra: Algebra,
    base_embedding: FractionFieldEmbedding,
    algebra_embedding: FractionFieldEmbedding,
    elements: Iterable[Any],
) -> Fact:
    """Obligation (b): A -> B -> Frac(B) equals A -> Frac(A) -> Frac(B)."""
    FB = fraction_algebra.ring
    checked = 0
    for a in elements:
        via_b = algebra_embedding(algebra.algebra_map(a))
        via_frac_a = fraction_algebra.algebra_map(base_embedding(a))
        if not FB.eq(via_b, via_frac_a):
            raise TransportObligationError(f"embedding square does not commute at {a}: {via_b} != {via_frac_a}")
        checked += 1
    return Fact("emb_B . algebraMap == induced . emb_A", {"checked": checked})


def induced_algebra_injective(fraction_algebra: Algebra) -> Fact:
    """Obligation (c)."""
    FA, FB = fraction_algebra.base, fraction_algebra.ring
    if not FA.is_field:
        raise TransportObligationError(f"{FA} is not a field")
    if FB.is_zero(FB.one()):
        raise TransportObligationError(f"{FB} is the zero ring")
    if not FB.eq(fraction_algebra.algebra_map(FA.one()), FB.one()):
        raise TransportObligationError("induced map does not preserve 1")
    return Fact("Frac(A) -> Frac(B) injective", {"reason": "ring map out of a field into a nonzero ring"})


@dataclass(frozen=True)
class FractionFieldTransport:
    algebra: Algebra
    fraction_algebra: Algebra
    base_embedding: FractionFieldEmbedding
    algebra_embedding: FractionFieldEmbedding
    obligations: Tuple[Fact, ...]

    def push_polynomial(self, p: Polynomial) -> Polynomial:
        return self.base_embedding.map_poly(p)

    def push_element(self, b: Any) -> Any:
        return self.algebra_embedding(b)


def fraction_field_transport(algebra: Algebra, elements: Iterable[Any] = ()) -> FractionFieldTransport:
    """Build the square of embeddings and discharge (a)-(c) on ``elements`` (plus 0 and 1)."""
    _require_domain_algebra(algebra)
    A = algebra.base
    touched = [A.zero(), A.one()] + [A.coerce(a) for a in elements]
    base_embedding = fraction_field(A)
    algebra_embedding = fraction_field(algebra.ring)
    fraction_algebra = induced_fraction_algebra(algebra)
    if fraction_algebra.base != base_embedding.target or fraction_algebra.ring != algebra_embedding.target:
        raise TransportObligationError(f"induced algebra {fraction_algebra} does not match Frac(A), Frac(B)")
    obligations = (
        base_embedding_injective(base_embedding, touched),
        embedding_square_commutes(algebra, fraction_algebra, base_embedding, algebra_embedding, touched),
        induced_algebra_injective(fraction_algebra),
    )
    return FractionFieldTransport(algebra, fraction_algebra, base_embedding, algebra_embedding, obligations)


# =============================================================================
# Transported results
# =============================================================================


def transport_to_fraction_field(witness: IntegralityWitness) -> IntegralityWitness:
    """x integral over A  =>  emb_B(x) integral over Frac(A), through the pushed witness."""
    if not isinstance(witness, IntegralityWitness):
        raise TypeError(f"witness must be IntegralityWitness, got {type(witness).__name__}")
    transport = fraction_field_transport(witness.algebra, witness.polynomial.coeffs)
    pushed = transport.push_polynomial(witness.polynomial)
    x_frac = transport.push_element(witness.x)
    FB = transport.fraction_algebra.ring
    value = pushed.aeval(transport.fraction_algebra, x_frac)
    expected = transport.push_element(witness.polynomial.aeval(witness.algebra, witness.x))
    if not FB.eq(value, expected):
        raise TransportObligationError("evaluation does not commute with the fraction-field embeddings")
    return IntegralityWitness(algebra=transport.fraction_algebra, x=x_frac, polynomial=pushed)


def minimal_polynomial_commutes_with_embedding(m: MinimalPolynomial) -> Fact:
    """
    map(m, A -> Frac A) == minpoly over Frac(A) of emb_B(x): the image is a
    monic root of the same degree, so the field-layer ``unique`` applies.
    """
    _require_minpoly(m)
    _require_domain_algebra(m.algebra)
    pushed_witness = transport_to_fraction_field(
        IntegralityWitness(algebra=m.algebra, x=m.x, polynomial=m.polynomial)
    )
    m_frac = construct(pushed_witness, config=m.config)
    mapped = pushed_witness.polynomial
    if not mapped.is_monic():
        raise TransportObligationError(f"image {mapped} of a monic polynomial is not monic")
    if mapped.degree > m_frac.polynomial.degree:
        raise TransportObligationError(
            f"minpoly over {m_frac.base} has degree {m_frac.degree} < {m.degree}: "
            f"{m.base} is not integrally closed at x"
        )
    minpoly_field.unique(m_frac, mapped)
    _logger.info("transport: map(minpoly over %s) == minpoly over %s = %s", m.base, m_frac.base, mapped)
    return Fact("map(minpoly_A x) == minpoly_FracA x'", {"mapped": mapped, "fraction_minpoly": m_frac})


def degree_le_of_nonzero(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """deg m <= deg p for every nonzero annihilator p over the domain A."""
    _require_minpoly(m)
    _require_domain_algebra(m.algebra)
    _require_annihilator(m, p, monic=False, nonzero=True)
    m_frac = minimal_polynomial_commutes_with_embedding(m).certificate["fraction_minpoly"]
    transport = fraction_field_transport(m.algebra, p.coeffs)
    p_frac = transport.push_polynomial(p)
    bound = minpoly_field.degree_le_of_nonzero(m_frac, p_frac)
    # pull back: deg m == deg m_frac and deg p == deg p_frac
    if m.polynomial.degree != bound.certificate["lhs"] or p.degree != bound.certificate["rhs"]:
        raise CertificateError("degrees changed along the fraction-field embedding")
    return Fact("degree(minpoly x) <= degree(p)", {"lhs": m.polynomial.degree, "rhs": p.degree})


def divides(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """
    m | p over the domain A: the remainder of p by the monic m maps to the
    remainder over Frac(A), which vanishes there; injectivity pulls it back.
    """
    _require_minpoly(m)
    _require_domain_algebra(m.algebra)
    _require_annihilator(m, p, monic=False)
    quotient, remainder = p.divmod_monic(m.polynomial)
    m_frac = minimal_polynomial_commutes_with_embedding(m).certificate["fraction_minpoly"]
    transport = fraction_field_transport(m.algebra, list(p.coeffs) + list(remainder.coeffs) + list(quotient.coeffs))
    frac_quotient = minpoly_field.divides(m_frac, transport.push_polynomial(p)).certificate["quotient"]
    if transport.push_polynomial(quotient) != frac_quotient:
        raise CertificateError("quotient over A does not map to the quotient over Frac(A)")
    if not remainder.is_zero():
        raise CertificateError(f"remainder {remainder} is nonzero although its image vanishes")
    return Fact("minpoly x | p", {"quotient": quotient})


def _self_test() -> Dict[str, Any]:
    from algebra_backend import ZZ, ExtensionAlgebra, MonogenicAlgebra

    results: Dict[str, Any] = {"ok": True, "tests": []}

    def record(name: str, passed: bool, detail: str = "") -> None:
        results["tests"].append({"name": name, "passed": passed, "detail": detail})
        if not passed:
            results["ok"] = False
            _logger.error("SELF-TEST FAILED: %s - %s", name, detail)

    try:
        from minimal_polynomial import minimal_polynomial

        B = MonogenicAlgebra(ZZ, (-2, 0, 1), domain_declared=True)
        m = minimal_polynomial(ExtensionAlgebra(B), B.generator())
        fact = minimal_polynomial_commutes_with_embedding(m)
        assert fact.certificate["mapped"] == fact.certificate["fraction_minpoly"].polynomial
        record("sqrt2_transport", True)
    except Exception as e:
        record("sqrt2_transport", False, str(e))

    if not results["ok"]:
        raise RuntimeError("minpoly_domain self-test failed; deployment must abort")
    return results


__all__ = [
    "base_embedding_injective",
    "embedding_square_commutes",
    "induced_algebra_injective",
    "FractionFieldTransport",
    "fraction_field_transport",
    "transport_to_fraction_field",
    "minimal_polynomial_commutes_with_embedding",
    "degree_le_of_nonzero",
    "divides",
]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    print("Running minpoly_domain self-test...")
    out = _self_test()
    print(out)
