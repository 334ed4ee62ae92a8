#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Minimal polynomial over fields
================================================================================

With A and B fields (every nonzero element invertible, no zero divisors) the
ring-layer facts strengthen to:

    nonzero, minimality among all nonzero annihilators, uniqueness,
    divisibility of every annihilator, positive degree, primality,
    irreducibility, the explicit form X - a on the image of A, and the
    classification of roots in A.

Every operation checks its preconditions, derives the fact from the lemmas
above it (each derivation step is an exact computation), re-verifies the
result when ``config.verify_certificates`` is set, and returns a Fact.
A contradiction during derivation is a CertificateError, never a silent
fallback.

================================================================================
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Optional

from algebra_backend import Algebra, StructureError, UnsupportedStructureError
from minimal_polynomial import (
    DEFAULT_CONFIG,
    CertificateError,
    Fact,
    MinimalPolynomial,
    MinpolyConfig,
    PreconditionError,
    _require_annihilator,
    _require_minpoly,
    construct,
    integrality_witness,
    is_minimal,
)
from polynomial import Polynomial

_logger = logging.getLogger(__name__)


def _require_field_algebra(algebra: Algebra) -> None:
    if not algebra.base.is_field or not algebra.ring.is_field:
        raise StructureError(f"field layer needs A and B fields, got {algebra}")


def _require_field_context(m: MinimalPolynomial) -> None:
    _require_minpoly(m)
    _require_field_algebra(m.algebra)


# =============================================================================
# Degree bounds, uniqueness, divisibility
# =============================================================================


def nonzero(m: MinimalPolynomial) -> Fact:
    """A monic polynomial has leading coefficient 1 != 0."""
    _require_field_context(m)
    if m.polynomial.is_zero():
        raise CertificateError("minimal polynomial is zero")
    return Fact("minpoly x != 0", {"leading_coefficient": m.polynomial.leading_coefficient})


def degree_le_of_nonzero(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """
    deg m <= deg p for every nonzero annihilator p: normalise p by its leading
    coefficient and compare with the monic bound.
    """
    _require_field_context(m)
    _require_annihilator(m, p, monic=False, nonzero=True)
    A = m.base
    normalized = p.scale(A.inv(p.leading_coefficient))
    if normalized.degree != p.degree or not normalized.is_monic():
        raise CertificateError(f"normalising {p} changed its degree")
    bound = is_minimal(m, normalized)
    return Fact(
        "degree(minpoly x) <= degree(p)",
        {"lhs": bound.certificate["lhs"], "rhs": p.degree, "normalized": normalized},
    )


def unique(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """
    A monic annihilator p that is minimal among monic annihilators equals m.

    Minimality of p is checked against m itself (deg p <= deg m), the only
    instance the argument uses: then deg p == deg m, the leading terms of
    p - m cancel, and a nonzero p - m would be an annihilator of degree < deg m.
    """
    _require_field_context(m)
    _require_annihilator(m, p, monic=True)
    if p.degree > m.polynomial.degree:
        raise PreconditionError(f"{p} is not minimal: degree {p.degree} > {m.polynomial.degree}")
    is_minimal(m, p)
    diff = p - m.polynomial
    if not diff.is_zero():
        raise CertificateError(
            f"p - minpoly = {diff} is a nonzero annihilator of degree {diff.degree} < {m.degree}"
        )
    return Fact("p == minpoly x", {"polynomial": p})


def divides(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """m | p for every annihilator p; the certificate carries the exact quotient."""
    _require_field_context(m)
    _require_annihilator(m, p, monic=False)
    quotient, remainder = p.divmod_monic(m.polynomial)
    if not remainder.is_zero():
        # remainder = p - quotient*m annihilates x and has degree < deg m
        raise CertificateError(f"nonzero remainder {remainder} annihilates x below the minimal degree")
    if m.config.verify_certificates and quotient * m.polynomial != p:
        raise CertificateError(f"quotient {quotient} does not reconstruct {p}")
    return Fact("minpoly x | p", {"quotient": quotient})


def degree_pos(m: MinimalPolynomial) -> Fact:
    """deg m >= 1: the only monic polynomial of degree 0 is 1, and aeval(1, x) = 1 != 0."""
    _require_field_context(m)
    B = m.algebra.ring
    if m.polynomial.degree == 0:
        raise CertificateError(f"minpoly is the constant 1 but aeval(1, x) = {B.one()} != 0")
    if m.polynomial.is_unit():
        raise CertificateError(f"minpoly {m.polynomial} is a unit")
    return Fact("degree(minpoly x) > 0", {"degree": m.degree})


# =============================================================================
# Primality and irreducibility
# =============================================================================


def prime(m: MinimalPolynomial) -> Fact:
    """m is nonzero, not a unit, and has the prime-divisor property (see prime_split)."""
    nonzero(m)
    degree_pos(m)
    return Fact("prime(minpoly x)", {"nonzero": True, "non_unit": True, "degree": m.degree})


def prime_split(m: MinimalPolynomial, p: Polynomial, q: Polynomial) -> Fact:
    """
    Given m | p*q, decide which factor m divides: aeval(p)*aeval(q) = 0 in the
    field B, so one factor vanishes at x and ``divides`` applies to it.
    """
    _require_field_context(m)
    for f in (p, q):
        if not isinstance(f, Polynomial) or f.ring != m.base:
            raise PreconditionError(f"expected polynomials over {m.base}")
    _, remainder = (p * q).divmod_monic(m.polynomial)
    if not remainder.is_zero():
        raise PreconditionError(f"minpoly does not divide p*q (remainder {remainder})")
    B = m.algebra.ring
    ap = p.aeval(m.algebra, m.x)
    aq = q.aeval(m.algebra, m.x)
    if not B.is_zero(B.mul(ap, aq)):
        raise CertificateError("aeval(p*q, x) != 0 although minpoly divides p*q")
    if B.is_zero(ap):
        factor, d = 0, divides(m, p)
    elif B.is_zero(aq):
        factor, d = 1, divides(m, q)
    else:
        raise CertificateError(f"zero divisors {ap} * {aq} = 0 in the field {B}")
    return Fact("minpoly x | p or minpoly x | q", {"factor": factor, "quotient": d.certificate["quotient"]})


def _monic_candidates(A, degree: int):
    pool = list(A.elements())
    for lower in itertools.product(pool, repeat=degree):
        yield Polynomial(A, list(lower) + [A.one()])


def _search_space(A, max_degree: int) -> int:
    q = sum(1 for _ in A.elements())
    return sum(q ** d for d in range(1, max_degree + 1))


def find_proper_factor(p: Polynomial, *, config: Optional[MinpolyConfig] = None) -> Optional[Polynomial]:
    """
    Exhaustive search for a monic factor of degree 1..deg(p)//2 over a finite
    field. Returns None when p has no proper factor.
    """
    cfg = config or DEFAULT_CONFIG
    A = p.ring
    if not A.is_field:
        raise StructureError(f"factor search needs a field, got {A}")
    if not A.is_finite:
        raise UnsupportedStructureError(f"exhaustive factor search needs a finite field, got {A}")
    half = p.nat_degree // 2
    if _search_space(A, half) > cfg.brute_force_limit:
        raise PreconditionError(f"factor search space exceeds brute_force_limit={cfg.brute_force_limit}")
    for d in range(1, half + 1):
        for f in _monic_candidates(A, d):
            _, r = p.divmod_monic(f)
            if r.is_zero():
                return f
    return None


def irreducible(m: MinimalPolynomial) -> Fact:
    """
    Prime implies irreducible in the integral domain A[X]. Over a finite base
    field, small enough for the configured limit, an exhaustive factor search
    confirms it independently.
    """
    pf = prime(m)
    cert: Dict[str, Any] = {"mode": "prime_implies_irreducible", "degree": pf.certificate["degree"]}
    A = m.base
    if m.config.verify_certificates and A.is_finite and _search_space(A, m.degree // 2) <= m.config.brute_force_limit:
        factor = find_proper_factor(m.polynomial, config=m.config)
        if factor is not None:
            raise CertificateError(f"minpoly {m.polynomial} has proper factor {factor}")
        cert["exhaustive"] = True
    return Fact("irreducible(minpoly x)", cert)


def aeval_ne_zero_of_degree_lt(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """A nonzero polynomial of degree < deg m does not vanish at x."""
    _require_field_context(m)
    if not isinstance(p, Polynomial) or p.ring != m.base:
        raise PreconditionError(f"expected a polynomial over {m.base}")
    if p.is_zero() or p.degree >= m.polynomial.degree:
        raise PreconditionError(f"{p} must be nonzero of degree < {m.degree}")
    value = p.aeval(m.algebra, m.x)
    if m.algebra.ring.is_zero(value):
        raise CertificateError(f"{p} annihilates x below the minimal degree")
    return Fact("aeval(p, x) != 0", {"value": value})


def eq_of_irreducible_of_monic(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """
    A monic irreducible annihilator p equals m: m | p, and a quotient of
    positive degree would exhibit m as a proper factor of p.
    """
    _require_field_context(m)
    _require_annihilator(m, p, monic=True)
    q = divides(m, p).certificate["quotient"]
    if q.degree > 0:
        raise PreconditionError(f"{p} is reducible: minpoly {m.polynomial} is a proper factor")
    if p != m.polynomial:
        raise CertificateError(f"monic {p} = unit * minpoly but differs from it")
    return Fact("p == minpoly x", {"polynomial": p})


# =============================================================================
# Explicit minimal polynomials
# =============================================================================


def algebra_map_case(algebra: Algebra, a: Any, *, config: Optional[MinpolyConfig] = None) -> MinimalPolynomial:
    """
    minpoly(algebra_map a) = X - a: X - a is a monic root, and any monic
    annihilator has degree >= 1 (degree_pos), so unique applies.
    """
    _require_field_algebra(algebra)
    A = algebra.base
    a = A.coerce(a)
    linear = Polynomial.X(A) - Polynomial.C(A, a)
    m = construct(integrality_witness(algebra, algebra.algebra_map(a), linear), config=config)
    degree_pos(m)
    unique(m, linear)
    return m


def minimal_polynomial_zero(algebra: Algebra, *, config: Optional[MinpolyConfig] = None) -> MinimalPolynomial:
    """minpoly 0 = X."""
    return algebra_map_case(algebra, algebra.base.zero(), config=config)


def minimal_polynomial_one(algebra: Algebra, *, config: Optional[MinpolyConfig] = None) -> MinimalPolynomial:
    """minpoly 1 = X - 1."""
    return algebra_map_case(algebra, algebra.base.one(), config=config)


def root_classification(m: MinimalPolynomial, y: Any) -> Any:
    """
    If y in A is a root of m then algebra_map(y) = x. X - y divides m, m is
    irreducible, so the cofactor is a unit, deg m = 1 and m = X - y.
    Returns algebra_map(y).
    """
    _require_field_context(m)
    A, B = m.base, m.algebra.ring
    y = A.coerce(y)
    if not m.polynomial.is_root(y):
        raise PreconditionError(f"{y} is not a root of {m.polynomial}")
    linear = Polynomial.X(A) - Polynomial.C(A, y)
    cofactor, remainder = m.polynomial.divmod_monic(linear)
    if not remainder.is_zero():
        raise CertificateError(f"factor theorem failed: remainder {remainder}")
    irreducible(m)
    if cofactor.degree != 0:
        raise CertificateError(f"X - {y} is a proper factor of the irreducible {m.polynomial}")
    image = m.algebra.algebra_map(y)
    if not B.eq(image, m.x):
        raise CertificateError(f"algebra_map({y}) = {image} != x = {m.x}")
    _logger.debug("root_classification: minpoly = X - %s, algebra_map(y) = x", y)
    return image


def coeff_zero_eq_zero(m: MinimalPolynomial) -> bool:
    """coeff(m, 0) == 0  <=>  x == 0. Both directions are derived and cross-checked."""
    _require_field_context(m)
    A, B = m.base, m.algebra.ring
    c0_zero = A.is_zero(m.polynomial.coeff(0))
    x_zero = B.is_zero(m.x)
    if c0_zero:
        # 0 is a root of m, so algebra_map(0) = x
        root_classification(m, A.zero())
        x_zero = True
    if B.is_zero(m.x):
        # m is a monic annihilator of 0 of minimal degree, so m = minpoly 0 = X
        unique(m, minimal_polynomial_zero(m.algebra, config=m.config).polynomial)
        if not A.is_zero(m.polynomial.coeff(0)):
            raise CertificateError("minpoly 0 has nonzero constant coefficient")
    if c0_zero != x_zero:
        raise CertificateError("constant coefficient test and x == 0 disagree")
    return c0_zero


def coeff_zero_ne_zero(m: MinimalPolynomial) -> Fact:
    _require_field_context(m)
    if m.algebra.ring.is_zero(m.x):
        raise PreconditionError("x must be nonzero")
    if coeff_zero_eq_zero(m):
        raise CertificateError("constant coefficient vanishes for nonzero x")
    return Fact("coeff(minpoly x, 0) != 0", {"coeff_0": m.polynomial.coeff(0)})


def add_algebra_map(m: MinimalPolynomial, a: Any) -> MinimalPolynomial:
    """minpoly(x + algebra_map a) = m(X - a)."""
    _require_field_context(m)
    A, B = m.base, m.algebra.ring
    a = A.coerce(a)
    X = Polynomial.X(A)
    shifted = m.polynomial.compose(X - Polynomial.C(A, a))
    target = B.add(m.x, m.algebra.algebra_map(a))
    m_shift = construct(integrality_witness(m.algebra, target, shifted), config=m.config)
    # m_shift(X + a) annihilates x, so deg m <= deg m_shift
    is_minimal(m, m_shift.polynomial.compose(X + Polynomial.C(A, a)))
    unique(m_shift, shifted)
    return m_shift


def neg(m: MinimalPolynomial) -> MinimalPolynomial:
    """minpoly(-x) = (-1)^deg m * m(-X)."""
    _require_field_context(m)
    A, B = m.base, m.algebra.ring
    sign = A.pow(A.neg(A.one()), m.degree)
    reflected = m.polynomial.compose(-Polynomial.X(A)).scale(sign)
    m_neg = construct(integrality_witness(m.algebra, B.neg(m.x), reflected), config=m.config)
    back_sign = A.pow(A.neg(A.one()), m_neg.degree)
    is_minimal(m, m_neg.polynomial.compose(-Polynomial.X(A)).scale(back_sign))
    unique(m_neg, reflected)
    return m_neg


def _self_test() -> Dict[str, Any]:
    from fractions import Fraction

    from algebra_backend import QQ, ExtensionAlgebra, IdentityAlgebra, MonogenicAlgebra

    results: Dict[str, Any] = {"ok": True, "tests": []}

    def record(name: str, passed: bool, detail: str = "") -> None:
        results["tests"].append({"name": name, "passed": passed, "detail": detail})
        if not passed:
            results["ok"] = False
            _logger.error("SELF-TEST FAILED: %s - %s", name, detail)

    try:
        m = algebra_map_case(IdentityAlgebra(QQ), 3)
        assert m.polynomial.coeffs == (Fraction(-3), Fraction(1))
        record("algebra_map_case_QQ", True)
    except Exception as e:
        record("algebra_map_case_QQ", False, str(e))

    try:
        K = MonogenicAlgebra(QQ, (-2, 0, 1), field_declared=True)
        from minimal_polynomial import minimal_polynomial

        m = minimal_polynomial(ExtensionAlgebra(K), K.generator())
        p = m.polynomial * (Polynomial.X(QQ) - Polynomial.C(QQ, 5))
        assert divides(m, p).certificate["quotient"] == Polynomial.X(QQ) - Polynomial.C(QQ, 5)
        record("divides_sqrt2", True)
    except Exception as e:
        record("divides_sqrt2", False, str(e))

    if not results["ok"]:
        raise RuntimeError("minpoly_field self-test failed; deployment must abort")
    return results


__all__ = [
    "nonzero",
    "degree_le_of_nonzero",
    "unique",
    "divides",
    "degree_pos",
    "prime",
    "prime_split",
    "irreducible",
    "find_proper_factor",
    "aeval_ne_zero_of_degree_lt",
    "eq_of_irreducible_of_monic",
    "algebra_map_case",
    "minimal_polynomial_zero",
    "minimal_polynomial_one",
    "root_classification",
    "coeff_zero_eq_zero",
    "coeff_zero_ne_zero",
    "add_algebra_map",
    "neg",
]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    print("Running minpoly_field self-test...")
    out = _self_test()
    print(out)
