#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Minimal polynomial of an integral element: definition layer + ring layer
================================================================================

Goal
----
Given an A-algebra B (free of finite rank r over A), an element x in B and an
integrality witness (a monic P over A with P(x) = 0), construct the monic
polynomial m of least degree with m(x) = 0, together with its certificate.

Construction (least-degree search, bounded by the witness)
----------------------------------------------------------
Let d = deg P. For k = 0, 1, ..., d decide whether a monic annihilator of
degree k exists, i.e. whether the linear system over A

    sum_{i<k} c_i * coord(x^i) = -coord(x^k)

is solvable (coord = A-coordinates in B). The first solvable k is the minimal
degree and m = X^k + sum c_i X^i. The search is finite because P itself is a
solution at k = d, so it never degenerates into an unbounded search.

Invariants (checked on every construction)
------------------------------------------
- m is monic and aeval(m, x) = 0.
- For every monic p with aeval(p, x) = 0: deg m <= deg p (every such p makes
  the system at k = deg p solvable, so the search stops no later than deg p).
- m depends on (A, B, x) only: the witness contributes nothing but the search
  bound, and the solver's particular solution is a deterministic function of
  the system. Two witnesses for the same x yield the same m.

Over rings with zero divisors several monic annihilators of minimal degree
may exist; the deterministic particular solution picks one of them. The field
layer (minpoly_field) shows that over fields the choice is unique.

Failure model
-------------
- PreconditionError / NotIntegralError: the caller supplied data that does not
  satisfy the contract (non-monic witness, non-annihilating polynomial, ...).
- CertificateError: an internal re-verification failed; never silently ignored.

================================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from algebra_backend import Algebra, NoSolutionError
from polynomial import Polynomial

_logger = logging.getLogger(__name__)


# =============================================================================
# Error model and configuration
# =============================================================================


class MinimalPolynomialError(RuntimeError):
    """Base class of minimal-polynomial errors (must abort, never silent)."""


class PreconditionError(MinimalPolynomialError):
    """Caller-supplied data does not satisfy the operation's contract."""


class NotIntegralError(PreconditionError):
    """The supplied polynomial is not a monic annihilator of x."""


class CertificateError(MinimalPolynomialError):
    """A derived fact failed re-verification."""


class TransportObligationError(MinimalPolynomialError):
    """A fraction-field transport obligation could not be discharged."""


@dataclass(frozen=True)
class MinpolyConfig:
    """
    - verify_certificates: re-verify every derived fact before returning it
    - max_search_degree: refuse witnesses of larger degree (None = no cap)
    - brute_force_limit: cap on candidate polynomials enumerated by finite searches
    """

    verify_certificates: bool = True
    max_search_degree: Optional[int] = None
    brute_force_limit: int = 100_000

    def __post_init__(self) -> None:
        if self.max_search_degree is not None and (
            not isinstance(self.max_search_degree, int) or self.max_search_degree < 0
        ):
            raise ValueError(f"max_search_degree must be None or int >= 0, got {self.max_search_degree}")
        if not isinstance(self.brute_force_limit, int) or self.brute_force_limit < 1:
            raise ValueError(f"brute_force_limit must be int >= 1, got {self.brute_force_limit}")


DEFAULT_CONFIG = MinpolyConfig()


@dataclass(frozen=True)
class Fact:
    """A verified statement and the data that verifies it."""

    statement: str
    certificate: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Integrality witnesses
# =============================================================================


@dataclass(frozen=True)
class IntegralityWitness:
    """
    Monic P over A with aeval(P, x) = 0. Validated on construction.
    """

    algebra: Algebra
    x: Any
    polynomial: Polynomial

    def __post_init__(self) -> None:
        if not isinstance(self.algebra, Algebra):
            raise TypeError(f"algebra must be an Algebra, got {type(self.algebra).__name__}")
        if not isinstance(self.polynomial, Polynomial):
            raise TypeError(f"polynomial must be a Polynomial, got {type(self.polynomial).__name__}")
        if self.polynomial.ring != self.algebra.base:
            raise NotIntegralError(
                f"witness polynomial is over {self.polynomial.ring}, algebra base is {self.algebra.base}"
            )
        object.__setattr__(self, "x", self.algebra.ring.coerce(self.x))
        if not self.polynomial.is_monic():
            raise NotIntegralError(f"witness polynomial {self.polynomial} is not monic")
        if not self.algebra.ring.is_zero(self.polynomial.aeval(self.algebra, self.x)):
            raise NotIntegralError(f"witness polynomial {self.polynomial} does not annihilate {self.x}")


def integrality_witness(algebra: Algebra, x: Any, polynomial: Polynomial) -> IntegralityWitness:
    return IntegralityWitness(algebra=algebra, x=x, polynomial=polynomial)


def _determinant(matrix: List[List[Polynomial]]) -> Polynomial:
    """
    Division-free determinant over a commutative ring: permutation expansion
    memoised on the set of used columns.
    """
    n = len(matrix)
    ring = matrix[0][0].ring
    memo: Dict[tuple, Polynomial] = {}

    def expand(row: int, used: frozenset) -> Polynomial:
        if row == n:
            return Polynomial.one(ring)
        key = (row, used)
        if key in memo:
            return memo[key]
        acc = Polynomial.zero(ring)
        for j in range(n):
            if j in used or matrix[row][j].is_zero():
                continue
            term = matrix[row][j] * expand(row + 1, used | {j})
            inversions = sum(1 for s in used if s > j)
            acc = acc - term if inversions % 2 else acc + term
        memo[key] = acc
        return acc

    return expand(0, frozenset())


def charpoly_witness(algebra: Algebra, x: Any) -> IntegralityWitness:
    """
    Cayley-Hamilton witness: det(X*I - M_x), M_x the matrix of multiplication
    by x on B over A. Monic of degree rank(B) and annihilates x over any
    commutative base ring, so every element of B is integral.
    """
    A = algebra.base
    M = algebra.multiplication_matrix(x)
    r = algebra.rank
    X = Polynomial.X(A)
    entries = [
        [(X if i == j else Polynomial.zero(A)) - Polynomial.C(A, M[i][j]) for j in range(r)]
        for i in range(r)
    ]
    chi = _determinant(entries)
    _logger.debug("charpoly_witness: rank=%d chi=%s", r, chi)
    return IntegralityWitness(algebra=algebra, x=x, polynomial=chi)


# =============================================================================
# Minimal polynomial (validated wrapper)
# =============================================================================


_CONSTRUCT_TOKEN = object()


@dataclass(frozen=True)
class MinimalPolynomial:
    """
    Minimal polynomial of x; only ``construct`` can create it, so monic-ness and
    the root property hold for every instance.
    """

    algebra: Algebra
    x: Any
    polynomial: Polynomial
    certificate: Dict[str, Any] = field(compare=False)
    config: MinpolyConfig = field(default=DEFAULT_CONFIG, compare=False, repr=False)
    _token: object = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self._token is not _CONSTRUCT_TOKEN:
            raise TypeError("MinimalPolynomial instances are created by construct() only")

    @property
    def degree(self) -> int:
        return self.polynomial.nat_degree

    @property
    def base(self):
        return self.algebra.base


def _power_table(algebra: Algebra, x: Any, bound: int) -> np.ndarray:
    """Column k = A-coordinates of x^k, k = 0..bound."""
    B = algebra.ring
    table = np.empty((algebra.rank, bound + 1), dtype=object)
    power = B.one()
    for k in range(bound + 1):
        for i, c in enumerate(algebra.coordinates(power)):
            table[i, k] = c
        power = B.mul(power, x)
    return table


def construct(witness: IntegralityWitness, *, config: Optional[MinpolyConfig] = None) -> MinimalPolynomial:
    """
    Least-degree monic annihilator of witness.x, searched up to deg(witness).
    """
    cfg = config or DEFAULT_CONFIG
    if not isinstance(witness, IntegralityWitness):
        raise TypeError(f"witness must be IntegralityWitness, got {type(witness).__name__}")
    algebra, x = witness.algebra, witness.x
    A = algebra.base
    bound = witness.polynomial.nat_degree
    if cfg.max_search_degree is not None and bound > cfg.max_search_degree:
        raise PreconditionError(f"witness degree {bound} exceeds max_search_degree={cfg.max_search_degree}")

    powers = _power_table(algebra, x, bound)
    found: Optional[Polynomial] = None
    for k in range(bound + 1):
        rhs = [A.neg(v) for v in powers[:, k]]
        try:
            sol = A.solve_linear(powers[:, :k].tolist(), rhs)
        except NoSolutionError:
            _logger.debug("construct: no monic annihilator of degree %d", k)
            continue
        found = Polynomial(A, list(sol) + [A.one()])
        break

    if found is None:
        raise CertificateError(
            f"least-degree search exhausted the witness bound {bound} although the witness is a solution"
        )
    if not found.is_monic() or found.nat_degree > bound:
        raise CertificateError(f"internal: search produced a malformed candidate {found}")
    if not algebra.ring.is_zero(found.aeval(algebra, x)):
        raise CertificateError(f"internal: candidate {found} does not annihilate x; abort")

    cert = {
        "mode": "minimize.v1.least_degree_search",
        "degree": found.nat_degree,
        "witness_degree": bound,
        "rank": algebra.rank,
        "algebra": str(algebra),
    }
    _logger.info("construct: minpoly(%s) = %s over %s", x, found, A)
    return MinimalPolynomial(
        algebra=algebra, x=x, polynomial=found, certificate=cert, config=cfg, _token=_CONSTRUCT_TOKEN
    )


def minimal_polynomial(algebra: Algebra, x: Any, *, config: Optional[MinpolyConfig] = None) -> MinimalPolynomial:
    """Minimal polynomial of x, integrality witnessed by the characteristic polynomial."""
    return construct(charpoly_witness(algebra, x), config=config)


def same_minimal_polynomial(
    first: IntegralityWitness, second: IntegralityWitness, *, config: Optional[MinpolyConfig] = None
) -> Fact:
    """Two witnesses for the same (A, B, x) construct the same polynomial."""
    if first.algebra != second.algebra or not first.algebra.ring.eq(first.x, second.x):
        raise PreconditionError("witnesses must refer to the same algebra and element")
    m1 = construct(first, config=config)
    m2 = construct(second, config=config)
    if m1.polynomial != m2.polynomial:
        raise CertificateError(f"construction depends on the witness: {m1.polynomial} vs {m2.polynomial}")
    return Fact(
        "construct(w1) == construct(w2)",
        {"polynomial": m1.polynomial, "witness_degrees": (first.polynomial.nat_degree, second.polynomial.nat_degree)},
    )


# =============================================================================
# Ring layer
# =============================================================================


def _require_minpoly(m: MinimalPolynomial) -> None:
    if not isinstance(m, MinimalPolynomial):
        raise TypeError(f"expected MinimalPolynomial, got {type(m).__name__}")


def _require_annihilator(m: MinimalPolynomial, p: Polynomial, *, monic: bool, nonzero: bool = False) -> None:
    """Precondition: p is over A, annihilates m.x, and is monic / nonzero if requested."""
    if not isinstance(p, Polynomial):
        raise TypeError(f"expected Polynomial, got {type(p).__name__}")
    if p.ring != m.base:
        raise PreconditionError(f"polynomial is over {p.ring}, expected {m.base}")
    if monic and not p.is_monic():
        raise PreconditionError(f"{p} is not monic")
    if nonzero and p.is_zero():
        raise PreconditionError("polynomial must be nonzero")
    if not m.algebra.ring.is_zero(p.aeval(m.algebra, m.x)):
        raise PreconditionError(f"{p} does not annihilate {m.x}")


def monic(m: MinimalPolynomial) -> Fact:
    _require_minpoly(m)
    if not m.polynomial.is_monic():
        raise CertificateError(f"minimal polynomial {m.polynomial} is not monic")
    return Fact("monic(minpoly x)", {"leading_coefficient": m.polynomial.leading_coefficient})


def is_root(m: MinimalPolynomial) -> Fact:
    _require_minpoly(m)
    value = m.polynomial.aeval(m.algebra, m.x)
    if not m.algebra.ring.is_zero(value):
        raise CertificateError(f"aeval(minpoly, x) = {value} != 0")
    return Fact("aeval(minpoly x, x) == 0", {"value": value})


def is_minimal(m: MinimalPolynomial, p: Polynomial) -> Fact:
    """deg m <= deg p for a monic annihilator p."""
    _require_minpoly(m)
    _require_annihilator(m, p, monic=True)
    if m.polynomial.degree > p.degree:
        raise CertificateError(f"monic annihilator {p} has smaller degree than minpoly {m.polynomial}")
    return Fact("degree(minpoly x) <= degree(p)", {"lhs": m.polynomial.degree, "rhs": p.degree})


def degree_le_rank(m: MinimalPolynomial) -> Fact:
    """deg m <= rank_A(B), through the Cayley-Hamilton witness."""
    _require_minpoly(m)
    chi = charpoly_witness(m.algebra, m.x).polynomial
    is_minimal(m, chi)
    return Fact("degree(minpoly x) <= rank(B/A)", {"degree": m.degree, "rank": m.algebra.rank, "charpoly": chi})


# =============================================================================
# Self-test (strict, deterministic)
# =============================================================================


def _self_test() -> Dict[str, Any]:
    from algebra_backend import ZZ, ChainRing, ExtensionAlgebra, MonogenicAlgebra

    results: Dict[str, Any] = {"ok": True, "tests": []}

    def record(name: str, passed: bool, detail: str = "") -> None:
        results["tests"].append({"name": name, "passed": passed, "detail": detail})
        if not passed:
            results["ok"] = False
            _logger.error("SELF-TEST FAILED: %s - %s", name, detail)

    try:
        B = MonogenicAlgebra(ZZ, (-2, 0, 1), domain_declared=True)
        algebra = ExtensionAlgebra(B)
        m = minimal_polynomial(algebra, B.generator())
        assert m.polynomial == Polynomial(ZZ, (-2, 0, 1))
        record("sqrt2_over_ZZ", True)
    except Exception as e:
        record("sqrt2_over_ZZ", False, str(e))

    try:
        R = ChainRing(2, 3)
        B = MonogenicAlgebra(R, (0, 0, 1))
        algebra = ExtensionAlgebra(B)
        m = minimal_polynomial(algebra, B.coerce((0, 2)))
        assert m.degree == 2 and m.polynomial.is_monic()
        record("nilpotent_over_Z8", True)
    except Exception as e:
        record("nilpotent_over_Z8", False, str(e))

    if not results["ok"]:
        raise RuntimeError("minimal_polynomial self-test failed; deployment must abort")
    return results


__all__ = [
    "MinimalPolynomialError",
    "PreconditionError",
    "NotIntegralError",
    "CertificateError",
    "TransportObligationError",
    "MinpolyConfig",
    "DEFAULT_CONFIG",
    "Fact",
    "IntegralityWitness",
    "integrality_witness",
    "charpoly_witness",
    "MinimalPolynomial",
    "construct",
    "minimal_polynomial",
    "same_minimal_polynomial",
    "monic",
    "is_root",
    "is_minimal",
    "degree_le_rank",
]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    print("Running minimal_polynomial self-test...")
    out = _self_test()
    print(out)
