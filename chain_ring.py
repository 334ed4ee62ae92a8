#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Chain ring Z/(p^n)Z: specification and exact linear-system solving
================================================================================

Goal
----
Decide, over the chain ring R = Z/(p^n)Z, whether a linear system

    A c = b        (A: rows x cols, entries in R)

has a solution, and return one deterministic particular solution if it does.
This is the solvability oracle used by the least-degree search of the
minimal-polynomial constructor when the base ring is not a domain.

Mathematical notes
------------------
1) Zero divisors are handled exactly:
   - every nonzero element of R is p^v * u with u a unit and v = v_p(x) < n;
   - pivots are chosen with minimal p-adic valuation over the whole remaining
     submatrix, so every other entry of the pivot row/column is a multiple of
     the pivot and elimination never needs to invert a non-unit.
2) The elimination is two-sided (row operations on [A|b], column operations
   tracked in V), giving D = U A V with D diagonal and U, V invertible.
   Solvability is then read off D coordinate by coordinate:
       p^{v_i} u_i y_i = (U b)_i   is solvable  <=>  v_p((U b)_i) >= v_i
   and rows beyond the rank require (U b)_i = 0.
3) No heuristics, no floating point. An unsolvable system raises
   NoSolutionError; internal inconsistencies raise RuntimeError.

================================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

_logger = logging.getLogger(__name__)


# =============================================================================
# Chain ring specification
# =============================================================================


@dataclass(frozen=True)
class ChainRingSpec:
    """
    Specification of the chain ring R = Z/(p^n)Z.

    - p must be prime (not tested here; the caller guarantees it)
    - n >= 1
    """

    p: int
    n: int

    def __post_init__(self) -> None:
        if not isinstance(self.p, int) or self.p < 2:
            raise ValueError(f"p must be int >= 2, got {self.p}")
        if not isinstance(self.n, int) or self.n < 1:
            raise ValueError(f"n must be int >= 1, got {self.n}")

    @property
    def modulus(self) -> int:
        return int(self.p) ** int(self.n)

    def normalize(self, x: int) -> int:
        if not isinstance(x, int):
            raise TypeError(f"ring element must be int, got {type(x).__name__}")
        return int(x % self.modulus)

    def vp(self, x: int) -> int:
        """
        p-adic valuation v_p(x) inside Z/p^nZ, truncated:
          - v_p(0) := n
          - otherwise largest v < n such that p^v | x (as integer representative)
        """
        xx = int(self.normalize(x))
        if xx == 0:
            return int(self.n)
        v = 0
        p = int(self.p)
        n = int(self.n)
        while v < n and (xx % p == 0):
            xx //= p
            v += 1
        return int(v)

    def unit_part(self, x: int) -> int:
        """u with x = p^v * u (mod p^n), v = v_p(x); requires x != 0."""
        xx = self.normalize(x)
        if xx == 0:
            raise ZeroDivisionError("0 has no unit part in Z/p^nZ")
        return xx // (self.p ** self.vp(xx))

    def inverse(self, x: int) -> int:
        """Inverse of a unit of Z/p^nZ."""
        xx = self.normalize(x)
        if xx % self.p == 0:
            raise ZeroDivisionError(f"{xx} is not a unit in Z/{self.p}^{self.n}Z")
        return pow(xx, -1, self.modulus)


class NoSolutionError(RuntimeError):
    """
    Strictly unsolvable: not "could not compute", but no solution exists
    in the ring at hand.
    """


@dataclass(frozen=True)
class LinearSystemSolution:
    """
    A solution of A x = b over Z/p^nZ.
    """

    x: List[int]  # length cols, in [0, p^n-1]
    spec: ChainRingSpec
    certificate: Dict[str, Any]


def _mat_vec_mod(A: List[List[int]], x: List[int], mod: int) -> List[int]:
    out: List[int] = []
    for row in A:
        s = 0
        for aij, xj in zip(row, x):
            s += int(aij) * int(xj)
        out.append(int(s % mod))
    return out


def _check_rectangular(A: Sequence[Sequence[int]], b: Sequence[int]) -> int:
    if len(A) != len(b):
        raise ValueError("A and b row mismatch")
    if not A:
        return 0
    m = len(A[0])
    for row in A:
        if len(row) != m:
            raise ValueError("A is not rectangular")
    return m


# =============================================================================
# Z/p^nZ linear systems: minimal-valuation diagonal reduction
# =============================================================================


def _diagonalize_zpn(
    A: List[List[int]],
    b: List[int],
    spec: ChainRingSpec,
    cols: int,
) -> Tuple[List[List[int]], List[int], List[List[int]], int]:
    """
    Reduce [A|b] in place to D = U A V. Returns (D, U b, V, rank).
    """
    mod = spec.modulus
    rows = len(A)
    V = [[1 if i == j else 0 for j in range(cols)] for i in range(cols)]

    rank = 0
    while rank < min(rows, cols):
        # pivot: minimal valuation over the remaining submatrix
        best = None
        best_v = spec.n
        for i in range(rank, rows):
            for j in range(rank, cols):
                v = spec.vp(A[i][j])
                if v < best_v:
                    best, best_v = (i, j), v
                    if v == 0:
                        break
            if best_v == 0:
                break
        if best is None:
            break

        pi, pj = best
        if pi != rank:
            A[rank], A[pi] = A[pi], A[rank]
            b[rank], b[pi] = b[pi], b[rank]
        if pj != rank:
            for row in A:
                row[rank], row[pj] = row[pj], row[rank]
            for row in V:
                row[rank], row[pj] = row[pj], row[rank]

        p_v = spec.p ** best_v
        u_inv = spec.inverse(spec.unit_part(A[rank][rank]))

        # clear the pivot column (rows)
        for i in range(rows):
            if i == rank or A[i][rank] == 0:
                continue
            factor = ((A[i][rank] // p_v) * u_inv) % mod
            A[i] = [(A[i][j] - factor * A[rank][j]) % mod for j in range(cols)]
            b[i] = (b[i] - factor * b[rank]) % mod
        # clear the pivot row (columns)
        for j in range(cols):
            if j == rank or A[rank][j] == 0:
                continue
            factor = ((A[rank][j] // p_v) * u_inv) % mod
            for row in A:
                row[j] = (row[j] - factor * row[rank]) % mod
            for row in V:
                row[j] = (row[j] - factor * row[rank]) % mod
        rank += 1

    return A, b, V, rank


def solve_linear_system_zpn(
    A: Sequence[Sequence[int]],
    b: Sequence[int],
    spec: ChainRingSpec,
) -> LinearSystemSolution:
    """
    Solve A x = b over Z/p^nZ (strict: either a solution or NoSolutionError).

    Free variables are set to 0, and each pivot coordinate takes its
    canonical representative, so the result is a deterministic function of
    (A, b).
    """
    if not isinstance(spec, ChainRingSpec):
        raise TypeError(f"spec must be ChainRingSpec, got {type(spec).__name__}")
    m = _check_rectangular(A, b)
    mod = spec.modulus

    A_norm = [[spec.normalize(int(aij)) for aij in row] for row in A]
    b_norm = [spec.normalize(int(bi)) for bi in b]

    if m == 0:
        # no unknowns: solvable iff b == 0
        if any(bi != 0 for bi in b_norm):
            raise NoSolutionError("No solution: empty system with nonzero right-hand side")
        return LinearSystemSolution(x=[], spec=spec, certificate={"mode": "v2.no_unknowns"})

    D, ub, V, rank = _diagonalize_zpn([list(r) for r in A_norm], list(b_norm), spec, m)

    for i in range(rank, len(D)):
        if ub[i] != 0:
            raise NoSolutionError(f"No solution: residual row {i} is nonzero beyond rank {rank}")

    y = [0] * m
    for i in range(rank):
        v = spec.vp(D[i][i])
        if spec.vp(ub[i]) < v:
            raise NoSolutionError(
                f"No solution at pivot {i}: v_p(rhs)={spec.vp(ub[i])} < v_p(pivot)={v}"
            )
        p_v = spec.p ** v
        y[i] = ((ub[i] // p_v) * spec.inverse(spec.unit_part(D[i][i]))) % (mod // p_v)

    x = [sum(V[i][j] * y[j] for j in range(m)) % mod for i in range(m)]

    # sanity verify
    Ax = _mat_vec_mod(A_norm, x, mod=mod)
    if any(((axi - bi) % mod) != 0 for axi, bi in zip(Ax, b_norm)):
        raise RuntimeError("internal: diagonal reduction produced a non-solution; abort")

    _logger.debug("solve_linear_system_zpn: rows=%d cols=%d rank=%d over Z/%d^%dZ", len(A), m, rank, spec.p, spec.n)
    cert = {
        "mode": "v2.valuation_diagonalization",
        "p": spec.p,
        "n": spec.n,
        "rows": len(A),
        "cols": m,
        "rank": rank,
    }
    return LinearSystemSolution(x=x, spec=spec, certificate=cert)


# =============================================================================
# Self-test (strict, deterministic)
# =============================================================================


def _self_test() -> Dict[str, Any]:
    """
    Small deterministic checks, including the singular-mod-p case where a
    naive mod-p-then-lift solver picks a particular solution that does not lift.
    """
    results: Dict[str, Any] = {"ok": True, "tests": []}

    def record(name: str, passed: bool, detail: str = "") -> None:
        results["tests"].append({"name": name, "passed": passed, "detail": detail})
        if not passed:
            results["ok"] = False
            _logger.error("SELF-TEST FAILED: %s - %s", name, detail)

    spec = ChainRingSpec(p=2, n=2)
    try:
        sol = solve_linear_system_zpn([[2]], [2], spec)
        assert (2 * sol.x[0]) % 4 == 2
        record("singular_mod_p_lifts", True)
    except Exception as e:
        record("singular_mod_p_lifts", False, str(e))

    try:
        solve_linear_system_zpn([[2]], [1], spec)
        record("unit_rhs_against_nonunit_pivot", False, "expected NoSolutionError")
    except NoSolutionError:
        record("unit_rhs_against_nonunit_pivot", True)

    if not results["ok"]:
        raise RuntimeError("chain_ring self-test failed; deployment must abort")
    return results


__all__ = [
    "ChainRingSpec",
    "LinearSystemSolution",
    "NoSolutionError",
    "solve_linear_system_zpn",
]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    print("Running chain_ring self-test...")
    out = _self_test()
    print(out)
