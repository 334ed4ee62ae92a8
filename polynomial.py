"""
Univariate polynomials over an exact ``algebra_backend.Ring``.

Dense, immutable, trimmed coefficient tuples (index = power of X). The
zero polynomial has degree ``DEGREE_BOT`` (= -inf), so degree comparisons
with ints behave like the order on N u {-inf}.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple, Union

from algebra_backend import Algebra, Ring, RingHomomorphism, StructureError

DEGREE_BOT = float("-inf")

Degree = Union[int, float]


class Polynomial:
    """
    Dense polynomial sum c_i X^i over ``ring``; coefficients are canonical ring elements.
    """

    __slots__ = ("_ring", "_coeffs")

    def __init__(self, ring: Ring, coeffs: Sequence[Any] = ()):
        if not isinstance(ring, Ring):
            raise TypeError(f"Polynomial ring must be a Ring, got {type(ring).__name__}")
        clean = [ring.coerce(c) for c in coeffs]
        while clean and ring.is_zero(clean[-1]):
            clean.pop()
        self._ring = ring
        self._coeffs: Tuple[Any, ...] = tuple(clean)

    @property
    def ring(self) -> Ring:
        return self._ring

    @property
    def coeffs(self) -> Tuple[Any, ...]:
        return self._coeffs

    def is_zero(self) -> bool:
        return not self._coeffs

    @property
    def degree(self) -> Degree:
        if self.is_zero():
            return DEGREE_BOT
        return len(self._coeffs) - 1

    @property
    def nat_degree(self) -> int:
        return max(len(self._coeffs) - 1, 0)

    @property
    def leading_coefficient(self) -> Any:
        if self.is_zero():
            return self._ring.zero()
        return self._coeffs[-1]

    def is_monic(self) -> bool:
        return not self.is_zero() and self._ring.eq(self._coeffs[-1], self._ring.one())

    def coeff(self, i: int) -> Any:
        if not isinstance(i, int) or i < 0:
            raise ValueError(f"coefficient index must be a non-negative int, got {i}")
        if i < len(self._coeffs):
            return self._coeffs[i]
        return self._ring.zero()

    # ------------------------------------------------------------------
    # constructors
    # ------------------------------------------------------------------

    @staticmethod
    def zero(ring: Ring) -> "Polynomial":
        return Polynomial(ring, ())

    @staticmethod
    def one(ring: Ring) -> "Polynomial":
        return Polynomial(ring, (ring.one(),))

    @staticmethod
    def C(ring: Ring, a: Any) -> "Polynomial":
        """Constant polynomial a."""
        return Polynomial(ring, (a,))

    @staticmethod
    def X(ring: Ring) -> "Polynomial":
        return Polynomial(ring, (ring.zero(), ring.one()))

    @staticmethod
    def monomial(ring: Ring, n: int, a: Any) -> "Polynomial":
        if not isinstance(n, int) or n < 0:
            raise ValueError("monomial degree must be a non-negative int")
        return Polynomial(ring, [ring.zero()] * n + [a])

    # ------------------------------------------------------------------
    # arithmetic
    # ------------------------------------------------------------------

    def _check_same_ring(self, other: "Polynomial", op: str) -> None:
        if self._ring != other._ring:
            raise ValueError(f"Polynomial ring mismatch in {op}: {self._ring} vs {other._ring}")

    def __add__(self, other: "Polynomial") -> "Polynomial":
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_same_ring(other, "addition")
        R = self._ring
        n = max(len(self._coeffs), len(other._coeffs))
        return Polynomial(R, [R.add(self.coeff(i), other.coeff(i)) for i in range(n)])

    def __neg__(self) -> "Polynomial":
        return Polynomial(self._ring, [self._ring.neg(c) for c in self._coeffs])

    def __sub__(self, other: "Polynomial") -> "Polynomial":
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self + (-other)

    def __mul__(self, other: "Polynomial") -> "Polynomial":
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_same_ring(other, "multiplication")
        R = self._ring
        if self.is_zero() or other.is_zero():
            return Polynomial.zero(R)
        out = [R.zero()] * (len(self._coeffs) + len(other._coeffs) - 1)
        for i, a in enumerate(self._coeffs):
            for j, b in enumerate(other._coeffs):
                out[i + j] = R.add(out[i + j], R.mul(a, b))
        return Polynomial(R, out)

    def scale(self, a: Any) -> "Polynomial":
        """Scalar multiple C(a) * self."""
        return Polynomial(self._ring, [self._ring.mul(a, c) for c in self._coeffs])

    def pow(self, exponent: int) -> "Polynomial":
        if not isinstance(exponent, int) or exponent < 0:
            raise ValueError("Polynomial.pow exponent must be a non-negative int.")
        result = Polynomial.one(self._ring)
        base = self
        e = exponent
        while e:
            if e & 1:
                result = result * base
            e >>= 1
            if e:
                base = base * base
        return result

    def divmod_monic(self, divisor: "Polynomial") -> Tuple["Polynomial", "Polynomial"]:
        """
        Division with remainder by a monic divisor, valid over any commutative ring:
        self = q * divisor + r with degree(r) < degree(divisor).
        """
        if not isinstance(divisor, Polynomial):
            raise TypeError("divisor must be a Polynomial")
        self._check_same_ring(divisor, "division")
        if not divisor.is_monic():
            raise ValueError("divmod_monic requires a monic divisor")
        R = self._ring
        d = divisor.nat_degree
        rem: List[Any] = list(self._coeffs)
        quot: List[Any] = [R.zero()] * max(len(rem) - d, 0)
        for k in range(len(rem) - 1, d - 1, -1):
            c = rem[k]
            if R.is_zero(c):
                continue
            shift = k - d
            quot[shift] = c
            for i, dc in enumerate(divisor._coeffs):
                rem[shift + i] = R.sub(rem[shift + i], R.mul(c, dc))
        return Polynomial(R, quot), Polynomial(R, rem[:d])

    def divmod(self, divisor: "Polynomial") -> Tuple["Polynomial", "Polynomial"]:
        """Division with remainder by any nonzero divisor over a field."""
        if not self._ring.is_field:
            raise StructureError(f"divmod by a non-monic divisor needs a field, got {self._ring}")
        if divisor.is_zero():
            raise ZeroDivisionError("polynomial division by zero")
        u = self._ring.inv(divisor.leading_coefficient)
        q, r = self.divmod_monic(divisor.scale(u))
        return q.scale(u), r

    def is_unit(self) -> bool:
        """Units of R[X] for an integral domain R are the unit constants."""
        if not self._ring.is_domain:
            raise StructureError(f"polynomial unit test needs an integral domain, got {self._ring}")
        return self.degree == 0 and self._ring.is_unit(self._coeffs[0])

    # ------------------------------------------------------------------
    # evaluation and functoriality
    # ------------------------------------------------------------------

    def eval(self, a: Any) -> Any:
        """Evaluate at a base-ring element (Horner)."""
        R = self._ring
        acc = R.zero()
        for c in reversed(self._coeffs):
            acc = R.add(R.mul(acc, a), c)
        return acc

    def aeval(self, algebra: Algebra, x: Any) -> Any:
        """Evaluate at an element x of the A-algebra B, coefficients pushed through algebra_map."""
        if algebra.base != self._ring:
            raise ValueError(f"aeval: polynomial over {self._ring}, algebra over {algebra.base}")
        B = algebra.ring
        acc = B.zero()
        for c in reversed(self._coeffs):
            acc = B.add(B.mul(acc, x), algebra.algebra_map(c))
        return acc

    def is_root(self, a: Any) -> bool:
        return self._ring.is_zero(self.eval(a))

    def map(self, hom: RingHomomorphism) -> "Polynomial":
        """Apply a ring homomorphism coefficientwise."""
        if hom.source != self._ring:
            raise ValueError(f"map: homomorphism source {hom.source} != polynomial ring {self._ring}")
        return Polynomial(hom.target, [hom(c) for c in self._coeffs])

    def compose(self, inner: "Polynomial") -> "Polynomial":
        """self(inner(X))."""
        self._check_same_ring(inner, "composition")
        acc = Polynomial.zero(self._ring)
        for c in reversed(self._coeffs):
            acc = acc * inner + Polynomial.C(self._ring, c)
        return acc

    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Polynomial) and self._ring == other._ring and self._coeffs == other._coeffs

    def __hash__(self) -> int:
        return hash((self._ring, self._coeffs))

    def __repr__(self) -> str:
        if self.is_zero():
            return "0"
        R = self._ring
        parts: List[str] = []
        for i in range(len(self._coeffs) - 1, -1, -1):
            c = self._coeffs[i]
            if R.is_zero(c):
                continue
            mono = "" if i == 0 else ("X" if i == 1 else f"X^{i}")
            if not mono:
                parts.append(str(c))
            elif R.eq(c, R.one()):
                parts.append(mono)
            elif R.eq(c, R.neg(R.one())):
                parts.append(f"-{mono}")
            else:
                parts.append(f"{c}*{mono}")
        return " + ".join(parts).replace("+ -", "- ")


__all__ = ["DEGREE_BOT", "Polynomial"]
