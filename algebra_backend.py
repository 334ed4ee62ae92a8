"""Exact algebra backend: rings, fields, integral domains and finite free algebras.

The goal of this module is to expose a minimal, deterministic API for the
structures the minimal-polynomial layers are written against:

* ``Ring`` and its concrete instances ``ZZ`` (integers), ``QQ`` (rationals,
  exact ``fractions.Fraction`` arithmetic), ``ChainRing(p, n)`` (Z/p^nZ, a field
  when n == 1) and ``MonogenicAlgebra`` (A[t]/(f) for a monic f);
* ``RingHomomorphism`` for structure maps and embeddings;
* ``Algebra``: an A-algebra B that is free of finite rank over A, with its
  structure map ``algebra_map: A -> B`` and A-coordinates on B.

Every ring exposes ``solve_linear``: one deterministic particular solution of a
linear system over the ring, or ``NoSolutionError``.  Fields use the
numpy-backed Gaussian elimination of ``Matrix``; ZZ uses unimodular
diagonalisation; Z/p^nZ delegates to ``chain_ring``.

Structural flags (``is_field``/``is_domain``) of a ``MonogenicAlgebra`` are
declared by the caller, the same way ``ChainRingSpec`` trusts the caller that
p is prime.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Callable, Iterable, Iterator, List, Sequence, Tuple

import numpy as _np

from chain_ring import ChainRingSpec, NoSolutionError, solve_linear_system_zpn


class AlgebraError(RuntimeError):
    """Base error for the algebra backend."""


class StructureError(AlgebraError):
    """A ring lacks the structure (field / integral domain) an operation needs."""


class UnsupportedStructureError(AlgebraError):
    """The backend has no implementation for the requested structure."""


# ---------------------------------------------------------------------------
# Ring hierarchy
# ---------------------------------------------------------------------------


class Ring(ABC):
    """Commutative ring with identity. Elements are plain hashable Python values."""

    is_field = False
    is_domain = False

    @abstractmethod
    def zero(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def one(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def coerce(self, a: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def add(self, a: Any, b: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def neg(self, a: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def mul(self, a: Any, b: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def is_unit(self, a: Any) -> bool:
        raise NotImplementedError

    @abstractmethod
    def inv(self, a: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def solve_linear(self, rows: Sequence[Sequence[Any]], rhs: Sequence[Any]) -> List[Any]:
        """One particular solution c of rows * c = rhs, or NoSolutionError."""
        raise NotImplementedError

    def sub(self, a: Any, b: Any) -> Any:
        return self.add(a, self.neg(b))

    def eq(self, a: Any, b: Any) -> bool:
        return self.coerce(a) == self.coerce(b)

    def is_zero(self, a: Any) -> bool:
        return self.eq(a, self.zero())

    def pow(self, a: Any, exponent: int) -> Any:
        if not isinstance(exponent, int) or exponent < 0:
            raise ValueError("Ring.pow exponent must be a non-negative int.")
        result = self.one()
        base = self.coerce(a)
        e = exponent
        while e:
            if e & 1:
                result = self.mul(result, base)
            e >>= 1
            if e:
                base = self.mul(base, base)
        return result

    def sum(self, items: Iterable[Any]) -> Any:
        acc = self.zero()
        for a in items:
            acc = self.add(acc, a)
        return acc

    @property
    def is_finite(self) -> bool:
        return False

    def elements(self) -> Iterator[Any]:
        raise UnsupportedStructureError(f"{self} is not a finite ring")


class Field(Ring):
    """Ring in which every nonzero element is invertible."""

    is_field = True
    is_domain = True

    def is_unit(self, a: Any) -> bool:
        return not self.is_zero(a)

    def solve_linear(self, rows: Sequence[Sequence[Any]], rhs: Sequence[Any]) -> List[Any]:
        return Matrix(rows, ring=self, ncols=_ncols(rows)).solve_right(rhs)


def _ncols(rows: Sequence[Sequence[Any]]) -> int:
    if len(rows) == 0:
        return 0
    return len(rows[0])


# ---------------------------------------------------------------------------
# Linear algebra over a field (object-dtype numpy arrays, exact entries)
# ---------------------------------------------------------------------------


class Matrix:
    def __init__(self, data, ring: Ring, ncols: int = None):
        rows = len(data)
        cols = ncols if ncols is not None else _ncols(data)
        self.data = _np.empty((rows, cols), dtype=object)
        for i in range(rows):
            if len(data[i]) != cols:
                raise ValueError("Matrix rows must have equal length")
            for j in range(cols):
                self.data[i, j] = ring.coerce(data[i][j])
        self.ring = ring

    def nrows(self):
        return self.data.shape[0]

    def ncols(self):
        return self.data.shape[1]

    def __getitem__(self, key):
        return self.data[key]

    def _solve_linear_system(self, b):
        F = self.ring
        if not F.is_field:
            raise StructureError(f"Gaussian elimination needs a field, got {F}")
        A = [[self.data[i, j] for j in range(self.ncols())] for i in range(self.nrows())]
        b = [F.coerce(b[i]) for i in range(len(b))]
        n_rows, n_cols = self.nrows(), self.ncols()
        row = 0
        col = 0
        while row < n_rows and col < n_cols:
            pivot = None
            for r in range(row, n_rows):
                if not F.is_zero(A[r][col]):
                    pivot = r
                    break
            if pivot is None:
                col += 1
                continue
            if pivot != row:
                A[row], A[pivot] = A[pivot], A[row]
                b[row], b[pivot] = b[pivot], b[row]
            inv = F.inv(A[row][col])
            A[row] = [F.mul(inv, v) for v in A[row]]
            b[row] = F.mul(inv, b[row])
            for r in range(n_rows):
                if r == row:
                    continue
                factor = A[r][col]
                if F.is_zero(factor):
                    continue
                A[r] = [F.sub(A[r][c], F.mul(factor, A[row][c])) for c in range(n_cols)]
                b[r] = F.sub(b[r], F.mul(factor, b[row]))
            row += 1
            col += 1
        solution = [F.zero() for _ in range(n_cols)]
        for r in range(n_rows):
            leading = None
            for c in range(n_cols):
                if not F.is_zero(A[r][c]):
                    leading = c
                    break
            if leading is None:
                if not F.is_zero(b[r]):
                    raise NoSolutionError("Linear system is inconsistent")
                continue
            solution[leading] = b[r]
        return solution

    def solve_right(self, b: Sequence[Any]) -> List[Any]:
        if len(b) != self.nrows():
            raise ValueError("right-hand side length mismatch")
        return self._solve_linear_system(b)

    def __repr__(self):  # pragma: no cover - debug
        return f"Matrix({self.data})"


# ---------------------------------------------------------------------------
# Concrete rings
# ---------------------------------------------------------------------------


def _solve_integer_system(A: Sequence[Sequence[int]], b: Sequence[int]) -> List[int]:
    """
    Solve A x = b over ZZ by unimodular row/column operations (D = U A V,
    D diagonal). Free variables are 0; raises NoSolutionError.
    """
    rows = len(A)
    cols = _ncols(A)
    M = [[int(v) for v in row] for row in A]
    rhs = [int(v) for v in b]
    if cols == 0:
        if any(rhs):
            raise NoSolutionError("No solution: empty system with nonzero right-hand side")
        return []
    V = [[1 if i == j else 0 for j in range(cols)] for i in range(cols)]

    def swap_cols(j1: int, j2: int) -> None:
        for row in M:
            row[j1], row[j2] = row[j2], row[j1]
        for row in V:
            row[j1], row[j2] = row[j2], row[j1]

    def move_to_pivot(i: int, j: int, r: int) -> None:
        if i != r:
            M[r], M[i] = M[i], M[r]
            rhs[r], rhs[i] = rhs[i], rhs[r]
        if j != r:
            swap_cols(r, j)

    r = 0
    while r < min(rows, cols):
        nonzero = [(abs(M[i][j]), i, j) for i in range(r, rows) for j in range(r, cols) if M[i][j] != 0]
        if not nonzero:
            break
        _, i0, j0 = min(nonzero)
        move_to_pivot(i0, j0, r)
        while True:
            piv = M[r][r]
            for i in range(r + 1, rows):
                q = M[i][r] // piv
                if q:
                    M[i] = [M[i][c] - q * M[r][c] for c in range(cols)]
                    rhs[i] -= q * rhs[r]
            for j in range(r + 1, cols):
                q = M[r][j] // piv
                if q:
                    for row in M:
                        row[j] -= q * row[r]
                    for row in V:
                        row[j] -= q * row[r]
            leftovers = [(abs(M[i][r]), i, r) for i in range(r + 1, rows) if M[i][r] != 0]
            leftovers += [(abs(M[r][j]), r, j) for j in range(r + 1, cols) if M[r][j] != 0]
            if not leftovers:
                break
            _, i1, j1 = min(leftovers)
            move_to_pivot(i1, j1, r)
        r += 1

    for i in range(r, rows):
        if rhs[i] != 0:
            raise NoSolutionError(f"No integer solution: residual row {i} is nonzero beyond rank {r}")
    y = [0] * cols
    for i in range(r):
        if rhs[i] % M[i][i] != 0:
            raise NoSolutionError(f"No integer solution: {M[i][i]} does not divide {rhs[i]}")
        y[i] = rhs[i] // M[i][i]
    x = [sum(V[i][j] * y[j] for j in range(cols)) for i in range(cols)]

    for row, bi in zip(A, b):
        if sum(int(aij) * xj for aij, xj in zip(row, x)) != int(bi):
            raise RuntimeError("internal: integer diagonalisation produced a non-solution; abort")
    return x


@dataclass(frozen=True)
class IntegerRing(Ring):
    is_domain = True

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def coerce(self, a: Any) -> int:
        if isinstance(a, Fraction):
            if a.denominator != 1:
                raise TypeError(f"{a} is not an integer")
            return int(a.numerator)
        if not isinstance(a, int) or isinstance(a, bool):
            raise TypeError(f"ZZ element must be int, got {type(a).__name__}")
        return a

    def add(self, a, b):
        return self.coerce(a) + self.coerce(b)

    def neg(self, a):
        return -self.coerce(a)

    def mul(self, a, b):
        return self.coerce(a) * self.coerce(b)

    def is_unit(self, a) -> bool:
        return self.coerce(a) in (1, -1)

    def inv(self, a):
        if not self.is_unit(a):
            raise ZeroDivisionError(f"{a} is not a unit in ZZ")
        return self.coerce(a)

    def solve_linear(self, rows, rhs):
        return _solve_integer_system(
            [[self.coerce(v) for v in row] for row in rows], [self.coerce(v) for v in rhs]
        )

    def __str__(self) -> str:
        return "ZZ"


@dataclass(frozen=True)
class RationalField(Field):
    def zero(self) -> Fraction:
        return Fraction(0)

    def one(self) -> Fraction:
        return Fraction(1)

    def coerce(self, a: Any) -> Fraction:
        if isinstance(a, bool) or not isinstance(a, (int, Fraction)):
            raise TypeError("QQ elements must be int or Fraction for exactness.")
        return Fraction(a)

    def add(self, a, b):
        return self.coerce(a) + self.coerce(b)

    def neg(self, a):
        return -self.coerce(a)

    def mul(self, a, b):
        return self.coerce(a) * self.coerce(b)

    def inv(self, a):
        a = self.coerce(a)
        if a == 0:
            raise ZeroDivisionError("Cannot invert zero")
        return 1 / a

    def __str__(self) -> str:
        return "QQ"


@dataclass(frozen=True)
class ChainRing(Ring):
    """Z/p^nZ. A field (GF(p)) exactly when n == 1."""

    p: int
    n: int = 1

    def __post_init__(self) -> None:
        ChainRingSpec(self.p, self.n)

    @property
    def spec(self) -> ChainRingSpec:
        return ChainRingSpec(self.p, self.n)

    @property
    def is_field(self) -> bool:
        return self.n == 1

    @property
    def is_domain(self) -> bool:
        return self.n == 1

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1 % self.spec.modulus

    def coerce(self, a: Any) -> int:
        if isinstance(a, bool) or not isinstance(a, int):
            raise TypeError(f"Z/{self.spec.modulus}Z element must be int, got {type(a).__name__}")
        return self.spec.normalize(a)

    def add(self, a, b):
        return self.spec.normalize(self.coerce(a) + self.coerce(b))

    def neg(self, a):
        return self.spec.normalize(-self.coerce(a))

    def mul(self, a, b):
        return self.spec.normalize(self.coerce(a) * self.coerce(b))

    def is_unit(self, a) -> bool:
        return self.coerce(a) % self.p != 0

    def inv(self, a):
        return self.spec.inverse(self.coerce(a))

    def solve_linear(self, rows, rhs):
        sol = solve_linear_system_zpn(
            [[self.coerce(v) for v in row] for row in rows], [self.coerce(v) for v in rhs], self.spec
        )
        return sol.x

    @property
    def is_finite(self) -> bool:
        return True

    def elements(self) -> Iterator[int]:
        return iter(range(self.spec.modulus))

    def __str__(self) -> str:
        if self.n == 1:
            return f"GF({self.p})"
        return f"Z/{self.p}^{self.n}Z"


@dataclass(frozen=True)
class MonogenicAlgebra(Ring):
    """
    B = A[t]/(f), f monic of degree r >= 1. Elements are coefficient tuples
    (b_0, ..., b_{r-1}) over A, i.e. A-coordinates in the basis 1, t, ..., t^{r-1}.

    ``field_declared`` / ``domain_declared`` state that B is a field / an
    integral domain; they are trusted, not proven.
    """

    base: Ring
    modulus: Tuple[Any, ...]
    field_declared: bool = False
    domain_declared: bool = False
    variable: str = "t"

    def __post_init__(self) -> None:
        if not isinstance(self.base, Ring):
            raise TypeError(f"base must be a Ring, got {type(self.base).__name__}")
        f = tuple(self.base.coerce(c) for c in self.modulus)
        if len(f) < 2:
            raise ValueError("modulus must have degree >= 1")
        if not self.base.eq(f[-1], self.base.one()):
            raise ValueError("modulus must be monic")
        object.__setattr__(self, "modulus", f)
        if self.field_declared:
            object.__setattr__(self, "domain_declared", True)
            if not self.base.is_field:
                raise StructureError(f"A[t]/(f) over {self.base} cannot be declared a field: base is not a field")
        if self.domain_declared and not self.base.is_domain:
            raise StructureError(f"A[t]/(f) over {self.base} cannot be a domain: base is not a domain")

    @property
    def is_field(self) -> bool:
        return self.field_declared

    @property
    def is_domain(self) -> bool:
        return self.domain_declared

    @property
    def rank(self) -> int:
        return len(self.modulus) - 1

    def zero(self) -> Tuple[Any, ...]:
        return (self.base.zero(),) * self.rank

    def one(self) -> Tuple[Any, ...]:
        return self.constant(self.base.one())

    def constant(self, a: Any) -> Tuple[Any, ...]:
        """Image of a base element a as a * 1."""
        return self._reduce([self.base.coerce(a)])

    def generator(self) -> Tuple[Any, ...]:
        """The class of t."""
        return self._reduce([self.base.zero(), self.base.one()])

    def _reduce(self, coeffs: List[Any]) -> Tuple[Any, ...]:
        A = self.base
        r = self.rank
        c = [A.coerce(v) for v in coeffs]
        for k in range(len(c) - 1, r - 1, -1):
            lead = c[k]
            if A.is_zero(lead):
                continue
            for i in range(r + 1):
                c[k - r + i] = A.sub(c[k - r + i], A.mul(lead, self.modulus[i]))
        c = c[:r] + [A.zero()] * max(0, r - len(c))
        return tuple(c)

    def coerce(self, a: Any) -> Tuple[Any, ...]:
        if isinstance(a, (tuple, list)):
            return self._reduce(list(a))
        return self._reduce([self.base.coerce(a)])

    def add(self, a, b):
        a, b = self.coerce(a), self.coerce(b)
        return tuple(self.base.add(x, y) for x, y in zip(a, b))

    def neg(self, a):
        return tuple(self.base.neg(x) for x in self.coerce(a))

    def mul(self, a, b):
        a, b = self.coerce(a), self.coerce(b)
        A = self.base
        prod = [A.zero()] * (2 * self.rank - 1)
        for i, x in enumerate(a):
            if A.is_zero(x):
                continue
            for j, y in enumerate(b):
                prod[i + j] = A.add(prod[i + j], A.mul(x, y))
        return self._reduce(prod)

    def multiplication_matrix(self, b: Any) -> List[List[Any]]:
        """Matrix of y -> b*y on the basis 1, t, ..., t^{r-1} (column j = b*t^j)."""
        b = self.coerce(b)
        cols = []
        basis_vec = self.one()
        t = self.generator()
        for _ in range(self.rank):
            cols.append(self.mul(b, basis_vec))
            basis_vec = self.mul(basis_vec, t)
        return [[cols[j][i] for j in range(self.rank)] for i in range(self.rank)]

    def is_unit(self, a) -> bool:
        if self.is_zero(a):
            return False
        if self.is_field:
            return True
        try:
            self.inv(a)
        except ZeroDivisionError:
            return False
        return True

    def inv(self, a):
        try:
            y = self.base.solve_linear(self.multiplication_matrix(a), list(self.one()))
        except NoSolutionError:
            raise ZeroDivisionError(f"{a} is not a unit in {self}") from None
        return self.coerce(tuple(y))

    def solve_linear(self, rows, rhs):
        """Expand the system into A-coordinates and solve it over the base."""
        r = self.rank
        n_rows = len(rows)
        n_cols = _ncols(rows)
        big = [[self.base.zero()] * (n_cols * r) for _ in range(n_rows * r)]
        for i in range(n_rows):
            for j in range(n_cols):
                block = self.multiplication_matrix(rows[i][j])
                for bi in range(r):
                    for bj in range(r):
                        big[i * r + bi][j * r + bj] = block[bi][bj]
        flat = [c for b in rhs for c in self.coerce(b)]
        sol = self.base.solve_linear(big, flat)
        return [self.coerce(tuple(sol[j * r:(j + 1) * r])) for j in range(n_cols)]

    @property
    def is_finite(self) -> bool:
        return self.base.is_finite

    def elements(self) -> Iterator[Tuple[Any, ...]]:
        pool = list(self.base.elements())
        return (tuple(c) for c in itertools.product(pool, repeat=self.rank))

    def __str__(self) -> str:
        terms = []
        for i, c in enumerate(self.modulus):
            if self.base.is_zero(c):
                continue
            mono = self.variable if i == 1 else f"{self.variable}^{i}"
            if i == 0:
                terms.append(str(c))
            elif self.base.eq(c, self.base.one()):
                terms.append(mono)
            else:
                terms.append(f"{c}*{mono}")
        return f"{self.base}[{self.variable}]/({' + '.join(reversed(terms))})"


ZZ = IntegerRing()
QQ = RationalField()


def GF(p: int) -> ChainRing:
    return ChainRing(p, 1)


# ---------------------------------------------------------------------------
# Homomorphisms and algebra structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RingHomomorphism:
    """
    Ring homomorphism source -> target given by an element-level function.
    """

    source: Ring
    target: Ring
    func: Callable[[Any], Any]
    name: str = "phi"

    def __call__(self, a: Any) -> Any:
        return self.target.coerce(self.func(self.source.coerce(a)))

    def compose(self, after: "RingHomomorphism") -> "RingHomomorphism":
        """
        Composition after o self.
        self: A->B, after: B->C, returns A->C.
        """
        if after.source != self.target:
            raise ValueError("Homomorphism composition ring mismatch.")
        return RingHomomorphism(
            source=self.source,
            target=after.target,
            func=lambda a: after(self(a)),
            name=f"{after.name}.{self.name}",
        )

    def kernel_trivial_on(self, elements: Iterable[Any]) -> bool:
        """phi(a) == 0 implies a == 0 for every given element."""
        for a in elements:
            if self.target.is_zero(self(a)) and not self.source.is_zero(a):
                return False
        return True


class Algebra(ABC):
    """
    An A-algebra B, free of finite rank over A, with structure map A -> B.
    """

    base: Ring
    ring: Ring

    @property
    @abstractmethod
    def rank(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def algebra_map(self, a: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def coordinates(self, b: Any) -> List[Any]:
        raise NotImplementedError

    @abstractmethod
    def multiplication_matrix(self, b: Any) -> List[List[Any]]:
        raise NotImplementedError

    @property
    def structure_map(self) -> RingHomomorphism:
        return RingHomomorphism(self.base, self.ring, self.algebra_map, name="algebraMap")

    @staticmethod
    def over_itself(ring: Ring) -> "IdentityAlgebra":
        return IdentityAlgebra(ring)

    @staticmethod
    def monogenic(ring: MonogenicAlgebra) -> "ExtensionAlgebra":
        return ExtensionAlgebra(ring)


@dataclass(frozen=True)
class IdentityAlgebra(Algebra):
    """B = A, algebra_map = identity."""

    base: Ring

    @property
    def ring(self) -> Ring:
        return self.base

    @property
    def rank(self) -> int:
        return 1

    def algebra_map(self, a: Any) -> Any:
        return self.base.coerce(a)

    def coordinates(self, b: Any) -> List[Any]:
        return [self.base.coerce(b)]

    def multiplication_matrix(self, b: Any) -> List[List[Any]]:
        return [[self.base.coerce(b)]]

    def __str__(self) -> str:
        return f"{self.base}/{self.base}"


@dataclass(frozen=True)
class ExtensionAlgebra(Algebra):
    """B = A[t]/(f) over A, algebra_map(a) = a * 1."""

    ring: MonogenicAlgebra

    def __post_init__(self) -> None:
        if not isinstance(self.ring, MonogenicAlgebra):
            raise TypeError(f"ExtensionAlgebra needs a MonogenicAlgebra, got {type(self.ring).__name__}")

    @property
    def base(self) -> Ring:
        return self.ring.base

    @property
    def rank(self) -> int:
        return self.ring.rank

    def algebra_map(self, a: Any) -> Any:
        return self.ring.constant(a)

    def coordinates(self, b: Any) -> List[Any]:
        return list(self.ring.coerce(b))

    def multiplication_matrix(self, b: Any) -> List[List[Any]]:
        return self.ring.multiplication_matrix(b)

    def __str__(self) -> str:
        return f"{self.ring}/{self.base}"


__all__ = [
    "AlgebraError",
    "StructureError",
    "UnsupportedStructureError",
    "NoSolutionError",
    "Ring",
    "Field",
    "Matrix",
    "IntegerRing",
    "RationalField",
    "ChainRing",
    "MonogenicAlgebra",
    "ZZ",
    "QQ",
    "GF",
    "RingHomomorphism",
    "Algebra",
    "IdentityAlgebra",
    "ExtensionAlgebra",
]
