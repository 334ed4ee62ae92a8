"""
Field of fractions of an integral domain, as an explicit embedding functor.

    fraction_field(R)           -> FractionFieldEmbedding R -> Frac(R)
    induced_fraction_algebra(B) -> the Frac(A)-algebra Frac(B) for an A-algebra B

Supported domains:

* a field K: Frac(K) = K, identity embedding;
* ZZ: Frac(ZZ) = QQ;
* a monogenic domain B = A[t]/(f) with A supported: Frac(B) = Frac(A)[t]/(f).
  B is free over A, so Frac(B) = B (x) Frac(A); a domain that is finite
  dimensional over the field Frac(A) is a field.

``map_poly`` pushes a polynomial through the embedding and checks that degree
and zero-ness are preserved (they are, because the embedding is injective).
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Iterable

from algebra_backend import (
    Algebra,
    ExtensionAlgebra,
    IdentityAlgebra,
    IntegerRing,
    MonogenicAlgebra,
    QQ,
    Ring,
    RingHomomorphism,
    StructureError,
    UnsupportedStructureError,
)
from polynomial import Polynomial


@dataclass(frozen=True)
class FractionFieldEmbedding:
    """Injective embedding of a domain into its field of fractions."""

    source: Ring
    target: Ring
    hom: RingHomomorphism

    def __call__(self, a: Any) -> Any:
        return self.hom(a)

    def kernel_trivial_on(self, elements: Iterable[Any]) -> bool:
        return self.hom.kernel_trivial_on(elements)

    def map_poly(self, p: Polynomial) -> Polynomial:
        image = p.map(self.hom)
        if image.degree != p.degree or image.is_zero() != p.is_zero():
            raise StructureError(f"embedding {self.source} -> {self.target} does not preserve the degree of {p}")
        return image


def fraction_field(R: Ring) -> FractionFieldEmbedding:
    if not R.is_domain:
        raise StructureError(f"{R} is not an integral domain")
    if R.is_field:
        return FractionFieldEmbedding(R, R, RingHomomorphism(R, R, lambda a: a, name="id"))
    if isinstance(R, IntegerRing):
        return FractionFieldEmbedding(R, QQ, RingHomomorphism(R, QQ, Fraction, name="ZZ->QQ"))
    if isinstance(R, MonogenicAlgebra):
        inner = fraction_field(R.base)
        F = MonogenicAlgebra(
            inner.target,
            tuple(inner(c) for c in R.modulus),
            field_declared=True,
            variable=R.variable,
        )
        hom = RingHomomorphism(R, F, lambda b: tuple(inner(c) for c in b), name=f"{R}->Frac")
        return FractionFieldEmbedding(R, F, hom)
    raise UnsupportedStructureError(f"no field of fractions available for {R}")


def induced_fraction_algebra(algebra: Algebra) -> Algebra:
    """The Frac(A)-algebra Frac(B) induced by the A-algebra B."""
    if isinstance(algebra, IdentityAlgebra):
        return IdentityAlgebra(fraction_field(algebra.base).target)
    if isinstance(algebra, ExtensionAlgebra):
        return ExtensionAlgebra(fraction_field(algebra.ring).target)
    raise UnsupportedStructureError(f"no induced fraction-field algebra for {algebra}")


__all__ = ["FractionFieldEmbedding", "fraction_field", "induced_fraction_algebra"]
