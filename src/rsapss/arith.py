"""Overflow-safe modular arithmetic over 64-bit machine words.

The engine behind the mini (64-bit) RSA variant. Every operation takes a `Modulus`, which is either an explicit
modulus or `NATIVE_WIDTH`, meaning "wrap around the 64-bit word" the way unsigned machine arithmetic would.
Sums are never formed directly in explicit mode, so the same code would hold on a fixed-width integer type.

Typical usage example:

    mod_pow(65, 17, Modulus.of(3233))
    mod_mul(p - 1, q - 1, NATIVE_WIDTH)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

WORD_BITS: int = 64
WORD_MASK: int = (1 << WORD_BITS) - 1


class Modulus(typing.NamedTuple):
    """Tagged modulus for the arithmetic engine.

    Attributes:
        value: The explicit modulus, or None to operate modulo the native word width.
    """
    value: int | None = None

    @property
    def native(self) -> bool:
        return self.value is None

    @classmethod
    def of(cls, m: "int | Modulus") -> "Modulus":
        """Builds an explicit modulus, passing through an already tagged one.

        Args:
            m: The modulus. Must be a positive integer.

        Returns:
            The tagged modulus.

        Raises:
            ValueError: If `m` is not positive.
        """
        if isinstance(m, Modulus):
            return m
        if m < 1:
            raise ValueError("Explicit modulus must be positive, use NATIVE_WIDTH for word arithmetic.")
        return cls(m)


NATIVE_WIDTH = Modulus()


def mod_add(a: int, b: int, m: int | Modulus) -> int:
    """Computes a + b mod m without forming a + b.

    Both operands are reduced first, after which a - (m - b) is taken, borrowing m back if it would go negative.

    Args:
        a: First summand.
        b: Second summand.
        m: The modulus.

    Returns:
        The modular sum.
    """
    m = Modulus.of(m)
    if m.native:
        return (a + b) & WORD_MASK
    mv = m.value
    a %= mv
    b %= mv
    b = mv - b
    if b > a:
        return mv - b + a
    return a - b


def mod_mul(a: int, b: int, m: int | Modulus) -> int:
    """Computes a * b mod m by double-and-add over the bits of b.

    Args:
        a: Multiplicand.
        b: Multiplier. Must be non-negative.
        m: The modulus.

    Returns:
        The modular product.
    """
    m = Modulus.of(m)
    r = 0
    while b > 0:
        if b & 1:
            r = mod_add(r, a, m)
        b >>= 1
        a = mod_add(a, a, m)
    return r


def mod_pow(a: int, b: int, m: int | Modulus) -> int:
    """Computes a ** b mod m by square-and-multiply over the bits of b.

    Args:
        a: Base.
        b: Exponent. Must be non-negative.
        m: The modulus.

    Returns:
        The modular power.
    """
    m = Modulus.of(m)
    r = 1 if m.native else 1 % m.value
    while b > 0:
        if b & 1:
            r = mod_mul(r, a, m)
        b >>= 1
        a = mod_mul(a, a, m)
    return r
