"""Number-theoretic helpers used by key generation: gcd, extended Euclid and modular inverses.

All of these are iterative so that the coefficient bookkeeping stays visible and recursion depth never matters.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


def gcd(a: int, b: int) -> int:
    """Greatest common divisor via the Euclidean algorithm.

    Args:
        a: Non-negative integer.
        b: Non-negative integer.

    Returns:
        gcd(a, b). Zero arguments yield the other argument.
    """
    while a and b:
        a, b = b, a % b
    return a + b


def xgcd(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*x + b*y = d = gcd(a, b). Coefficients are plain signed integers.

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of the two integers, followed by the Bezout coefficients x and y.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mul_inv(a: int, m: int) -> int:
    """Multiplicative inverse of `a` modulo `m`.

    Args:
        a: The number to invert.
        m: The modulus. Must be positive.

    Returns:
        a^-1 mod m, or 0 if no inverse exists (gcd(a, m) != 1).
    """
    d, x, _ = xgcd(a, m)
    if d != 1:
        return 0
    if x < 0:
        x += m
    return x % m
