"""Core Key Generation Utility: primality testing and RSA key pair generation in two widths.

The mini variant works on 64-bit machine words through the arithmetic engine in `rsapss.arith` and decides
primality with a deterministic Miller-Rabin over twelve fixed bases. The full-width variant works on Python integers,
pre-filtering candidates by trial division before a FIPS 186-5 style probabilistic Miller-Rabin.

Both generators draw randomness from an injectable `rng(nbytes) -> bytes` callable, `secrets.token_bytes` by
default, and retry by rejection sampling until every condition holds.

Typical usage example:

    e, d, n = generate_key_mini()
    (n, e), (n, d) = generate_key_pair(2048, KeyMode.RANDOM_EXPONENT)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import logging
import math
import secrets
from typing import Callable, Literal, overload
import warnings

from rsapss.arith import mod_mul
from rsapss.arith import mod_pow
from rsapss.arith import NATIVE_WIDTH
from rsapss.arith import WORD_BITS
from rsapss.arith import WORD_MASK
from rsapss.ntheory import gcd
from rsapss.ntheory import mul_inv

logger = logging.getLogger(__name__)

RandomSource = Callable[[int], bytes]

PUBLIC_EXPONENT: int = 65537
DEFAULT_KEY_BITS: int = 2048
MIN_KEY_BITS: int = 256

WITNESSES: tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_MINI_SIEVE_CAP: int = 1000


class KeyMode(enum.Enum):
    """How the public exponent is chosen by `generate_key_pair`."""
    FIXED_EXPONENT = 0
    RANDOM_EXPONENT = 1


def draw_bytes(nbytes: int, rng: RandomSource = secrets.token_bytes) -> bytes:
    """Draws exactly `nbytes` bytes from the random source.

    Args:
        nbytes: Number of bytes requested.
        rng: Source of random bytes.

    Returns:
        The random bytes.

    Raises:
        RuntimeError: If the source returns a different number of bytes than requested.
    """
    raw = rng(nbytes)
    if len(raw) != nbytes:
        raise RuntimeError(f"Random source returned {len(raw)} bytes, {nbytes} requested.")
    return raw


def random_bits(bits: int, rng: RandomSource = secrets.token_bytes) -> int:
    """Draws a uniformly random non-negative integer below 2**bits.

    Args:
        bits: Bit length bound of the result.
        rng: Source of random bytes.

    Returns:
        The random integer.

    Raises:
        RuntimeError: If the random source falls short.
    """
    nbytes = (bits + 7) // 8
    raw = int.from_bytes(draw_bytes(nbytes, rng), byteorder="big", signed=False)
    return raw >> (nbytes * 8 - bits)


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    result = [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]
    return result


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses the `_SMALL_PRIMES` module cache if available, regenerating if the requested range is greater, forced by
    `change` or the cache is empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.
           Passed to `get_pre_primes()`, without the `change` argument.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def prob_miller_rabin(n: int, a: int, k: int, q: int) -> bool:
    """A single Miller-Rabin round against witness `a`, with n - 1 = 2**k * q already factored.

    Args:
        n: Odd integer under test.
        a: The witness.
        k: Power of two in n - 1. Must be positive.
        q: Odd part of n - 1.

    Returns:
        True if `n` is a probable prime to base `a`, False if `a` proves it composite.
    """
    x = mod_pow(a, q, n)
    if x == 1:
        return True
    for _ in range(k):
        if x == n - 1:
            return True
        x = mod_mul(x, x, n)
    return False


def miller_rabin(n: int) -> bool:
    """Deterministic Miller-Rabin primality test for the 64-bit domain.

    Checking the first twelve primes as witnesses is sufficient for every n < 2**64.

    Args:
        n: The candidate. Must satisfy 0 <= n < 2**64.

    Returns:
        True if `n` is prime, False if composite.

    Raises:
        ValueError: If `n` is outside the 64-bit domain.
    """
    if not 0 <= n <= WORD_MASK:
        raise ValueError("Deterministic test only covers 0 <= n < 2**64.")
    if n in WITNESSES:
        return True
    if n < 2 or n % 2 == 0:
        return False
    q, k = n - 1, 0
    while q % 2 == 0:
        k += 1
        q >>= 1
    return all(prob_miller_rabin(n, a, k, q) for a in WITNESSES)


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform Miller-Rabin primality test.

    Performs the Miller-Rabin primality test as specified in FIPS 186-5, with random witnesses.
    Witnesses come from the system source (`secrets`), not the injected `rng`, so seeded key generation stays
    reproducible regardless of how many rounds each candidate takes.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw // (2**a)  # Has to be exactly int, as we get "a" above.
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    This is the probable-prime test of the full-width key generation.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to generate primes. Defaults to 10000.
            Passed to `_trial_division()`.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        if candidate.bit_length() <= 512:
            iters = 40
        elif candidate.bit_length() <= 1024:
            iters = 56
        elif candidate.bit_length() <= 1536:
            iters = 64
        elif candidate.bit_length() <= 2048:
            iters = 70
        else:
            iters = 74

    return _miller_rabin(candidate, iters)


def generate_key_mini(rng: RandomSource = secrets.token_bytes) -> tuple[int, int, int]:
    """Generates a toy RSA key pair that fits in a 64-bit word.

    Primes are drawn as half-words so that n = p*q, taken in native word arithmetic, has bit 63 set without wrapping.
    The Carmichael function lambda(n) = (p-1)(q-1) / gcd(p-1, q-1) is used in place of Euler's totient.
    Warning! A 64-bit modulus factors instantly, these keys only demonstrate the arithmetic.

    Args:
        rng: Source of random bytes.

    Returns:
        Tuple of (e, d, n).
    """
    warnings.warn("Mini RSA keys are a pedagogical toy and provide no security.", RuntimeWarning)
    half = WORD_BITS // 2
    tries = 0
    while True:
        tries += 1
        p = random_bits(half, rng)
        q = random_bits(half, rng)
        n = mod_mul(p, q, NATIVE_WIDTH)
        if not n >> (WORD_BITS - 1) or p == q:
            continue
        # Trial division only discards what the deterministic test would reject anyway.
        if not (_trial_division(p, _MINI_SIEVE_CAP) and _trial_division(q, _MINI_SIEVE_CAP)):
            continue
        if miller_rabin(p) and miller_rabin(q):
            break
    logger.debug("Mini prime pair found after %d draws.", tries)

    carmichael = mod_mul(p - 1, q - 1, NATIVE_WIDTH) // gcd(p - 1, q - 1)
    while True:
        e = random_bits(WORD_BITS, rng) % carmichael
        if gcd(e, carmichael) != 1:
            continue
        d = mul_inv(e, carmichael)
        if d != 0:
            return e, d, n


def _generate_probable_prime(size: int, rng: RandomSource = secrets.token_bytes) -> int:
    """Generate a probable prime number below 2**size.

    Candidates are uniform odd numbers of at most `size` bits, so the product of two of them still has to be checked
    for its top bit by the caller.

    Args:
        size: The bit bound of the prime to generate.
        rng: Source of random bytes.

    Returns:
        A probable prime number.
    """
    while True:
        candidate = random_bits(size, rng) | 1
        if check_prime(candidate):
            return candidate


def generate_primes(size: int,
                    mode: KeyMode = KeyMode.FIXED_EXPONENT,
                    rng: RandomSource = secrets.token_bytes) -> tuple[int, int]:
    """Generates a pair of primes whose product is exactly `size` bits long.

    In `KeyMode.FIXED_EXPONENT` pairs for which 65537 would not be invertible modulo lambda(n) are discarded too.

    Args:
        size: The key size to generate the prime pair for. Must be a multiple of 16 and at least 256.
        mode: How the public exponent will be chosen.
        rng: Source of random bytes.

    Returns:
        The prime pair (p, q).

    Raises:
        ValueError if `size` is not a supported key width.
    """
    if size < MIN_KEY_BITS or size % 16 != 0:
        raise ValueError(f"Size must be a multiple of 16 and at least {MIN_KEY_BITS}.")
    tries = 0
    while True:
        tries += 1
        p = _generate_probable_prime(size // 2, rng)
        q = _generate_probable_prime(size // 2, rng)
        if p == q or not (p * q) >> (size - 1):
            continue
        if mode is KeyMode.FIXED_EXPONENT and math.gcd(PUBLIC_EXPONENT, math.lcm(p - 1, q - 1)) != 1:
            continue
        logger.debug("%d-bit prime pair found after %d attempts.", size // 2, tries)
        return p, q


@overload
def generate_key_pair(size: int = DEFAULT_KEY_BITS,
                      mode: KeyMode = KeyMode.FIXED_EXPONENT,
                      rng: RandomSource = secrets.token_bytes,
                      expose_primes: Literal[False] = False) -> tuple[tuple[int, int], tuple[int, int]]:
    ...


@overload
def generate_key_pair(size: int = DEFAULT_KEY_BITS,
                      mode: KeyMode = KeyMode.FIXED_EXPONENT,
                      rng: RandomSource = secrets.token_bytes,
                      expose_primes: Literal[True] = False) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    ...


def generate_key_pair(
    size: int = DEFAULT_KEY_BITS,
    mode: KeyMode = KeyMode.FIXED_EXPONENT,
    rng: RandomSource = secrets.token_bytes,
    expose_primes: bool = False
) -> tuple[tuple[int, int], tuple[int, int]] | tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generates an RSA key pair.

    Fully generates a valid RSA Key, including the private exponent d = e^-1 mod lambda(n). In
    `KeyMode.RANDOM_EXPONENT` e is drawn at the full key width until e < lambda(n) and gcd(e, lambda(n)) = 1.

    Args:
        size: The key size in bits. Must be a multiple of 16 and at least 256.
        mode: Fixed 65537 or random public exponent.
        rng: Source of random bytes.
        expose_primes: Whether to export the prime numbers as well or not. Defaults to False.
            Provides some acceleration for signing if used correctly.

    Returns:
        A tuple of tuples of (public, private) sub-tuples (modulus, exponent) or if exposed for the private
        (modulus, exponent, p, q)
    """
    p, q = generate_primes(size, mode, rng)
    n = p * q
    carmichael = math.lcm(p - 1, q - 1)
    if mode is KeyMode.FIXED_EXPONENT:
        pub = PUBLIC_EXPONENT
    else:
        while True:
            pub = random_bits(size, rng)
            if pub < carmichael and math.gcd(pub, carmichael) == 1:
                break
    d = pow(pub, -1, carmichael)
    del carmichael
    if not expose_primes:
        del p, q
        return (n, pub), (n, d)
    return (n, pub), (n, d, p, q)
