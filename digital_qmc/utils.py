"""
Digit and Gray-code utilities for digital nets.
"""

import numpy as np
from typing import List, Tuple


def generate_primes(n_max: int, n_min: int = 2) -> List[int]:
    """
    Generate all prime numbers in the range [n_min, n_max] using Sieve of Eratosthenes.

    Parameters
    ----------
    n_max : int
        Upper bound for prime search.
    n_min : int, optional
        Lower bound for prime search (default: 2).

    Returns
    -------
    List[int]
        List of prime numbers in [n_min, n_max].

    Examples
    --------
    >>> generate_primes(20)
    [2, 3, 5, 7, 11, 13, 17, 19]
    >>> generate_primes(20, 10)
    [11, 13, 17, 19]
    """
    if n_max < 2:
        return []

    sieve = [True] * (n_max + 1)
    sieve[0] = sieve[1] = False

    for i in range(2, int(n_max**0.5) + 1):
        if sieve[i]:
            for j in range(i*i, n_max + 1, i):
                sieve[j] = False

    return [i for i in range(max(2, n_min), n_max + 1) if sieve[i]]


def _check_base(base: int) -> None:
    if base < 2:
        raise ValueError(f"base must be >= 2, got {base}")


def int_to_digits(base: int, i: int, num_digits: int) -> np.ndarray:
    """
    Compute the base-b digit expansion of a non-negative integer.

    Parameters
    ----------
    base : int
        The base b >= 2.
    i : int
        Non-negative integer to expand.
    num_digits : int
        Length of the returned array; must be large enough to hold all
        significant digits of i.

    Returns
    -------
    np.ndarray
        Digits of i, least significant first, zero padded to num_digits.

    Examples
    --------
    >>> int_to_digits(3, 11, 4).tolist()
    [2, 0, 1, 0]
    """
    _check_base(base)
    if i < 0:
        raise ValueError(f"i must be non-negative, got {i}")
    digits = np.zeros(num_digits, dtype=np.int64)
    c = 0
    while i > 0:
        if c >= num_digits:
            raise ValueError(f"{num_digits} digits are not enough in base {base}")
        digits[c] = i % base
        i //= base
        c += 1
    return digits


def int_to_digits_gray(base: int, i: int, num_digits: int) -> Tuple[int, np.ndarray, np.ndarray]:
    """
    Compute the base-b expansion of i and the digits of its Gray code.

    The Gray code digit at the most significant position equals the
    b-ary digit there; every less significant Gray digit is
    ``(bary[c] - bary[c+1]) mod b``. Consecutive integers have Gray codes
    that differ in exactly one digit.

    Parameters
    ----------
    base : int
        The base b >= 2.
    i : int
        Non-negative point index.
    num_digits : int
        Length of the returned digit arrays.

    Returns
    -------
    idigits : int
        Number of significant digits of i (0 if i == 0).
    bary : np.ndarray
        b-ary digits of i, least significant first.
    gray : np.ndarray
        Gray code digits of i, least significant first.
    """
    bary = int_to_digits(base, i, num_digits)
    gray = np.zeros(num_digits, dtype=np.int64)
    if i == 0:
        return 0, bary, gray

    idigits = int(np.flatnonzero(bary)[-1]) + 1
    gray[idigits - 1] = bary[idigits - 1]
    gray[:idigits - 1] = (bary[:idigits - 1] - bary[1:idigits]) % base
    return idigits, bary, gray


def gray_digits_to_int(base: int, gray: np.ndarray) -> int:
    """
    Invert the Gray map: recover the integer whose Gray digits are given.

    Parameters
    ----------
    base : int
        The base b >= 2.
    gray : np.ndarray
        Gray code digits, least significant first.

    Returns
    -------
    int
        The integer i such that ``int_to_digits_gray(base, i, ...)``
        yields ``gray``.
    """
    _check_base(base)
    i = 0
    upper = 0
    for digit in reversed([int(g) for g in gray]):
        upper = (digit + upper) % base
        i = i * base + upper
    return i


def increment_digits(base: int, bary: np.ndarray) -> int:
    """
    Add one to a b-ary digit vector in place.

    Every trailing digit equal to b-1 is reset to 0 and the first digit
    that is not b-1 is incremented. The position of that digit is also
    the only Gray code digit that changes between i and i+1, so the
    work done is proportional to the number of rollover digits.

    Parameters
    ----------
    base : int
        The base b >= 2.
    bary : np.ndarray
        b-ary digits, least significant first; modified in place.

    Returns
    -------
    int
        Position of the incremented digit.
    """
    pos = 0
    while pos < len(bary) and bary[pos] == base - 1:
        bary[pos] = 0
        pos += 1
    if pos == len(bary):
        raise ValueError("digit vector overflow: no room to increment")
    bary[pos] += 1
    return pos


def trailing_ones(i: int) -> int:
    """Number of trailing 1 bits of i, i.e. the base-2 increment position."""
    return ((i + 1) & ~i).bit_length() - 1
