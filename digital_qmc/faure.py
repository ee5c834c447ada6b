"""
Faure multiplier tables used by the restricted-permutation scrambles.

For each prime base b up to 67, ``FAURE_FACTORS[b]`` lists the nonzero
multipliers of Z/bZ ordered by increasing discrepancy bound when used as
a diagonal scrambling factor. A scramble restricted to the first ``sb``
entries of this list degrades the net quality less than one drawing
from all of ``{1, ..., b-1}``.
"""

from types import MappingProxyType
from typing import Tuple

from .utils import generate_primes

PRIMES: Tuple[int, ...] = tuple(generate_primes(67))

_FACTORS = (
    (1,),
    (1, 2),
    (2, 3, 1, 4),
    (2, 3, 4, 5, 1, 6),
    (3, 4, 7, 8, 2, 5, 6, 9, 1, 10),
    (5, 8, 3, 4, 9, 10, 2, 6, 7, 11, 1, 12),
    (5, 7, 10, 12, 3, 6, 11, 14, 4, 13, 2, 8, 9, 15, 1, 16),
    (7, 8, 11, 12, 4, 5, 14, 15, 3, 6, 13, 16, 2, 9, 10, 17, 1, 18),
    (5, 9, 14, 18, 7, 10, 13, 16, 4, 6, 17, 19, 3, 8, 15, 20, 2, 11, 12, 21,
     1, 22),
    (8, 11, 18, 21, 12, 17, 9, 13, 16, 20, 5, 6, 23, 24, 4, 7, 22, 25, 3, 10,
     19, 26, 2, 14, 15, 27, 1, 28),
    (12, 13, 18, 19, 11, 14, 17, 20, 7, 9, 22, 24, 4, 8, 23, 27, 5, 6, 25, 26,
     3, 10, 21, 28, 2, 15, 16, 29, 1, 30),
    (8, 14, 23, 29, 10, 11, 26, 27, 13, 17, 20, 24, 7, 16, 21, 30, 5, 15, 22,
     32, 6, 31, 4, 9, 28, 33, 3, 12, 25, 34, 2, 18, 19, 35, 1, 36),
    (16, 18, 23, 25, 11, 15, 26, 30, 12, 17, 24, 29, 9, 32, 13, 19, 22, 28, 6,
     7, 34, 35, 5, 8, 33, 36, 4, 10, 31, 37, 3, 14, 27, 38, 2, 20, 21, 39, 1,
     40),
    (12, 18, 25, 31, 9, 19, 24, 34, 8, 16, 27, 35, 10, 13, 30, 33, 15, 20, 23,
     28, 5, 17, 26, 38, 6, 7, 36, 37, 4, 11, 32, 39, 3, 14, 29, 40, 2, 21, 22,
     41, 1, 42),
    (13, 18, 29, 34, 11, 17, 30, 36, 10, 14, 33, 37, 7, 20, 27, 40, 9, 21, 26,
     38, 15, 22, 25, 32, 6, 8, 39, 41, 5, 19, 28, 42, 4, 12, 35, 43, 3, 16, 31,
     44, 2, 23, 24, 45, 1, 46),
    (14, 19, 34, 39, 23, 30, 12, 22, 31, 41, 8, 11, 20, 24, 29, 33, 42, 45, 10,
     16, 37, 43, 7, 15, 38, 46, 17, 25, 28, 36, 5, 21, 32, 48, 6, 9, 44, 47, 4,
     13, 40, 49, 3, 18, 35, 50, 2, 26, 27, 51, 1, 52),
    (25, 26, 33, 34, 18, 23, 36, 41, 14, 21, 38, 45, 24, 27, 32, 35, 11, 16,
     43, 48, 9, 13, 46, 50, 8, 22, 37, 51, 7, 17, 42, 52, 19, 28, 31, 40, 6,
     10, 49, 53, 5, 12, 47, 54, 4, 15, 44, 55, 3, 20, 39, 56, 2, 29, 30, 57, 1,
     58),
    (22, 25, 36, 39, 17, 18, 43, 44, 24, 28, 33, 37, 13, 14, 47, 48, 16, 19,
     42, 45, 9, 27, 34, 52, 8, 23, 38, 53, 11, 50, 7, 26, 35, 54, 21, 29, 32,
     40, 6, 10, 51, 55, 5, 12, 49, 56, 4, 15, 46, 57, 3, 20, 41, 58, 2, 30, 31,
     59, 1, 60),
    (18, 26, 41, 49, 14, 24, 43, 53, 12, 28, 39, 55, 29, 30, 37, 38, 10, 20,
     47, 57, 16, 21, 46, 51, 8, 25, 42, 59, 13, 31, 36, 54, 9, 15, 52, 58, 7,
     19, 48, 60, 23, 32, 35, 44, 5, 27, 40, 62, 6, 11, 56, 61, 4, 17, 50, 63,
     3, 22, 45, 64, 2, 33, 34, 65, 1, 66),
)

# Read-only mapping: prime base -> ordered multipliers.
FAURE_FACTORS = MappingProxyType(dict(zip(PRIMES, _FACTORS)))


def faure_factors(base: int) -> Tuple[int, ...]:
    """
    Return the ordered Faure multipliers for a prime base.

    Parameters
    ----------
    base : int
        Prime base, at most ``PRIMES[-1]``.

    Returns
    -------
    Tuple[int, ...]
        The b-1 nonzero multipliers of Z/bZ, best first.

    Raises
    ------
    ValueError
        If no table exists for this base.
    """
    if base > PRIMES[-1]:
        raise ValueError(f"base {base} too large for Faure factors (max {PRIMES[-1]})")
    if base not in FAURE_FACTORS:
        raise ValueError(f"Faure factors are not implemented for base {base}")
    return FAURE_FACTORS[base]


def check_faure_parameters(method: str, base: int, sb: int, lower_flag: int) -> Tuple[int, ...]:
    """
    Validate the arguments of a restricted-permutation scramble.

    Returns the multiplier table for ``base`` so the caller can draw from
    its first ``sb`` entries.
    """
    if sb >= base:
        raise ValueError(f"sb = {sb} >= base = {base} in {method}")
    if sb < 1:
        raise ValueError(f"sb = {sb} < 1 in {method}")
    if lower_flag not in (0, 1, 2):
        raise ValueError(f"lower_flag = {lower_flag} not in {{0, 1, 2}} in {method}")
    return faure_factors(base)
