"""
Digital Nets for Quasi-Monte Carlo Integration
==============================================

This package provides the digital net engine of a library of highly
uniform point sets: generator-matrix based digital nets in an arbitrary
base b and in base 2, their Gray code enumeration, and the randomizations
used for randomized quasi-Monte Carlo (digital shifts and linear matrix
scrambles).

Main classes:
- DigitalNet: digital net in base b
- DigitalNetBase2: digital net in base 2 with packed columns
- DigitalSequence, DigitalSequenceBase2: extensible nets with conversions
  to fixed-size nets

Point-set producers (Sobol, Faure, Niederreiter, ...) build the generator
matrices and hand them to these classes.

License: MIT
"""

from .digital_net import DigitalNet, DigitalNetIterator, DigitalNetIteratorNoGray
from .digital_net_base2 import (
    DigitalNetBase2,
    DigitalNetBase2Iterator,
    DigitalNetBase2IteratorNoGray,
)
from .digital_sequence import DigitalSequence, DigitalSequenceBase2
from .point_set import PointSet, PointSetIterator, StaleIteratorError
from .utils import (
    int_to_digits,
    int_to_digits_gray,
    gray_digits_to_int,
    generate_primes,
)

__version__ = "1.0.0"
__all__ = [
    "DigitalNet",
    "DigitalNetIterator",
    "DigitalNetIteratorNoGray",
    "DigitalNetBase2",
    "DigitalNetBase2Iterator",
    "DigitalNetBase2IteratorNoGray",
    "DigitalSequence",
    "DigitalSequenceBase2",
    "PointSet",
    "PointSetIterator",
    "StaleIteratorError",
    "int_to_digits",
    "int_to_digits_gray",
    "gray_digits_to_int",
    "generate_primes",
]
