"""
Digital sequences: digital nets that can be extended to more points.

A digital sequence is a digital net whose generator matrices can grow by
adding columns, increasing the number of points from b^k to b^k' for
k' > k. Producers (Sobol, Faure, Niederreiter, ...) implement
``extend_sequence``; this module provides the conversions shared by all of
them:

    - ``to_net``: freeze the first b^k points into a plain digital net
    - ``to_net_shift_cj``: same, with one extra leading coordinate whose
      generator matrix is the reflected identity, so that point i has
      first coordinate i/n in ordinary digit order. All other generator
      matrices move one dimension to the right.

Both conversions carry over the current (possibly scrambled) generator
matrices and the digital shift.
"""

import logging
from abc import ABC, abstractmethod

from .digital_net import DigitalNet, DigitalNetIterator
from .digital_net_base2 import DigitalNetBase2

LOG = logging.getLogger(__name__)


class _SequenceConversions(ABC):
    """Net conversions and shifted iterators shared by digital sequences."""

    @abstractmethod
    def extend_sequence(self, k: int) -> None:
        """
        Increase the number of points to b^k by adding generator matrix
        columns. Producers call ``_set_generator_matrices`` with the
        extended matrices.
        """

    def _copy_randomization(self, net: DigitalNet) -> None:
        net._stream = self._stream
        if self._shift is not None:
            net._shift = self._shift.copy()
            net.dim_shift = self.dim_shift

    def to_net(self) -> DigitalNet:
        """
        Freeze the sequence into a digital net with the same b^k points.

        Returns
        -------
        DigitalNet
            Net with a copy of the current generator matrices and digital shift.
        """
        net = self._net_from_matrices(self.generator_matrices)
        self._copy_randomization(net)
        LOG.debug("Converted %s to a net of %d points", type(self).__name__, net.num_points)
        return net

    def to_net_shift_cj(self) -> DigitalNet:
        """
        Freeze the sequence into a net of dimension dim + 1 whose first
        coordinate is generated by the reflected identity.

        Generator matrix j + 1 of the net is generator matrix j of the
        sequence. With ordinary digit ordering
        (``get_coordinate_no_gray``), coordinate 0 of point i is i/n.

        Returns
        -------
        DigitalNet
            Net with dim + 1 dimensions. A shift that does not cover them is
            extended from the random generator, or with zero digits when
            the shift was set explicitly.
        """
        net = self._net_from_matrices(self._matrices_with_index_dimension())
        self._copy_randomization(net)
        net._ensure_shift(net.dim)
        LOG.debug("Converted %s to a net of dimension %d with index coordinate",
                  type(self).__name__, net.dim)
        return net

    def iterator_shift(self) -> DigitalNetIterator:
        """
        Gray code iterator over points of dimension dim + 1: coordinate 0
        comes from the reflected identity, and coordinate j + 1 is
        coordinate j of the sequence.
        """
        return self._make_iterator(True, True)

    def iterator_shift_no_gray(self) -> DigitalNetIterator:
        """Like ``iterator_shift`` in ordinary index order; coordinate 0 of point i is i/n."""
        return self._make_iterator(False, True)


class DigitalSequence(_SequenceConversions, DigitalNet):
    """
    Digital sequence in base b.

    Subclasses build their generator matrices for an initial number of
    columns and implement ``extend_sequence``.
    """


class DigitalSequenceBase2(_SequenceConversions, DigitalNetBase2):
    """Digital sequence in base 2 with packed generator matrix columns."""

