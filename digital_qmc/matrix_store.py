"""
Two-slot storage for the generator matrices of a digital net.
"""

import logging

import numpy as np

LOG = logging.getLogger(__name__)


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.int64, copy=True)
    array.flags.writeable = False
    return array


class GeneratorMatrices:
    """
    Baseline and active generator matrices.

    The baseline is the reference every scramble starts from and is
    never modified in place. The active slot is what point evaluation
    reads. Until the first scramble both slots refer to the same array.

    Parameters
    ----------
    matrices : np.ndarray
        Initial generator matrices. For a base-b net this has shape
        ``(dim * num_cols, num_rows)``; the base-2 specialization stores
        one packed integer per column, shape ``(dim * num_cols,)``.

    Attributes
    ----------
    baseline : np.ndarray
        Read-only reference matrices.
    active : np.ndarray
        Read-only matrices currently used for evaluation.
    """

    def __init__(self, matrices: np.ndarray):
        self.baseline = _frozen(matrices)
        self.active = self.baseline

    @property
    def scrambled(self) -> bool:
        """True when the active matrices differ from the baseline slot."""
        return self.active is not self.baseline

    def replace_active(self, matrices: np.ndarray) -> None:
        """Install matrices recomputed from the baseline as the active slot."""
        if matrices.shape != self.baseline.shape:
            raise ValueError(
                f"shape {matrices.shape} does not match baseline {self.baseline.shape}"
            )
        self.active = _frozen(matrices)

    def reset(self) -> None:
        """Discard any scramble: ``active := baseline``."""
        if self.scrambled:
            LOG.debug("Restoring baseline generator matrices")
        self.active = self.baseline

    def commit(self) -> None:
        """Make the active matrices the baseline of future scrambles."""
        self.baseline = self.active
