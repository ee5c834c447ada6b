"""Tests for base-2 digital nets with packed columns."""

import numpy as np
import pytest

from digital_qmc import DigitalNet, DigitalNetBase2, StaleIteratorError
from digital_qmc.digital_net_base2 import MAX_BITS, pack_columns, unpack_columns
from digital_qmc.point_set import EPSILON_HALF

from conftest import random_matrices

IDENTITY_GRAY_POINTS = [0.0, 0.5, 0.75, 0.25, 0.375, 0.875, 0.625, 0.125]


def _sorted_rows(points):
    return points[np.lexsort(points.T[::-1])]


def _pair(rng, dim=3, k=4, r=6, w=9):
    """A base-b net with b = 2 and the equivalent packed base-2 net."""
    mats = random_matrices(rng, 2, dim, k, r)
    return DigitalNet(2, k, r, w, mats), DigitalNetBase2(k, r, w, pack_columns(mats, w))


def test_pack_unpack():
    digits = np.array([[1, 0, 1], [0, 1, 1]])
    packed = pack_columns(digits, 5)
    assert packed.tolist() == [0b10100, 0b01100]
    np.testing.assert_array_equal(unpack_columns(packed, 5, 3), digits)


def test_identity_points(identity_net_base2):
    np.testing.assert_array_equal(identity_net_base2.points[:, 0], IDENTITY_GRAY_POINTS)
    assert identity_net_base2.get_coordinate_no_gray(3, 0) == 0.75


def test_generator_matrix(identity_net_base2):
    np.testing.assert_array_equal(identity_net_base2.generator_matrix(0), np.eye(3))


class TestConstruction:

    def test_too_many_bits(self):
        with pytest.raises(ValueError):
            DigitalNetBase2(3, 3, MAX_BITS + 1, [1, 2, 4])

    def test_columns_must_fit(self):
        with pytest.raises(ValueError):
            DigitalNetBase2(2, 3, 3, [8, 1])
        with pytest.raises(ValueError):
            DigitalNetBase2(2, 3, 3, [-1, 1])

    def test_rows_beyond_r_must_be_zero(self):
        # w = 4, r = 2: only bits 3 and 2 may be set.
        with pytest.raises(ValueError):
            DigitalNetBase2(2, 2, 4, [8, 1])

    def test_length_must_be_multiple_of_k(self):
        with pytest.raises(ValueError):
            DigitalNetBase2(2, 3, 3, [4, 2, 1])
        with pytest.raises(ValueError):
            DigitalNetBase2(2, 3, 3, [[4, 2]])


class TestEquivalenceWithBaseB:

    def test_same_points(self, rng):
        net, net2 = _pair(rng)
        np.testing.assert_array_equal(net2.points, net.points)
        for i in (0, 7, 15):
            assert net2.get_coordinate_no_gray(i, 1) == net.get_coordinate_no_gray(i, 1)

    @pytest.mark.parametrize("method", [
        "left_matrix_scramble",
        "left_matrix_scramble_diag",
        "ibinomial_matrix_scramble",
        "striped_matrix_scramble",
        "right_matrix_scramble",
    ])
    def test_same_scramble(self, rng, method):
        net, net2 = _pair(rng)
        getattr(net, method)(np.random.default_rng(11))
        getattr(net2, method)(np.random.default_rng(11))
        np.testing.assert_array_equal(net2.points, net.points)
        np.testing.assert_array_equal(
            pack_columns(net.generator_matrices, 9), net2.generator_matrices
        )

    def test_same_faure_scramble(self, rng):
        net, net2 = _pair(rng)
        net.left_matrix_scramble_faure_permut_all(np.random.default_rng(5), 1)
        net2.left_matrix_scramble_faure_permut_all(np.random.default_rng(5), 1)
        np.testing.assert_array_equal(net2.points, net.points)

    def test_same_shift(self, rng):
        net, net2 = _pair(rng)
        shift = rng.integers(0, 2, size=(3, 9))
        net.set_digital_shift(shift)
        net2.set_digital_shift(shift)
        np.testing.assert_array_equal(net2.digital_shift, shift)
        np.testing.assert_array_equal(net2.points, net.points)


class TestShift:

    def test_shift_of_first_bit(self, identity_net_base2):
        identity_net_base2.set_digital_shift([[1, 0, 0]])
        expected = (np.array(IDENTITY_GRAY_POINTS) + 0.5) % 1.0 + EPSILON_HALF
        np.testing.assert_array_equal(identity_net_base2.points[:, 0], expected)

    def test_random_shift_is_binary(self, net_base2):
        net_base2.add_random_shift(rng=np.random.default_rng(0))
        shift = net_base2.digital_shift
        assert shift.shape == (4, 8)
        assert set(np.unique(shift)) <= {0, 1}
        points = net_base2.points
        assert np.all((points > 0.0) & (points < 1.0))

    def test_append_only_extension(self, net_base2):
        net_base2.add_random_shift(0, 2, np.random.default_rng(3))
        first = net_base2.digital_shift
        generation = net_base2.generation
        net_base2.get_coordinate(0, 3)
        assert net_base2.dim_shift == 4
        assert net_base2.generation == generation
        np.testing.assert_array_equal(net_base2.digital_shift[:2], first)


class TestIterators:

    @pytest.mark.parametrize("no_gray", [False, True])
    def test_incremental_matches_direct(self, net_base2, no_gray):
        net_base2.left_matrix_scramble(np.random.default_rng(2))
        net_base2.add_random_shift(rng=np.random.default_rng(4))
        get = net_base2.get_coordinate_no_gray if no_gray else net_base2.get_coordinate
        it = net_base2.iterator_no_gray() if no_gray else net_base2.iterator()
        fresh = net_base2.iterator_no_gray() if no_gray else net_base2.iterator()
        for i in range(net_base2.num_points):
            fresh.set_current_point(i)
            np.testing.assert_array_equal(it.current_digits(), fresh.current_digits())
            expected = [get(i, j) for j in range(net_base2.dim)]
            np.testing.assert_array_equal(it.next_point(), expected)
        assert not it.has_next_point()

    def test_iterators_enumerate_same_set(self, net_base2):
        gray = net_base2.to_array()
        it = net_base2.iterator_no_gray()
        no_gray = np.array([it.next_point() for _ in range(net_base2.num_points)])
        np.testing.assert_array_equal(_sorted_rows(gray), _sorted_rows(no_gray))

    def test_stale_after_scramble(self, net_base2):
        it = net_base2.iterator()
        net_base2.right_matrix_scramble(np.random.default_rng(9))
        with pytest.raises(StaleIteratorError):
            it.next_coordinate()

    def test_unrandomize(self, net_base2):
        pristine = net_base2.points
        net_base2.ibinomial_matrix_scramble(np.random.default_rng(1))
        net_base2.add_random_shift(rng=np.random.default_rng(1))
        net_base2.unrandomize()
        np.testing.assert_array_equal(net_base2.points, pristine)
