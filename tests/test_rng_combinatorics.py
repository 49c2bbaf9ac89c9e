"""
Tests for combinations, permutations and the pseudo-random generators.
"""

import math
from itertools import combinations, permutations

import pytest
import libsla as sla
from libsla.constants import CPS_OK, CPS_NO_MORE, CPS_INVALID_ARG


@pytest.mark.unit
class TestCombn:
    """Tests for combn."""

    def test_first_combination(self):
        """Test that a first element below 1 requests the first combination."""
        assert sla.combn(2, 3, [0, 0]) == ([1, 2], CPS_OK)

    def test_sequence(self):
        """Test the colexicographic order of 3 from 5."""
        sel, status = sla.combn(3, 5, [0, 0, 0])
        seen = [list(sel)]
        while True:
            sel, status = sla.combn(3, 5, sel)
            if status != CPS_OK:
                break
            seen.append(list(sel))

        assert seen[:4] == [[1, 2, 3], [1, 2, 4], [1, 3, 4], [2, 3, 4]]
        assert len(seen) == 10
        assert sorted(tuple(s) for s in seen) == list(combinations(range(1, 6), 3))
        assert status == CPS_NO_MORE
        assert sel == [1, 2, 3]

    def test_single_item(self):
        """Test choosing one item from three."""
        assert sla.combn(1, 3, [1]) == ([2], CPS_OK)
        assert sla.combn(1, 3, [3]) == ([1], CPS_NO_MORE)

    def test_all_items(self):
        """Test that choosing every item has only one combination."""
        assert sla.combn(3, 3, [1, 2, 3]) == ([1, 2, 3], CPS_NO_MORE)

    @pytest.mark.parametrize("nsel,ncand", [(0, 3), (4, 3), (2, 0)])
    def test_invalid_arguments(self, nsel, ncand):
        """Test that bad sizes leave the selection unchanged."""
        assert sla.combn(nsel, ncand, [1, 2]) == ([1, 2], CPS_INVALID_ARG)


@pytest.mark.unit
class TestPermut:
    """Tests for permut."""

    def test_first_permutation(self):
        """Test the first permutation of three items."""
        _, order, status = sla.permut(3, [-1, 0, 0])
        assert order == [3, 2, 1]
        assert status == CPS_OK

    def test_all_permutations(self):
        """Test that every permutation appears once before wrapping."""
        state, order, status = sla.permut(3, [-1, 0, 0])
        seen = [tuple(order)]
        for _ in range(5):
            state, order, status = sla.permut(3, state)
            assert status == CPS_OK
            seen.append(tuple(order))

        assert sorted(seen) == sorted(permutations(range(1, 4)))
        _, order, status = sla.permut(3, state)
        assert status == CPS_NO_MORE
        assert order == [3, 2, 1]

    def test_twelfth_permutation_of_four(self):
        """Test the permutation reached after eleven steps."""
        state = [-1, 0, 0, 0]
        for _ in range(11):
            state, order, status = sla.permut(4, state)
        assert order == [2, 4, 1, 3]
        assert status == CPS_OK

    def test_count(self):
        """Test that four items give 24 permutations."""
        state, order, status = sla.permut(4, [-1, 0, 0, 0])
        count = 1
        while True:
            state, order, status = sla.permut(4, state)
            if status == CPS_NO_MORE:
                break
            count += 1
        assert count == math.factorial(4)

    def test_invalid(self):
        """Test n < 1."""
        assert sla.permut(0, [])[2] == CPS_INVALID_ARG


@pytest.mark.unit
class TestRandom:
    """Tests for the uniform generator."""

    def test_reproducible(self):
        """Test that the same seed gives the same sequence."""
        a = sla.UniformGenerator(1.5)
        b = sla.UniformGenerator(1.5)
        assert [sla.random(a) for _ in range(10)] == [sla.random(b) for _ in range(10)]

    def test_different_seeds(self):
        """Test that different seeds give different sequences."""
        a = sla.UniformGenerator(1.0)
        b = sla.UniformGenerator(2.0)
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_independent_streams(self):
        """Test that drawing from one generator does not disturb another."""
        reference = sla.UniformGenerator(7.0).random()
        a = sla.UniformGenerator(7.0)
        other = sla.UniformGenerator(7.0)
        for _ in range(100):
            other.random()
        assert a.random() == reference

    def test_range_and_mean(self):
        """Test that deviates lie in [0, 1) with mean near one half."""
        gen = sla.UniformGenerator(42.0)
        values = [gen.random() for _ in range(10000)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert abs(sum(values) / len(values) - 0.5) < 0.02


@pytest.mark.unit
class TestGresid:
    """Tests for the Gaussian generator."""

    def test_reproducible(self):
        """Test that the default seed reproduces the same residuals."""
        a = sla.GaussianGenerator()
        b = sla.GaussianGenerator()
        assert [sla.gresid(1.0, a) for _ in range(9)] == [sla.gresid(1.0, b) for _ in range(9)]

    def test_scaling(self):
        """Test that stdev scales the residuals."""
        a = sla.GaussianGenerator(99)
        b = sla.GaussianGenerator(99)
        for _ in range(6):
            assert abs(a.gresid(3.0) - 3.0 * b.gresid(1.0)) < 1e-12

    def test_zero_stdev(self):
        """Test that zero standard deviation gives zero."""
        gen = sla.GaussianGenerator(5)
        assert all(gen.gresid(0.0) == 0.0 for _ in range(4))

    def test_statistics(self):
        """Test mean and standard deviation over many samples."""
        gen = sla.GaussianGenerator(2024)
        values = [gen.gresid(2.0) for _ in range(10000)]
        mean = sum(values) / len(values)
        std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
        assert abs(mean) < 0.1
        assert abs(std - 2.0) < 0.1
