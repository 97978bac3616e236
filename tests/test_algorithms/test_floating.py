"""Tests for rand_flt, the correctly rounded uniform double sampler."""

from __future__ import annotations

import math
import sys

import pytest

from exact_entropy.algorithms.floating import rand_flt
from exact_entropy.context import using_entropy_source
from exact_entropy.exceptions import InvalidArgumentError

_TINY = 5e-324  # smallest positive subnormal


class TestDegenerateIntervals:
    def test_equal_bounds_need_no_entropy(self, scripted) -> None:
        source = scripted(b"")
        with using_entropy_source(source):
            assert rand_flt(1.5, 1.5) == 1.5
        assert source.octets_consumed == 0

    def test_equal_negative_zeros(self, scripted) -> None:
        with using_entropy_source(scripted(b"")):
            assert math.copysign(1.0, rand_flt(-0.0, -0.0)) == -1.0

    @pytest.mark.parametrize(("octet", "sign"), [(b"\x00", 1.0), (b"\x01", -1.0)])
    def test_opposite_zeros_flip_a_coin(self, scripted, octet: bytes, sign: float) -> None:
        with using_entropy_source(scripted(octet)):
            result = rand_flt(0.0, -0.0)
        assert result == 0.0
        assert math.copysign(1.0, result) == sign


class TestExactDraws:
    def test_all_zero_bits_give_lower_bound(self, scripted) -> None:
        # 23-bit block choice then two 28-bit refinements.
        with using_entropy_source(scripted(bytes(11))):
            assert rand_flt(1.0, 2.0) == 1.0

    def test_all_one_bits_give_upper_bound(self, scripted) -> None:
        with using_entropy_source(scripted(b"\xff" * 11)):
            assert rand_flt(1.0, 2.0) == 2.0

    def test_negative_interval_lower_bound(self, scripted) -> None:
        with using_entropy_source(scripted(bytes(11))):
            assert rand_flt(-2.0, -1.0) == -2.0

    def test_negative_interval_upper_bound(self, scripted) -> None:
        with using_entropy_source(scripted(b"\xff" * 11)):
            assert rand_flt(-2.0, -1.0) == -1.0

    @pytest.mark.parametrize(
        ("lower", "upper"), [(0.0, 1.0), (-1e300, -1e-300), (1e300, sys.float_info.max)]
    )
    def test_ordinary_magnitudes(self, current_source, lower: float, upper: float) -> None:
        value = rand_flt(lower, upper)
        assert lower <= value <= upper


class TestRange:
    @pytest.mark.parametrize(
        ("lower", "upper"),
        [
            (0.0, 1.0),
            (-1.0, 1.0),
            (-3.5, -3.25),
            (1e-300, 1e300),
            (-sys.float_info.max, sys.float_info.max),
            (0.0, 1e-310),
            (123456.789, 123456.79),
        ],
    )
    def test_results_within_closed_interval(self, current_source, lower: float, upper: float) -> None:
        for _ in range(100):
            assert lower <= rand_flt(lower, upper) <= upper

    def test_bounds_in_either_order(self, current_source) -> None:
        for _ in range(50):
            assert 1.0 <= rand_flt(2.0, 1.0) <= 2.0

    def test_adjacent_doubles_both_reachable(self, current_source) -> None:
        upper = math.nextafter(1.0, 2.0)
        assert {rand_flt(1.0, upper) for _ in range(100)} == {1.0, upper}

    def test_subnormals(self, current_source) -> None:
        assert {rand_flt(0.0, 3 * _TINY) for _ in range(300)} == {0.0, _TINY, 2 * _TINY, 3 * _TINY}

    def test_int_bounds_accepted(self, current_source) -> None:
        assert 0.0 <= rand_flt(0, 10) <= 10.0


class TestSignedZero:
    def test_zero_from_negative_side_is_negative(self, current_source) -> None:
        zeros = [x for x in (rand_flt(-_TINY, 0.0) for _ in range(200)) if x == 0.0]
        assert zeros
        assert all(math.copysign(1.0, z) == -1.0 for z in zeros)

    def test_zero_from_positive_side_is_positive(self, current_source) -> None:
        zeros = [x for x in (rand_flt(-0.0, _TINY) for _ in range(200)) if x == 0.0]
        assert zeros
        assert all(math.copysign(1.0, z) == 1.0 for z in zeros)

    def test_interval_spanning_zero_gives_both_zero_signs(self, current_source) -> None:
        signs = {math.copysign(1.0, x) for x in (rand_flt(-_TINY, _TINY) for _ in range(400)) if x == 0.0}
        assert signs == {1.0, -1.0}


class TestInvalidBounds:
    @pytest.mark.parametrize(
        ("lower", "upper"),
        [(0.0, math.inf), (-math.inf, 0.0), (math.nan, 1.0), (0.0, "one"), (None, 1.0)],
    )
    def test_rejected(self, current_source, lower, upper) -> None:
        with pytest.raises(InvalidArgumentError):
            rand_flt(lower, upper)
