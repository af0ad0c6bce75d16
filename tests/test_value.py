"""Tests for runtime values: equality, rendering, conversion."""

import math

import pytest

from veval.value import NONE, Bool, Float, Int, NoneValue, Range, Resolved, Str, Vec, format_float


class TestEquality:
    def test_same_variant(self):
        assert Int(1) == Int(1)
        assert Str("a") == Str("a")
        assert Range(0, 1) == Range(0, 1)

    def test_variants_never_cross(self):
        assert Bool(True) != Int(1)
        assert Int(1) != Float(1.0)
        assert Int(0) != NONE

    def test_nan_not_equal_to_itself(self):
        nan = Float(math.nan)
        assert nan != nan
        assert Vec([nan]) != Vec([nan])

    def test_vec_equality(self):
        assert Vec([Int(1), Vec([Bool(True)])]) == Vec((Int(1), Vec((Bool(True),))))
        assert Vec([Int(1)]) != Vec([Int(1), Int(2)])
        assert Vec([Int(1)]) != Vec([Float(1.0)])

    def test_vec_items_become_tuple(self):
        v = Vec([Int(1), Int(2)])
        assert isinstance(v.items, tuple)
        assert len(v) == 2

    def test_is_same(self):
        assert Int(1).is_same(Int(2))
        assert not Int(1).is_same(Float(1.0))
        assert NONE.is_same(NoneValue())

    def test_hashable(self):
        assert len({Int(1), Int(1), Str("1")}) == 2

    def test_resolved_flag_is_separate(self):
        assert Resolved(Int(1), optional=True).value == Resolved(Int(1)).value


class TestIntRange:
    def test_rejects_bool(self):
        with pytest.raises(ValueError):
            Int(True)

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError):
            Int(2**63)
        with pytest.raises(ValueError):
            Int(-(2**63) - 1)

    def test_bounds(self):
        assert Int(2**63 - 1).value == 2**63 - 1
        assert Int(-(2**63)).value == -(2**63)


class TestRendering:
    def test_bool(self):
        assert str(Bool(True)) == "true"
        assert str(Bool(False)) == "false"

    def test_int(self):
        assert str(Int(-42)) == "-42"

    def test_str(self):
        assert str(Str("foo")) == '"foo"'

    def test_range(self):
        assert str(Range(0, 1)) == "0..1"

    def test_none(self):
        assert str(NONE) == "None"

    def test_vec_trailing_commas(self):
        v = Vec([Bool(True), Vec([Int(1), Int(2)])])
        assert str(v) == "[true,[1,2,],]"

    def test_empty_vec(self):
        assert str(Vec()) == "[]"

    @pytest.mark.parametrize(
        "x, expected",
        [
            (1.0, "1"),
            (0.5, "0.5"),
            (-2.5, "-2.5"),
            (100.0, "100"),
            (1e20, "100000000000000000000"),
            (1e-7, "0.0000001"),
            (0.1, "0.1"),
            (math.nan, "NaN"),
            (math.inf, "inf"),
            (-math.inf, "-inf"),
        ],
    )
    def test_float(self, x, expected):
        assert format_float(x) == expected
        assert str(Float(x)) == expected


class TestToPython:
    def test_scalars(self):
        assert Bool(True).to_python() is True
        assert Int(3).to_python() == 3
        assert Float(2.5).to_python() == 2.5
        assert Str("x").to_python() == "x"
        assert NONE.to_python() is None

    def test_nested(self):
        v = Vec([Int(1), Vec([Str("a")])])
        assert v.to_python() == [1, ["a"]]

    def test_range(self):
        assert Range(2, 5).to_python() == range(2, 5)
