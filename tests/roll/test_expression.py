import math

import pytest

from rollexp.roll.parser import exec_roll_exp
from rollexp.roll.roll_utils import RollEvalError, format_number, round_half_away


@pytest.mark.parametrize("text, value", [
    ("1+2*3", 7),
    ("8-2-1", 5),
    ("(1+2)*3", 9),
    ("7/2", 3.5),
    ("7%3", 1),
    ("(0-7)%3", -1),
    ("1.5+1", 2.5),
    ("0-3", -3),
])
def test_arithmetic(roll, text, value):
    assert roll(text).result == value


def test_arithmetic_explanation(roll):
    assert roll("1+2*3").explanation == "1 + 2 * 3"
    assert roll("1.5+1").explanation == "1.5 + 1"


def test_division_by_zero_propagates(roll):
    assert roll("1/0").result == math.inf
    assert roll("(0-1)/0").result == -math.inf
    assert math.isnan(roll("0/0").result)
    assert math.isnan(roll("5%0").result)


def test_non_finite_count_is_an_error(roll):
    with pytest.raises(RollEvalError):
        roll("(1/0)d6")
    with pytest.raises(RollEvalError):
        roll("2d(0/0)")


def test_fractional_counts_round_half_away_from_zero(roll):
    assert roll("(2.5)d[1,1]").result == 3
    assert roll("(2.4)d[1,1]").result == 2
    assert roll("2d(5/2)", "max").result == 6


def test_negative_counts(roll):
    with pytest.raises(RollEvalError) as exc_info:
        roll("(0-1)d6")
    assert str(exc_info.value).startswith("eval error: ")
    with pytest.raises(RollEvalError):
        roll("2d(0-6)")


def test_zero_dice(roll):
    res = roll("0d6")
    assert res.result == 0
    assert res.explanation == "[]"


def test_empty_side_set_yields_no_dice(roll):
    res = roll("3d[5..1]!")
    assert res.result == 0
    assert res.explanation == "[]"


def test_zero_sides(roll):
    assert roll("3d0").result == 0


def test_roll_count_limit(roll):
    with pytest.raises(RollEvalError):
        roll("11d6", dice_num_max=10)
    assert roll("10d[1,1]", dice_num_max=10).result == 10


def test_side_count_limit(roll):
    with pytest.raises(RollEvalError):
        roll("1d(100000*100000)")
    with pytest.raises(RollEvalError):
        roll("1d11", dice_type_max=10)
    assert roll("1d10", "max", dice_type_max=10).result == 10
    with pytest.raises(RollEvalError):
        roll("1d[1..11]", dice_type_max=10)
    assert roll("1d[1..10]", "min", dice_type_max=10).result == 1


def test_roll_values_within_faces(roll):
    for seed in range(30):
        res = roll("5d[2,4,8]", seed=seed)
        assert res.explanation.startswith("[")
        values = [int(v) for v in res.explanation.strip("[]").split(", ")]
        assert len(values) == 5
        assert all(v in (2, 4, 8) for v in values)
        assert res.result == sum(values)


def test_same_seed_same_result(roll):
    assert roll("20d20", seed=7).explanation == roll("20d20", seed=7).explanation


def test_literal_roll_explanation(roll):
    assert roll("2d6", "max").explanation == "[6, 6]"
    assert roll("2d[1..3]", "min").explanation == "[1, 1]"
    assert roll("2d6+1", "max").explanation == "[6, 6] + 1"


def test_nested_roll_explanation(roll):
    assert roll("(1d4)d4", "max").explanation == "([4])d4: [4, 4, 4, 4]"
    assert roll("2d(1d4)", "max").explanation == "2d([4]): [4, 4]"
    assert roll("(1d2)d(1d3)", "max").explanation == "([2])d([3]): [3, 3]"


def test_side_set_explanation_is_bracketed(roll):
    assert roll("(1d2)d[1..3]", "max").explanation == "([2])d[1..3]: [3, 3]"
    assert roll("(1d1)d[2, 5]", "max").explanation == "([1])d[2, 5]: [5]"


def test_avg_explanation_keeps_fraction(roll):
    assert roll("2d6", "avg").explanation == "[3.5, 3.5]"


def test_fudge(roll):
    assert roll("4df", "min").explanation == "[-, -, -, -]"
    assert roll("4df", "min").result == -4
    assert roll("2df", "max").explanation == "[+, +]"
    assert roll("2df", "med").explanation == "[o, o]"
    for seed in range(10):
        res = roll("6df", seed=seed)
        assert set(res.explanation.strip("[]").split(", ")) <= {"-", "o", "+"}
        assert -6 <= res.result <= 6


def test_exec_uses_preprocess(roll):
    assert roll(" ２Ｄ６ ", "max").result == 12


def test_round_half_away():
    assert round_half_away(2.5) == 3
    assert round_half_away(-0.5) == -1
    assert round_half_away(1.49) == 1
    assert round_half_away(-2.5) == -3
    with pytest.raises(RollEvalError):
        round_half_away(math.nan)


def test_format_number():
    assert format_number(3) == "3"
    assert format_number(3.0) == "3"
    assert format_number(3.5) == "3.5"
    assert format_number(-0.25) == "-0.25"
    assert format_number(math.inf) == "inf"
    assert format_number(math.nan) == "NaN"


def test_exec_without_runtime_uses_random_mode():
    assert exec_roll_exp("3d[2,2]").result == 6
