import pytest

from rollexp.roll.expression import RollExpressionInt
from rollexp.roll.formula import RollCondition
from rollexp.roll.modifier import (REModKeepHighest, REModKeepLowest, REModDropHighest, REModDropLowest,
                                   REModReroll, REModExplode, lookup_modifier)
from rollexp.roll.result import DiceRolls, Modification
from rollexp.roll.roll_utils import RollEvalError

Int = RollExpressionInt
SIDES = [1, 2, 3, 4, 5, 6]


def make_dice(*values):
    return [DiceRolls(float(v), SIDES) for v in values]


def total(dice_list):
    return sum(dice.sum() for dice in dice_list)


@pytest.mark.parametrize("modifier, expected", [
    (REModKeepHighest(Int(2)), 11),
    (REModKeepLowest(Int(2)), 3),
    (REModDropHighest(Int(1)), 11),
    (REModDropLowest(Int(2)), 14),
    (REModKeepHighest(Int(0)), 0),
    (REModKeepHighest(Int(5)), 17),
    (REModDropLowest(Int(5)), 0),
])
def test_select(make_runtime, modifier, expected):
    dice_list = make_dice(3, 1, 6, 2, 5)
    modifier.modify(dice_list, make_runtime())
    assert total(dice_list) == expected


def test_keep_highest_matches_largest_values(make_runtime):
    runtime = make_runtime(seed=3)
    for num in range(0, 6):
        dice_list = runtime.mode.generate(5, SIDES, runtime.rng)
        fresh = sorted((dice.last() for dice in dice_list), reverse=True)
        REModKeepHighest(Int(num)).modify(dice_list, runtime)
        assert total(dice_list) == sum(fresh[:num])


def test_select_ties_drop_exact_count(make_runtime):
    dice_list = make_dice(4, 4, 4)
    REModKeepHighest(Int(1)).modify(dice_list, make_runtime())
    assert [dice.dropped for dice in dice_list] == [True, True, False]
    assert total(dice_list) == 4


def test_select_out_of_range(make_runtime):
    with pytest.raises(RollEvalError) as exc_info:
        REModKeepHighest(Int(6)).modify(make_dice(1, 2, 3, 4, 5), make_runtime())
    assert str(exc_info.value) == "eval error: amount 6 is out of range [0, 5]"


def test_select_range_counts_active_dice(roll):
    assert roll("4d[1,1]kh3dl3").result == 0
    with pytest.raises(RollEvalError):
        roll("4d[1,1]kh3dl4")


def test_select_chain(make_runtime):
    dice_list = make_dice(3, 1, 6, 2)
    runtime = make_runtime()
    REModKeepHighest(Int(3)).modify(dice_list, runtime)
    REModDropLowest(Int(1)).modify(dice_list, runtime)
    assert total(dice_list) == 9
    assert [dice.explain() for dice in dice_list] == ["3", "1d", "6", "2d"]


def test_dropped_suffix_in_explanation(roll):
    res = roll("3d[2,2]kh2")
    assert res.result == 4
    assert res.explanation == "[2d, 2, 2]"


def test_keep_highest_on_degenerate_faces(roll):
    for seed in range(5):
        assert roll("2d[6,6]kh2", seed=seed).result == 12
        assert roll("2d[6,6]kh", seed=seed).result == 6


def test_reroll_saturates_in_min_mode(roll):
    res = roll("1d6r", "min")
    assert res.result == 1
    assert res.explanation == "[{1r, 1}]"
    assert roll("1d6r3", "min").explanation == "[{1r, 1r, 1r, 1}]"


def test_explode_saturates_in_max_mode(roll):
    res = roll("1d6!", "max")
    assert res.result == 12
    assert res.explanation == "[{6!, 6}]"
    assert roll("2d6!3", "max").result == 48


def test_explode_condition_not_met(roll):
    res = roll("1d6!>=7", "max")
    assert res.result == 6
    assert res.explanation == "[6]"


def test_zero_amount_is_a_no_op(roll):
    assert roll("1d6!0", "max").explanation == "[6]"
    assert roll("1d6r0", "min").explanation == "[1]"


def test_reroll_with_condition(roll):
    for seed in range(10):
        assert roll("4d[1,5]r100<3", seed=seed).result == 20


def test_explode_never_reduces_first_value(make_runtime):
    for seed in range(30):
        runtime = make_runtime(seed=seed)
        dice_list = runtime.mode.roll_dice(4, SIDES, (REModExplode(Int(2)),), runtime)
        for dice in dice_list:
            assert dice.sum() >= dice.values[0].value
            assert all(v.modification is Modification.EXPLODED for v in dice.values[:-1])


def test_reroll_counts_only_last_value():
    dice = DiceRolls(1.0, SIDES)
    dice.reroll(4.0)
    assert dice.sum() == 4
    dice.explode(6.0)
    assert dice.sum() == 10
    assert dice.explain() == "{1r, 4!, 6}"


def test_modifiers_skip_dropped_dice(roll):
    res = roll("2d6kh!", "max")
    assert res.result == 12
    assert res.explanation == "[6d, {6!, 6}]"


def test_condition_value_evaluated(roll):
    assert roll("1d6!=(2*3)", "max").result == 12


def test_explode_limit_saturates(roll):
    res = roll("1d6!4", "max", explode_limit=3)
    assert res.result == 24
    assert res.explanation == "[{6!, 6!, 6!, 6}]"
    assert 1 <= roll("1d6r20000").result <= 6
    assert roll("1d6!20000>=7", "max").result == 6


def test_negative_retry_amount(roll):
    with pytest.raises(RollEvalError):
        roll("1d6r(0-1)")


def test_avg_explode_closed_form(roll):
    assert roll("1d6!", "avg").get_val_str() == "4.08333"
    assert roll("1d6!>=7", "avg").result == 3.5


def test_avg_explode_multiple_amount(roll):
    # 3.5 + 3.5 * (1/2 + 1/4)
    assert roll("1d6!2>3", "avg").result == pytest.approx(3.5 + 3.5 * 0.75)


def test_avg_reroll_closed_form(roll):
    assert roll("1d6r", "avg").get_val_str() == "3.91667"
    # 两面骰重骰1最多一次: 1/2 * 2 + 1/2 * 1.5
    assert roll("1d2r", "avg").result == pytest.approx(1.75)


def test_avg_keep_highest(roll):
    assert roll("2d6kh", "avg").result == 3.5


def test_lookup_modifier():
    assert lookup_modifier("k", "l") == (REModKeepLowest, 2)
    assert lookup_modifier("k", "3") == (REModKeepHighest, 1)
    assert lookup_modifier("d", None) == (REModDropLowest, 1)
    assert lookup_modifier("+", "1") == (None, 0)
    assert lookup_modifier(None, None) == (None, 0)


def test_condition_unknown_operator():
    with pytest.raises(ValueError):
        RollCondition("!=", Int(1))
