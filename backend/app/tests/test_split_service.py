"""
Tests for the expense split engine.
"""
from decimal import Decimal

import pytest

from app.core.money import sum_money
from app.models.expense import SplitPolicy
from app.services.exceptions import (
    AmountMismatchError, EmptyParticipantSetError, InvalidShareError,
    PercentageMismatchError, UnknownParticipantError
)
from app.services.split_service import compute_split

ROSTER = [1, 2, 3, 4]


def amounts(shares):
    return [share.amount for share in shares]


class TestEqualSplit:

    def test_remainder_cent_goes_to_first_in_roster_order(self):
        shares = compute_split(Decimal("100.00"), {3, 1, 2}, SplitPolicy.EQUAL, ROSTER, paid_by=1)

        assert [s.participant_id for s in shares] == [1, 2, 3]
        assert amounts(shares) == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
        assert sum_money(amounts(shares)) == Decimal("100.00")

    def test_two_leftover_cents_go_to_first_two(self):
        shares = compute_split(Decimal("200.00"), [1, 2, 3], SplitPolicy.EQUAL, ROSTER, paid_by=1)
        assert amounts(shares) == [Decimal("66.67"), Decimal("66.67"), Decimal("66.66")]

    def test_even_division_has_no_remainder(self):
        shares = compute_split(Decimal("90"), [2, 4], SplitPolicy.EQUAL, ROSTER, paid_by=2)
        assert amounts(shares) == [Decimal("45.00"), Decimal("45.00")]

    def test_only_payer_split_is_marked_paid(self):
        shares = compute_split(Decimal("100.00"), [1, 2, 3], SplitPolicy.EQUAL, ROSTER, paid_by=2)
        assert [s.is_paid for s in shares] == [False, True, False]

    def test_payer_outside_participants_marks_nothing_paid(self):
        shares = compute_split(Decimal("60.00"), [2, 3], SplitPolicy.EQUAL, ROSTER, paid_by=1)
        assert not any(s.is_paid for s in shares)
        assert sum_money(amounts(shares)) == Decimal("60.00")

    def test_identical_inputs_give_identical_output(self):
        first = compute_split(Decimal("10.01"), [4, 3, 2], SplitPolicy.EQUAL, ROSTER, paid_by=4)
        second = compute_split(Decimal("10.01"), [2, 3, 4], SplitPolicy.EQUAL, ROSTER, paid_by=4)
        assert first == second

    def test_duplicate_ids_produce_one_share_each(self):
        shares = compute_split(Decimal("10.00"), [1, 1, 2], SplitPolicy.EQUAL, ROSTER, paid_by=1)
        assert amounts(shares) == [Decimal("5.00"), Decimal("5.00")]


class TestCustomSplit:

    def test_uses_supplied_amounts(self):
        shares = compute_split(
            Decimal("90.00"), [1, 2, 3], SplitPolicy.CUSTOM, ROSTER, paid_by=1,
            inputs={1: Decimal("50"), 2: Decimal("25.50"), 3: Decimal("14.50")}
        )
        assert amounts(shares) == [Decimal("50.00"), Decimal("25.50"), Decimal("14.50")]

    def test_sum_off_by_a_cent_fails(self):
        with pytest.raises(AmountMismatchError) as exc_info:
            compute_split(
                Decimal("90.00"), [1, 2, 3], SplitPolicy.CUSTOM, ROSTER, paid_by=1,
                inputs={1: 30, 2: 30, 3: Decimal("29.99")}
            )
        assert exc_info.value.total == Decimal("89.99")
        assert exc_info.value.target == Decimal("90.00")

    def test_sub_cent_difference_is_accepted(self):
        shares = compute_split(
            Decimal("90.00"), [1, 2, 3], SplitPolicy.CUSTOM, ROSTER, paid_by=1,
            inputs={1: 30, 2: 30, 3: Decimal("29.995")}
        )
        assert amounts(shares)[2] == Decimal("30.00")

    def test_rounding_residue_keeps_total_exact(self):
        shares = compute_split(
            Decimal("100.00"), [1, 2, 3], SplitPolicy.CUSTOM, ROSTER, paid_by=1,
            inputs={1: Decimal("33.333"), 2: Decimal("33.333"), 3: Decimal("33.333")}
        )
        assert amounts(shares) == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
        assert sum_money(amounts(shares)) == Decimal("100.00")

    def test_rounding_overshoot_is_taken_back(self):
        shares = compute_split(
            Decimal("100.00"), [1, 2, 3], SplitPolicy.CUSTOM, ROSTER, paid_by=1,
            inputs={1: Decimal("33.336"), 2: Decimal("33.336"), 3: Decimal("33.336")}
        )
        assert amounts(shares) == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]

    def test_missing_input_counts_as_zero(self):
        with pytest.raises(AmountMismatchError) as exc_info:
            compute_split(Decimal("40"), [1, 2], SplitPolicy.CUSTOM, ROSTER, paid_by=1, inputs={1: 20})
        assert exc_info.value.total == Decimal("20")

    def test_negative_amount_is_rejected(self):
        with pytest.raises(InvalidShareError):
            compute_split(
                Decimal("10"), [1, 2], SplitPolicy.CUSTOM, ROSTER, paid_by=1, inputs={1: 15, 2: -5}
            )

    def test_float_inputs_are_summed_exactly(self):
        shares = compute_split(
            Decimal("0.30"), [1, 2], SplitPolicy.CUSTOM, ROSTER, paid_by=1, inputs={1: 0.1, 2: 0.2}
        )
        assert amounts(shares) == [Decimal("0.10"), Decimal("0.20")]


class TestPercentageSplit:

    def test_shares_follow_percentages(self):
        shares = compute_split(
            Decimal("200.00"), [1, 2], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1,
            inputs={1: 75, 2: 25}
        )
        assert amounts(shares) == [Decimal("150.00"), Decimal("50.00")]
        assert [s.percentage for s in shares] == [Decimal("75"), Decimal("25")]

    def test_rounding_residue_keeps_total_exact(self):
        shares = compute_split(
            Decimal("100.00"), [1, 2, 3], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1,
            inputs={1: Decimal("33.33"), 2: Decimal("33.33"), 3: Decimal("33.34")}
        )
        assert sum_money(amounts(shares)) == Decimal("100.00")

    def test_residue_skips_zero_percent_participants(self):
        shares = compute_split(
            Decimal("0.01"), [1, 2, 3], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1,
            inputs={1: 0, 2: 50, 3: 50}
        )
        assert shares[0].amount == Decimal("0.00")
        assert amounts(shares) == [Decimal("0.00"), Decimal("0.00"), Decimal("0.01")]

    def test_fractional_percentages_keep_total_exact(self):
        shares = compute_split(
            Decimal("100.00"), [1, 2, 3], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1,
            inputs={1: Decimal("33.333"), 2: Decimal("33.333"), 3: Decimal("33.334")}
        )
        assert amounts(shares) == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
        assert [s.percentage for s in shares] == [Decimal("33.333"), Decimal("33.333"), Decimal("33.334")]

    def test_percentage_finer_than_stored_precision_is_rejected(self):
        with pytest.raises(InvalidShareError) as exc_info:
            compute_split(
                Decimal("100"), [1, 2, 3], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1,
                inputs={1: Decimal("33.33333"), 2: Decimal("33.33333"), 3: Decimal("33.33334")}
            )
        assert exc_info.value.participant_id == 1

    def test_percentages_not_totalling_100_fail(self):
        with pytest.raises(PercentageMismatchError) as exc_info:
            compute_split(
                Decimal("100"), [1, 2], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1, inputs={1: 50, 2: 40}
            )
        assert exc_info.value.total == Decimal("90")

    def test_percentage_above_100_is_rejected(self):
        with pytest.raises(InvalidShareError):
            compute_split(
                Decimal("100"), [1, 2], SplitPolicy.PERCENTAGE, ROSTER, paid_by=1, inputs={1: 150, 2: -50}
            )


class TestSplitInputValidation:

    def test_empty_participant_set(self):
        with pytest.raises(EmptyParticipantSetError):
            compute_split(Decimal("10"), [], SplitPolicy.EQUAL, ROSTER, paid_by=1)

    def test_unknown_participant(self):
        with pytest.raises(UnknownParticipantError) as exc_info:
            compute_split(Decimal("10"), [1, 9], SplitPolicy.EQUAL, ROSTER, paid_by=1)
        assert exc_info.value.participant_ids == [9]

    def test_unknown_payer(self):
        with pytest.raises(UnknownParticipantError) as exc_info:
            compute_split(Decimal("10"), [1, 2], SplitPolicy.EQUAL, ROSTER, paid_by=7)
        assert exc_info.value.participant_ids == [7]

    @pytest.mark.parametrize("amount,count", [
        (Decimal("0.01"), 3),
        (Decimal("1234.57"), 4),
        (Decimal("99.99"), 3),
        (Decimal("10"), 1),
    ])
    def test_equal_split_always_sums_to_amount(self, amount, count):
        shares = compute_split(amount, ROSTER[:count], SplitPolicy.EQUAL, ROSTER, paid_by=1)
        assert sum_money(amounts(shares)) == amount
        assert max(amounts(shares)) - min(amounts(shares)) <= Decimal("0.01")
