"""
Expense split engine.

Turns an expense amount, a subset of the trip roster and a split policy
into one owed share per participant. Pure computation: nothing here
touches the database, so a failed split never leaves partial state.
"""
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence
from app.core.money import (
    HUNDRED, PERCENT_PRECISION, Number, distribute_cents, is_approximately_equal, round_money,
    sum_money, to_decimal, truncate_money
)
from app.models.expense import SplitPolicy
from app.schemas.split import SplitShare
from app.services.exceptions import (
    AmountMismatchError, EmptyParticipantSetError, InvalidShareError,
    PercentageMismatchError, UnknownParticipantError
)


def compute_split(
    amount: Number,
    participant_ids: Iterable[int],
    policy: SplitPolicy,
    roster: Sequence[int],
    paid_by: int,
    inputs: Optional[Mapping[int, Number]] = None
) -> List[SplitShare]:
    """
    Compute the owed share of each participant in `participant_ids`.

    Shares come back in roster order, one per distinct participant. For
    the equal policy the amount is divided down to the cent and leftover
    cents go one each to the first participants in roster order. The
    custom and percentage policies hand their rounding residue out the
    same way, over participants with a non-zero input, so the shares
    always add up to `amount` exactly.

    Args:
        amount: Expense amount (> 0)
        participant_ids: Participants sharing the expense
        policy: Equal, custom or percentage
        roster: Every participant id of the trip, in roster order
        paid_by: Participant who paid; need not share the expense
        inputs: participant id -> amount (custom) or percentage (percentage)

    Returns:
        List of SplitShare, the payer's share (if any) flagged `is_paid`

    Raises:
        EmptyParticipantSetError: If no participants are given
        UnknownParticipantError: If a participant or the payer is not on the roster
        AmountMismatchError: If custom amounts don't add up to `amount`
        PercentageMismatchError: If percentages don't add up to 100
        InvalidShareError: If an amount is negative, or a percentage is outside
            0-100 or finer than four decimal places
    """
    amount = round_money(amount)
    selected = set(participant_ids)
    if not selected:
        raise EmptyParticipantSetError()

    unknown = (selected | {paid_by}) - set(roster)
    if unknown:
        raise UnknownParticipantError(unknown)

    ordered = [pid for pid in roster if pid in selected]
    inputs = inputs or {}

    if policy == SplitPolicy.EQUAL:
        shares = _equal_shares(amount, len(ordered))
        percentages = [None] * len(ordered)
    elif policy == SplitPolicy.CUSTOM:
        shares = _custom_shares(amount, ordered, inputs)
        percentages = [None] * len(ordered)
    elif policy == SplitPolicy.PERCENTAGE:
        percentages = [to_decimal(inputs.get(pid, 0)) for pid in ordered]
        shares = _percentage_shares(amount, ordered, percentages)
    else:
        raise ValueError(f"Unsupported split policy: {policy}")

    return [
        SplitShare(
            participant_id=pid,
            amount=share,
            percentage=pct,
            is_paid=pid == paid_by
        )
        for pid, share, pct in zip(ordered, shares, percentages)
    ]


def _equal_shares(amount: Decimal, count: int) -> List[Decimal]:
    base = truncate_money(amount / count)
    remainder = amount - base * count
    return distribute_cents([base] * count, remainder)


def _custom_shares(amount: Decimal, ordered: List[int], inputs: Mapping[int, Number]) -> List[Decimal]:
    values = [to_decimal(inputs.get(pid, 0)) for pid in ordered]
    for pid, value in zip(ordered, values):
        if value < 0:
            raise InvalidShareError(pid, value)

    total = sum_money(values)
    if not is_approximately_equal(total, amount):
        raise AmountMismatchError(total=total, target=amount)
    return _settle_residue(amount, [round_money(v) for v in values], values)


def _percentage_shares(amount: Decimal, ordered: List[int], percentages: List[Decimal]) -> List[Decimal]:
    for pid, pct in zip(ordered, percentages):
        if pct < 0 or pct > HUNDRED or pct != pct.quantize(PERCENT_PRECISION):
            raise InvalidShareError(pid, pct)

    total = sum_money(percentages)
    if not is_approximately_equal(total, HUNDRED):
        raise PercentageMismatchError(total=total)

    shares = [round_money(amount * pct / HUNDRED) for pct in percentages]
    return _settle_residue(amount, shares, percentages)


def _settle_residue(amount: Decimal, shares: List[Decimal], weights: List[Decimal]) -> List[Decimal]:
    """Hand the cents lost to per-share rounding to the first non-zero shares."""
    shares = list(shares)
    weighted = [i for i, weight in enumerate(weights) if weight > 0]
    if weighted:
        adjusted = distribute_cents([shares[i] for i in weighted], amount - sum_money(shares))
        for i, value in zip(weighted, adjusted):
            shares[i] = value
    return shares
