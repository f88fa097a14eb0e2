"""
Participant ledger: derives paid/owed totals from source records.

Balances are always recomputed from the full set of expenses, splits and
settlements rather than patched incrementally, so cached totals can never
drift from the rows they summarize.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence
from sqlalchemy.orm import Session
from app.core.money import round_money, to_decimal
from app.models.expense import Expense, ExpenseSplit
from app.models.settlement import Settlement
from app.models.trip import Trip
from app.schemas.expense import CategoryExpenseItem, ExpenseSummaryResponse
from app.schemas.participant import ParticipantBalance


def recompute_balances(
    roster: Sequence[int],
    expenses: Iterable,
    splits: Iterable,
    settlements: Iterable = ()
) -> Dict[int, ParticipantBalance]:
    """
    Compute each participant's total paid, total owed and net balance.

    A recorded settlement counts as money paid by its sender and money
    owed by its receiver, which moves both towards zero.

    Args:
        roster: Participant ids in roster order; all of them appear in the result
        expenses: Objects with `paid_by_participant_id` and `amount`
        splits: Objects with `participant_id` and `amount`
        settlements: Objects with `from_participant_id`, `to_participant_id` and `amount`

    Returns:
        participant id -> ParticipantBalance, in roster order
    """
    paid: Dict[int, Decimal] = defaultdict(Decimal)
    owed: Dict[int, Decimal] = defaultdict(Decimal)

    for expense in expenses:
        paid[expense.paid_by_participant_id] += to_decimal(expense.amount)
    for split in splits:
        owed[split.participant_id] += to_decimal(split.amount)
    for settlement in settlements:
        amount = to_decimal(settlement.amount)
        paid[settlement.from_participant_id] += amount
        owed[settlement.to_participant_id] += amount

    # Ids outside the roster still count so the ledger stays closed
    ordered = list(roster) + sorted((set(paid) | set(owed)) - set(roster))

    balances = {}
    for pid in ordered:
        total_paid = round_money(paid.get(pid, Decimal("0")))
        total_owed = round_money(owed.get(pid, Decimal("0")))
        balances[pid] = ParticipantBalance(
            participant_id=pid,
            total_paid=total_paid,
            total_owed=total_owed,
            net_balance=total_paid - total_owed
        )
    return balances


def net_balances(balances: Dict[int, ParticipantBalance]) -> Dict[int, Decimal]:
    """Reduce ledger entries to participant id -> net balance."""
    return {pid: entry.net_balance for pid, entry in balances.items()}


def load_trip_balances(trip: Trip, db: Session) -> Dict[int, ParticipantBalance]:
    """Recompute balances for a trip from its current rows."""
    roster = [p.id for p in trip.participants]
    expenses = db.query(Expense).filter(Expense.trip_id == trip.id).all()
    splits = db.query(ExpenseSplit).join(Expense).filter(Expense.trip_id == trip.id).all()
    settlements = db.query(Settlement).filter(Settlement.trip_id == trip.id).all()
    return recompute_balances(roster, expenses, splits, settlements)


def summarize_expenses(trip: Trip, db: Session) -> ExpenseSummaryResponse:
    """Total spend, per-category breakdown and participant balances for a trip."""
    expenses = db.query(Expense).filter(Expense.trip_id == trip.id).all()
    total = round_money(sum((to_decimal(e.amount) for e in expenses), Decimal("0")))

    by_category: Dict[str, List[Decimal]] = defaultdict(list)
    for expense in expenses:
        by_category[expense.category or "other"].append(to_decimal(expense.amount))

    categories = [
        CategoryExpenseItem(
            category=category,
            total_amount=round_money(sum(amounts)),
            expense_count=len(amounts),
            percentage=round(float(sum(amounts) / total * 100), 2) if total > 0 else 0.0
        )
        for category, amounts in by_category.items()
    ]
    categories.sort(key=lambda item: item.total_amount, reverse=True)

    return ExpenseSummaryResponse(
        trip_id=trip.id,
        currency=trip.base_currency,
        total_expenses=total,
        categories=categories,
        balances=list(load_trip_balances(trip, db).values())
    )
