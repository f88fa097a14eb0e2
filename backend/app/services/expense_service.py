"""
Expense service for expense-related business logic.

Splits are computed by the split engine first and only then written, as a
full replacement of the expense's previous splits in the same commit.
"""
import logging
from typing import List, Mapping, Optional
from sqlalchemy.orm import Session
from app.core.money import round_money
from app.models.expense import Expense, ExpenseSplit, SplitPolicy
from app.models.trip import Trip
from app.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from app.schemas.split import ExpenseSplitResponse, SplitRequest, SplitShare
from app.services.exceptions import (
    CurrencyMismatchError, ExpenseNotFoundError
)
from app.services.split_service import compute_split

logger = logging.getLogger(__name__)


def _policy_inputs(policy: SplitPolicy, amounts: Optional[Mapping], percentages: Optional[Mapping]):
    if policy == SplitPolicy.CUSTOM:
        return amounts
    if policy == SplitPolicy.PERCENTAGE:
        return percentages
    return None


def to_split_rows(shares: List[SplitShare]) -> List[ExpenseSplit]:
    return [
        ExpenseSplit(
            participant_id=share.participant_id,
            amount=share.amount,
            percentage=share.percentage,
            is_paid=share.is_paid
        )
        for share in shares
    ]


def get_expense(trip: Trip, expense_id: int, db: Session) -> Expense:
    expense = db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.trip_id == trip.id
    ).first()
    if not expense:
        raise ExpenseNotFoundError(f"Expense {expense_id} not found in trip {trip.id}")
    return expense


def list_expenses(trip: Trip, db: Session) -> List[Expense]:
    """Expenses of a trip, newest date first."""
    return db.query(Expense).filter(
        Expense.trip_id == trip.id
    ).order_by(Expense.date.desc(), Expense.id.desc()).all()


def create_expense(trip: Trip, data: ExpenseCreate, db: Session) -> Expense:
    """Create an expense together with its splits."""
    currency = data.currency or trip.base_currency
    if currency != trip.base_currency:
        raise CurrencyMismatchError(
            f"Expenses must be in the trip currency {trip.base_currency}, got {currency}"
        )

    roster = [p.id for p in trip.participants]
    participant_ids = data.participant_ids if data.participant_ids is not None else roster
    shares = compute_split(
        amount=data.amount,
        participant_ids=participant_ids,
        policy=data.split_type,
        roster=roster,
        paid_by=data.paid_by_participant_id,
        inputs=_policy_inputs(data.split_type, data.amounts, data.percentages)
    )

    expense = Expense(
        trip_id=trip.id,
        paid_by_participant_id=data.paid_by_participant_id,
        amount=round_money(data.amount),
        currency=currency,
        category=data.category,
        description=data.description,
        date=data.date,
        split_type=data.split_type,
        splits=to_split_rows(shares)
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)

    logger.info(
        "Expense %s created for trip %s: %s %s split %s among %d",
        expense.id, trip.id, expense.amount, currency, data.split_type.value, len(shares)
    )
    return expense


def replace_splits(trip: Trip, expense: Expense, data: SplitRequest, db: Session) -> Expense:
    """Re-split an expense, replacing all of its splits at once."""
    roster = [p.id for p in trip.participants]
    participant_ids = data.participant_ids if data.participant_ids is not None else roster
    shares = compute_split(
        amount=expense.amount,
        participant_ids=participant_ids,
        policy=data.split_type,
        roster=roster,
        paid_by=expense.paid_by_participant_id,
        inputs=_policy_inputs(data.split_type, data.amounts, data.percentages)
    )

    expense.split_type = data.split_type
    expense.splits = to_split_rows(shares)
    db.commit()
    db.refresh(expense)

    logger.info("Splits replaced for expense %s (%s, %d shares)", expense.id, data.split_type.value, len(shares))
    return expense


def update_expense(trip: Trip, expense: Expense, data: ExpenseUpdate, db: Session) -> Expense:
    """
    Update expense fields.

    A new amount or payer re-derives the splits over the same
    participants with the stored policy: equal shares are recomputed,
    percentages are reapplied and custom amounts are kept, which fails
    with AmountMismatchError unless they still add up.
    """
    amount = round_money(data.amount) if data.amount is not None else expense.amount
    paid_by = data.paid_by_participant_id if data.paid_by_participant_id is not None else expense.paid_by_participant_id

    shares = None
    if amount != expense.amount or paid_by != expense.paid_by_participant_id:
        roster = [p.id for p in trip.participants]
        if expense.split_type == SplitPolicy.PERCENTAGE:
            inputs = {s.participant_id: s.percentage for s in expense.splits}
        elif expense.split_type == SplitPolicy.CUSTOM:
            inputs = {s.participant_id: s.amount for s in expense.splits}
        else:
            inputs = None
        shares = compute_split(
            amount=amount,
            participant_ids=[s.participant_id for s in expense.splits] or roster,
            policy=expense.split_type,
            roster=roster,
            paid_by=paid_by,
            inputs=inputs
        )

    expense.amount = amount
    expense.paid_by_participant_id = paid_by
    if data.category is not None:
        expense.category = data.category.strip().lower() or "other"
    if data.description is not None:
        expense.description = data.description
    if data.date is not None:
        expense.date = data.date
    if shares is not None:
        expense.splits = to_split_rows(shares)

    db.commit()
    db.refresh(expense)
    logger.info("Expense %s updated", expense.id)
    return expense


def delete_expense(expense: Expense, db: Session):
    """Delete an expense and, through the ORM cascade, its splits."""
    expense_id = expense.id
    db.delete(expense)
    db.commit()
    logger.info("Expense %s deleted", expense_id)


def build_expense_response(expense: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=expense.id,
        trip_id=expense.trip_id,
        paid_by_participant_id=expense.paid_by_participant_id,
        paid_by_name=expense.paid_by.name,
        amount=expense.amount,
        currency=expense.currency,
        category=expense.category,
        description=expense.description,
        date=expense.date,
        split_type=expense.split_type,
        splits=[
            ExpenseSplitResponse(
                id=split.id,
                participant_id=split.participant_id,
                participant_name=split.participant.name,
                amount=split.amount,
                percentage=split.percentage,
                is_paid=split.is_paid
            )
            for split in expense.splits
        ],
        created_at=expense.created_at,
        updated_at=expense.updated_at
    )
