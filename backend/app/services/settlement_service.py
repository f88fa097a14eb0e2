"""
Settlement service: debt simplification and recorded settlements.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from app.core.money import Number, is_approximately_equal, round_money, sum_money, to_decimal
from app.models.settlement import Settlement
from app.models.trip import Trip
from app.schemas.settlement import SettlementCreate, SettlementSuggestions, Transfer
from app.services.exceptions import (
    CurrencyMismatchError, ParticipantNotFoundError, SelfSettlementError, UnbalancedLedgerError
)
from app.services.ledger_service import load_trip_balances, net_balances

logger = logging.getLogger(__name__)


def reduce_debts(balances: Dict[int, Number]) -> List[Transfer]:
    """
    Produce the transfers that bring every net balance to zero.

    Greedy matching: the largest remaining creditor is paid by the largest
    remaining debtor, for the smaller of the two amounts, until nobody is
    a cent or more away from zero. Ties keep the input order. At most
    `len(creditors) + len(debtors) - 1` transfers are returned.

    Args:
        balances: participant id -> net balance (positive = is owed, negative = owes)

    Returns:
        List of Transfer from debtor to creditor

    Raises:
        UnbalancedLedgerError: If the balances don't sum to zero
    """
    amounts = {pid: to_decimal(bal) for pid, bal in balances.items()}
    total = sum_money(amounts.values())
    if not is_approximately_equal(total, 0):
        raise UnbalancedLedgerError(imbalance=total)

    # Separate creditors and debtors, debts stored as positive amounts
    settled = {pid for pid, bal in amounts.items() if is_approximately_equal(bal, 0)}
    creditors = [[pid, bal] for pid, bal in amounts.items() if bal > 0 and pid not in settled]
    debtors = [[pid, -bal] for pid, bal in amounts.items() if bal < 0 and pid not in settled]

    # Sort in descending order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    cred_idx = 0
    debt_idx = 0

    while cred_idx < len(creditors) and debt_idx < len(debtors):
        creditor = creditors[cred_idx]
        debtor = debtors[debt_idx]

        # Transfer the minimum of what's owed and what's needed
        transfer_amount = min(creditor[1], debtor[1])
        transfers.append(Transfer(
            from_participant_id=debtor[0],
            to_participant_id=creditor[0],
            amount=transfer_amount
        ))

        creditor[1] -= transfer_amount
        debtor[1] -= transfer_amount

        if is_approximately_equal(creditor[1], 0):
            cred_idx += 1
        if is_approximately_equal(debtor[1], 0):
            debt_idx += 1

    return transfers


def apply_transfers(balances: Dict[int, Number], transfers: List[Transfer]) -> Dict[int, Decimal]:
    """
    Net balances after the given transfers have been paid.

    Verification helper: applying the output of `reduce_debts` must leave
    every balance within a cent of zero. Not used when serving requests.
    """
    result = {pid: to_decimal(bal) for pid, bal in balances.items()}
    for transfer in transfers:
        result[transfer.from_participant_id] = result.get(transfer.from_participant_id, Decimal("0")) + transfer.amount
        result[transfer.to_participant_id] = result.get(transfer.to_participant_id, Decimal("0")) - transfer.amount
    return result


def suggest_settlement(trip: Trip, db: Session) -> SettlementSuggestions:
    """
    Derive current balances and suggested transfers for a trip.

    Always recomputed from expenses, splits and recorded settlements.
    """
    balances = load_trip_balances(trip, db)
    try:
        transfers = reduce_debts(net_balances(balances))
    except UnbalancedLedgerError as exc:
        logger.error(
            "Unbalanced ledger for trip %s: balances sum to %s", trip.id, exc.imbalance
        )
        raise

    return SettlementSuggestions(
        trip_id=trip.id,
        currency=trip.base_currency,
        balances=list(balances.values()),
        transfers=transfers
    )


def record_settlement(trip: Trip, data: SettlementCreate, db: Session) -> Settlement:
    """
    Record a transfer between two participants of the trip.

    Settlements are append-only; recording one never re-runs the reducer.
    """
    if data.from_participant_id == data.to_participant_id:
        raise SelfSettlementError("A participant cannot settle with themselves")

    roster = {p.id for p in trip.participants}
    for pid in (data.from_participant_id, data.to_participant_id):
        if pid not in roster:
            raise ParticipantNotFoundError(f"Participant {pid} not found in trip {trip.id}")

    currency = data.currency or trip.base_currency
    if currency != trip.base_currency:
        raise CurrencyMismatchError(
            f"Settlements must be in the trip currency {trip.base_currency}, got {currency}"
        )

    settlement = Settlement(
        trip_id=trip.id,
        from_participant_id=data.from_participant_id,
        to_participant_id=data.to_participant_id,
        amount=round_money(data.amount),
        currency=currency,
        notes=data.notes
    )
    db.add(settlement)
    db.commit()
    db.refresh(settlement)

    logger.info(
        "Settlement %s recorded for trip %s: %s -> %s %s %s",
        settlement.id, trip.id, data.from_participant_id, data.to_participant_id,
        data.amount, currency
    )
    return settlement


def list_settlements(trip: Trip, db: Session, limit: Optional[int] = None) -> List[Settlement]:
    """Recorded settlements for a trip, most recent first."""
    query = db.query(Settlement).filter(
        Settlement.trip_id == trip.id
    ).order_by(Settlement.settled_at.desc(), Settlement.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()
