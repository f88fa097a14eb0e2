"""
Participant service for trip roster management.
"""
import logging
from typing import Dict, List
from sqlalchemy.orm import Session
from app.models.expense import Expense, SplitPolicy
from app.models.settlement import Settlement
from app.models.trip import Trip, TripParticipant
from app.schemas.participant import (
    ParticipantBalance, ParticipantCreate, ParticipantResponse, ParticipantUpdate
)
from app.services.exceptions import (
    DuplicateParticipantError, OwnerRemovalError, ParticipantInUseError, ParticipantNotFoundError
)
from app.services.expense_service import to_split_rows
from app.services.ledger_service import load_trip_balances
from app.services.split_service import compute_split

logger = logging.getLogger(__name__)


def get_participant(trip: Trip, participant_id: int, db: Session) -> TripParticipant:
    participant = db.query(TripParticipant).filter(
        TripParticipant.id == participant_id,
        TripParticipant.trip_id == trip.id
    ).first()
    if not participant:
        raise ParticipantNotFoundError(f"Participant {participant_id} not found in trip {trip.id}")
    return participant


def add_participant(trip: Trip, data: ParticipantCreate, db: Session) -> TripParticipant:
    """Add a participant to the trip roster."""
    for existing in trip.participants:
        if data.email and existing.email and existing.email.lower() == data.email.lower():
            raise DuplicateParticipantError("Participant with this email already exists")
        if data.user_id and existing.user_id == data.user_id:
            raise DuplicateParticipantError("This account is already a participant")

    participant = TripParticipant(
        trip_id=trip.id,
        user_id=data.user_id,
        name=data.name,
        email=data.email
    )
    db.add(participant)
    db.commit()
    db.refresh(participant)

    logger.info("Participant %s added to trip %s", participant.id, trip.id)
    return participant


def update_participant(participant: TripParticipant, data: ParticipantUpdate, db: Session) -> TripParticipant:
    """Update a participant's name or contact address."""
    if data.email is not None:
        for other in participant.trip.participants:
            if other.id != participant.id and other.email and other.email.lower() == data.email.lower():
                raise DuplicateParticipantError("Participant with this email already exists")
        participant.email = data.email
    if data.name is not None:
        participant.name = data.name

    db.commit()
    db.refresh(participant)
    return participant


def remove_participant(participant: TripParticipant, db: Session):
    """
    Remove a participant and, through the ORM cascade, their splits.

    The owner cannot be removed, and neither can anyone who paid an
    expense or is a party to a recorded settlement: dropping them would
    leave those rows pointing at nobody. Equal-split expenses the
    participant shared are re-split over the remaining sharers so every
    expense still adds up; a custom or percentage split they are part of
    has to be edited first.
    """
    if participant.is_owner:
        raise OwnerRemovalError("Cannot remove the trip owner as a participant")

    paid_count = db.query(Expense).filter(
        Expense.paid_by_participant_id == participant.id
    ).count()
    settlement_count = db.query(Settlement).filter(
        (Settlement.from_participant_id == participant.id)
        | (Settlement.to_participant_id == participant.id)
    ).count()
    if paid_count or settlement_count:
        raise ParticipantInUseError(
            f"Participant {participant.id} paid {paid_count} expense(s) and is part of "
            f"{settlement_count} settlement(s)"
        )

    participant_id, trip_id = participant.id, participant.trip_id
    roster = [p.id for p in participant.trip.participants if p.id != participant_id]
    resplit = []
    for split in participant.splits:
        expense = split.expense
        remaining = [s.participant_id for s in expense.splits if s.participant_id != participant_id]
        if expense.split_type != SplitPolicy.EQUAL or not remaining:
            raise ParticipantInUseError(
                f"Participant {participant_id} is part of the {expense.split_type.value} "
                f"split of expense {expense.id}; edit that split first"
            )
        shares = compute_split(
            amount=expense.amount,
            participant_ids=remaining,
            policy=SplitPolicy.EQUAL,
            roster=roster,
            paid_by=expense.paid_by_participant_id
        )
        resplit.append((expense, shares))

    for expense, shares in resplit:
        expense.splits = to_split_rows(shares)
    db.delete(participant)
    db.commit()
    logger.info("Participant %s removed from trip %s", participant_id, trip_id)


def build_participant_response(participant: TripParticipant, balance: ParticipantBalance) -> ParticipantResponse:
    return ParticipantResponse(
        id=participant.id,
        trip_id=participant.trip_id,
        user_id=participant.user_id,
        name=participant.name,
        email=participant.email,
        is_owner=participant.is_owner,
        total_paid=balance.total_paid,
        total_owed=balance.total_owed,
        balance=balance.net_balance,
        created_at=participant.created_at
    )


def list_participant_responses(trip: Trip, db: Session) -> List[ParticipantResponse]:
    """Roster with derived balances, in roster order."""
    balances: Dict[int, ParticipantBalance] = load_trip_balances(trip, db)
    return [
        build_participant_response(p, balances.get(p.id, ParticipantBalance(participant_id=p.id)))
        for p in trip.participants
    ]
