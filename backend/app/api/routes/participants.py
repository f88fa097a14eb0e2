"""
Trip roster routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.core.utils import to_http_exception
from app.schemas.participant import (
    ParticipantBalance, ParticipantCreate, ParticipantResponse, ParticipantUpdate
)
from app.services.exceptions import SettlementEngineError
from app.services.ledger_service import load_trip_balances
from app.services import participant_service
from app.api.dependencies import get_current_user_id
from app.api.routes.trips import check_trip_access, check_trip_owner

router = APIRouter(prefix="/trips/{trip_id}/participants", tags=["participants"])


def _response(trip, participant, db: Session) -> ParticipantResponse:
    balance = load_trip_balances(trip, db).get(
        participant.id, ParticipantBalance(participant_id=participant.id)
    )
    return participant_service.build_participant_response(participant, balance)


@router.get("", response_model=List[ParticipantResponse])
async def list_participants(
    trip_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the trip roster with balances."""
    trip = check_trip_access(trip_id, current_user_id, db)
    return participant_service.list_participant_responses(trip, db)


@router.post("", response_model=ParticipantResponse, status_code=status.HTTP_201_CREATED)
async def add_participant(
    trip_id: int,
    participant_data: ParticipantCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Add a participant to the trip (owner only)."""
    trip = check_trip_owner(trip_id, current_user_id, db)
    try:
        participant = participant_service.add_participant(trip, participant_data, db)
    except SettlementEngineError as exc:
        raise to_http_exception(exc)
    return _response(trip, participant, db)


@router.get("/{participant_id}", response_model=ParticipantResponse)
async def get_participant(
    trip_id: int,
    participant_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a participant with their balance."""
    trip = check_trip_access(trip_id, current_user_id, db)
    try:
        participant = participant_service.get_participant(trip, participant_id, db)
    except SettlementEngineError as exc:
        raise to_http_exception(exc)
    return _response(trip, participant, db)


@router.patch("/{participant_id}", response_model=ParticipantResponse)
async def update_participant(
    trip_id: int,
    participant_id: int,
    participant_data: ParticipantUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update a participant's name or email (owner only)."""
    trip = check_trip_owner(trip_id, current_user_id, db)
    try:
        participant = participant_service.get_participant(trip, participant_id, db)
        participant = participant_service.update_participant(participant, participant_data, db)
    except SettlementEngineError as exc:
        raise to_http_exception(exc)
    return _response(trip, participant, db)


@router.delete("/{participant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_participant(
    trip_id: int,
    participant_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Remove a participant and their splits (owner only)."""
    trip = check_trip_owner(trip_id, current_user_id, db)
    try:
        participant = participant_service.get_participant(trip, participant_id, db)
        participant_service.remove_participant(participant, db)
    except SettlementEngineError as exc:
        raise to_http_exception(exc)
