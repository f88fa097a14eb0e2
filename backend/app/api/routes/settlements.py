"""
Settlement routes: balances, suggested transfers and recorded settlements.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.core.utils import to_http_exception
from app.models.settlement import Settlement
from app.schemas.participant import ParticipantBalance
from app.schemas.settlement import SettlementCreate, SettlementResponse, SettlementSuggestions
from app.services.exceptions import SettlementEngineError
from app.services.ledger_service import load_trip_balances
from app.services import settlement_service
from app.api.dependencies import get_current_user_id
from app.api.routes.trips import check_trip_access

router = APIRouter(prefix="/settlement", tags=["settlement"])


def _settlement_response(settlement: Settlement) -> SettlementResponse:
    return SettlementResponse(
        id=settlement.id,
        trip_id=settlement.trip_id,
        from_participant_id=settlement.from_participant_id,
        from_participant_name=settlement.from_participant.name,
        to_participant_id=settlement.to_participant_id,
        to_participant_name=settlement.to_participant.name,
        amount=settlement.amount,
        currency=settlement.currency,
        notes=settlement.notes,
        settled_at=settlement.settled_at
    )


@router.get("/{trip_id}/balances", response_model=List[ParticipantBalance])
async def get_balances(
    trip_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Current paid/owed/net balance of every participant."""
    trip = check_trip_access(trip_id, current_user_id, db)
    return list(load_trip_balances(trip, db).values())


@router.get("/{trip_id}/suggestions", response_model=SettlementSuggestions)
async def get_suggestions(
    trip_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Suggested transfers that would settle every balance."""
    trip = check_trip_access(trip_id, current_user_id, db)
    try:
        return settlement_service.suggest_settlement(trip, db)
    except SettlementEngineError as exc:
        raise to_http_exception(exc)


@router.get("/{trip_id}/records", response_model=List[SettlementResponse])
async def list_settlements(
    trip_id: int,
    limit: Optional[int] = None,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Recorded settlements, most recent first."""
    trip = check_trip_access(trip_id, current_user_id, db)
    return [_settlement_response(s) for s in settlement_service.list_settlements(trip, db, limit)]


@router.post("/{trip_id}/records", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def record_settlement(
    trip_id: int,
    settlement_data: SettlementCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Record a suggested or ad-hoc transfer as paid."""
    trip = check_trip_access(trip_id, current_user_id, db)
    try:
        settlement = settlement_service.record_settlement(trip, settlement_data, db)
    except SettlementEngineError as exc:
        raise to_http_exception(exc)
    return _settlement_response(settlement)
