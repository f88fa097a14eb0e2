"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.utils import to_http_exception
from app.db.session import get_db
from app.models.trip import Trip, TripParticipant
from app.schemas.trip import TripCreate, TripResponse, TripDetailResponse
from app.api.dependencies import get_current_user_id
from app.services import trip_service
from app.services.exceptions import TripNotFoundError
from app.services.participant_service import list_participant_responses

router = APIRouter(prefix="/trips", tags=["trips"])


def check_trip_access(trip_id: int, user_id: str, db: Session) -> Trip:
    """Check if user has access to trip."""
    try:
        trip = trip_service.get_trip(trip_id, db)
    except TripNotFoundError as exc:
        raise to_http_exception(exc)

    if trip.owner_user_id == user_id:
        return trip

    participant = db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.user_id == user_id
    ).first()

    if not participant:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this trip"
        )

    return trip


def check_trip_owner(trip_id: int, user_id: str, db: Session) -> Trip:
    """Check if user owns the trip."""
    trip = check_trip_access(trip_id, user_id, db)
    if trip.owner_user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the trip owner can perform this action"
        )
    return trip


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new trip; the creator becomes its owner and first participant."""
    return trip_service.create_trip(trip_data, current_user_id, db)


@router.get("", response_model=List[TripResponse])
async def list_trips(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List all trips the current user takes part in."""
    trips = db.query(Trip).join(TripParticipant).filter(
        TripParticipant.user_id == current_user_id
    ).order_by(Trip.id.desc()).all()
    return trips


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get trip details with the roster and each participant's balance."""
    trip = check_trip_access(trip_id, current_user_id, db)

    return TripDetailResponse(
        id=trip.id,
        name=trip.name,
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        base_currency=trip.base_currency,
        owner_user_id=trip.owner_user_id,
        created_at=trip.created_at,
        updated_at=trip.updated_at,
        participants=list_participant_responses(trip, db)
    )
