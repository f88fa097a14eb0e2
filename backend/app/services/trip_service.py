"""
Trip lookup and creation.
"""
import logging
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.trip import Trip, TripParticipant
from app.schemas.trip import TripCreate
from app.services.exceptions import TripNotFoundError

logger = logging.getLogger(__name__)


def get_trip(trip_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise TripNotFoundError(f"Trip {trip_id} not found")
    return trip


def create_trip(data: TripCreate, owner_user_id: str, db: Session) -> Trip:
    """Create a trip with its owner as the first participant."""
    trip = Trip(
        name=data.name,
        destination=data.destination,
        start_date=data.start_date,
        end_date=data.end_date,
        base_currency=(data.base_currency or settings.DEFAULT_CURRENCY).upper(),
        owner_user_id=owner_user_id
    )
    db.add(trip)
    db.flush()

    db.add(TripParticipant(
        trip_id=trip.id,
        user_id=owner_user_id,
        name=data.owner_name,
        email=data.owner_email
    ))
    db.commit()
    db.refresh(trip)

    logger.info("Trip %s created by %s", trip.id, owner_user_id)
    return trip
