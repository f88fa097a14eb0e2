"""
Trip model for group travel expense tracking.
"""
from sqlalchemy import Column, String, Date, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Trip(BaseModel):
    """Trip model representing a group travel event."""
    __tablename__ = "trips"

    name = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    base_currency = Column(String(3), nullable=False, default="USD")  # Single currency for settlement
    owner_user_id = Column(String(64), nullable=False, index=True)  # Account id from the auth backend

    # Relationships
    participants = relationship(
        "TripParticipant", back_populates="trip",
        cascade="all, delete-orphan", order_by="TripParticipant.id"
    )
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    settlements = relationship("Settlement", back_populates="trip", cascade="all, delete-orphan")


class TripParticipant(BaseModel):
    """A person taking part in a trip, optionally linked to an account."""
    __tablename__ = "trip_participants"
    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_trip_participant_user"),
    )

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="participants")
    splits = relationship("ExpenseSplit", back_populates="participant", cascade="all, delete")

    @property
    def is_owner(self) -> bool:
        return self.user_id is not None and self.trip is not None and self.user_id == self.trip.owner_user_id
