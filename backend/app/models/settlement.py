"""
Settlement model for recorded transfers between participants.
"""
from datetime import datetime
from sqlalchemy import Column, String, Numeric, Text, ForeignKey, Integer, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Settlement(BaseModel):
    """Append-only record of money moving from one participant to another."""
    __tablename__ = "settlements"
    __table_args__ = (
        CheckConstraint("from_participant_id <> to_participant_id", name="ck_settlement_distinct_parties"),
    )

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    from_participant_id = Column(Integer, ForeignKey("trip_participants.id"), nullable=False, index=True)
    to_participant_id = Column(Integer, ForeignKey("trip_participants.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    notes = Column(Text, nullable=True)
    settled_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="settlements")
    from_participant = relationship("TripParticipant", foreign_keys=[from_participant_id])
    to_participant = relationship("TripParticipant", foreign_keys=[to_participant_id])
