"""
Expense model for tracking spending and its per-participant splits.
"""
import enum
from sqlalchemy import (
    Column, String, Numeric, Date, ForeignKey, Integer, Text, Boolean, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class SplitPolicy(str, enum.Enum):
    """How an expense is divided among participants."""
    EQUAL = "equal"
    CUSTOM = "custom"
    PERCENTAGE = "percentage"


class Expense(BaseModel):
    """Expense model representing a single payable item."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    paid_by_participant_id = Column(Integer, ForeignKey("trip_participants.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    category = Column(String(50), nullable=False, default="other")
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    split_type = Column(SQLEnum(SplitPolicy), nullable=False, default=SplitPolicy.EQUAL)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    paid_by = relationship("TripParticipant", foreign_keys=[paid_by_participant_id])
    splits = relationship(
        "ExpenseSplit", back_populates="expense",
        cascade="all, delete-orphan", order_by="ExpenseSplit.id"
    )


class ExpenseSplit(BaseModel):
    """One participant's share of one expense."""
    __tablename__ = "expense_splits"

    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("trip_participants.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)  # Owed amount
    percentage = Column(Numeric(7, 4), nullable=True)  # Only for percentage splits
    is_paid = Column(Boolean, nullable=False, default=False)  # True for the payer's own split

    # Relationships
    expense = relationship("Expense", back_populates="splits")
    participant = relationship("TripParticipant", back_populates="splits")
