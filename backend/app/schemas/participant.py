"""
Pydantic schemas for trip participants and their balances.
"""
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
from decimal import Decimal


class ParticipantBalance(BaseModel):
    """Derived paid/owed totals for one participant."""
    participant_id: int
    total_paid: Decimal = Decimal("0")
    total_owed: Decimal = Decimal("0")
    net_balance: Decimal = Decimal("0")  # Positive = is owed money, negative = owes money


class ParticipantCreate(BaseModel):
    """Schema for adding a participant to a trip."""
    name: str
    email: Optional[EmailStr] = None
    user_id: Optional[str] = None  # Account id, when the participant has one


class ParticipantUpdate(BaseModel):
    """Schema for participant update."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class ParticipantResponse(BaseModel):
    """Schema for participant response with derived balance."""
    id: int
    trip_id: int
    user_id: Optional[str] = None
    name: str
    email: Optional[str] = None
    is_owner: bool
    total_paid: Decimal
    total_owed: Decimal
    balance: Decimal
    created_at: datetime
