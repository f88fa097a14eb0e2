"""
Pydantic schemas for Settlement entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from app.schemas.participant import ParticipantBalance


class Transfer(BaseModel):
    """A suggested payment from a debtor to a creditor."""
    from_participant_id: int
    to_participant_id: int
    amount: Decimal


class SettlementCreate(BaseModel):
    """Schema for recording a settlement."""
    from_participant_id: int
    to_participant_id: int
    amount: Decimal = Field(gt=0)
    currency: Optional[str] = None  # Defaults to the trip's base currency
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v):
        return v.upper() if v else v


class SettlementResponse(BaseModel):
    """Schema for settlement response."""
    id: int
    trip_id: int
    from_participant_id: int
    from_participant_name: str
    to_participant_id: int
    to_participant_name: str
    amount: Decimal
    currency: str
    notes: Optional[str] = None
    settled_at: datetime


class SettlementSuggestions(BaseModel):
    """Schema for the current balances and the transfers that would settle them."""
    trip_id: int
    currency: str
    balances: List[ParticipantBalance]
    transfers: List[Transfer]
