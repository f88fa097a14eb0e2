"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import date, datetime
from app.schemas.participant import ParticipantResponse


class TripBase(BaseModel):
    """Base trip schema."""
    name: str
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    base_currency: Optional[str] = None  # Falls back to DEFAULT_CURRENCY

    @field_validator("base_currency")
    @classmethod
    def normalize_currency(cls, v):
        return v.upper() if v else v


class TripCreate(TripBase):
    """Schema for trip creation."""
    owner_name: str  # Display name of the creator's participant entry
    owner_email: Optional[str] = None


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    base_currency: str
    owner_user_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with participants."""
    participants: List[ParticipantResponse] = []
