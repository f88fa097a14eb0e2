"""
Pydantic schemas for expense splits.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from decimal import Decimal
from app.models.expense import SplitPolicy


class SplitShare(BaseModel):
    """One participant's computed share of an expense."""
    participant_id: int
    amount: Decimal  # Owed amount, rounded to cents
    percentage: Optional[Decimal] = None
    is_paid: bool = False


class SplitRequest(BaseModel):
    """Schema for (re)splitting an expense."""
    split_type: SplitPolicy = SplitPolicy.EQUAL
    participant_ids: Optional[List[int]] = None  # Defaults to the whole roster
    amounts: Optional[Dict[int, Decimal]] = None  # Custom policy inputs
    percentages: Optional[Dict[int, Decimal]] = None  # Percentage policy inputs


class ExpenseSplitResponse(BaseModel):
    """Schema for a stored split."""
    id: int
    participant_id: int
    participant_name: str
    amount: Decimal
    percentage: Optional[Decimal] = None
    is_paid: bool

    class Config:
        from_attributes = True
