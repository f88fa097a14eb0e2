"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import date as dt_date, datetime
from decimal import Decimal
from app.models.expense import SplitPolicy
from app.schemas.participant import ParticipantBalance
from app.schemas.split import ExpenseSplitResponse


class ExpenseBase(BaseModel):
    """Base expense schema."""
    amount: Decimal = Field(gt=0)
    currency: Optional[str] = None  # Defaults to the trip's base currency
    category: str = "other"
    description: Optional[str] = None
    date: dt_date

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v):
        return v.upper() if v else v

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v):
        return v.strip().lower() or "other"


class ExpenseCreate(ExpenseBase):
    """Schema for expense creation."""
    paid_by_participant_id: int
    split_type: SplitPolicy = SplitPolicy.EQUAL
    participant_ids: Optional[List[int]] = None  # Defaults to the whole roster
    amounts: Optional[Dict[int, Decimal]] = None
    percentages: Optional[Dict[int, Decimal]] = None


class ExpenseUpdate(BaseModel):
    """Schema for expense update."""
    amount: Optional[Decimal] = Field(default=None, gt=0)
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt_date] = None
    paid_by_participant_id: Optional[int] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    trip_id: int
    paid_by_participant_id: int
    paid_by_name: str
    amount: Decimal
    currency: str
    category: str
    description: Optional[str] = None
    date: dt_date
    split_type: SplitPolicy
    splits: List[ExpenseSplitResponse] = []
    created_at: datetime
    updated_at: datetime


class CategoryExpenseItem(BaseModel):
    """Schema for category expense item in summary."""
    category: str
    total_amount: Decimal
    expense_count: int
    percentage: float  # Percentage of total expenses (0-100)


class ExpenseSummaryResponse(BaseModel):
    """Schema for expense summary response."""
    trip_id: int
    currency: str
    total_expenses: Decimal
    categories: List[CategoryExpenseItem]
    balances: List[ParticipantBalance]
