"""
Expense management routes.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.core.utils import to_http_exception
from app.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate, ExpenseSummaryResponse
from app.schemas.split import SplitRequest
from app.services.exceptions import SettlementEngineError, SplitValidationError
from app.services import expense_service
from app.services.ledger_service import summarize_expenses
from app.api.dependencies import get_current_user_id
from app.api.routes.trips import check_trip_access, check_trip_owner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _engine_error(exc: SettlementEngineError, trip_id: int):
    if isinstance(exc, SplitValidationError):
        logger.info("Rejected split for trip %s: %s", trip_id, exc)
    return to_http_exception(exc)


@router.get("/{trip_id}", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List expenses of a trip, newest first."""
    trip = check_trip_access(trip_id, current_user_id, db)
    return [expense_service.build_expense_response(e) for e in expense_service.list_expenses(trip, db)]


@router.post("/{trip_id}", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new expense and split it."""
    trip = check_trip_access(trip_id, current_user_id, db)
    try:
        expense = expense_service.create_expense(trip, expense_data, db)
    except SettlementEngineError as exc:
        raise _engine_error(exc, trip_id)
    return expense_service.build_expense_response(expense)


@router.get("/{trip_id}/summary", response_model=ExpenseSummaryResponse)
async def get_expense_summary(
    trip_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Total spend, category breakdown and balances for a trip."""
    trip = check_trip_access(trip_id, current_user_id, db)
    return summarize_expenses(trip, db)


@router.get("/{trip_id}/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    trip_id: int,
    expense_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single expense with its splits."""
    trip = check_trip_access(trip_id, current_user_id, db)
    try:
        expense = expense_service.get_expense(trip, expense_id, db)
    except SettlementEngineError as exc:
        raise _engine_error(exc, trip_id)
    return expense_service.build_expense_response(expense)


@router.patch("/{trip_id}/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    trip_id: int,
    expense_id: int,
    expense_data: ExpenseUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update an expense (owner only)."""
    trip = check_trip_owner(trip_id, current_user_id, db)
    try:
        expense = expense_service.get_expense(trip, expense_id, db)
        expense = expense_service.update_expense(trip, expense, expense_data, db)
    except SettlementEngineError as exc:
        raise _engine_error(exc, trip_id)
    return expense_service.build_expense_response(expense)


@router.put("/{trip_id}/{expense_id}/splits", response_model=ExpenseResponse)
async def replace_splits(
    trip_id: int,
    expense_id: int,
    split_data: SplitRequest,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Replace all splits of an expense (owner only)."""
    trip = check_trip_owner(trip_id, current_user_id, db)
    try:
        expense = expense_service.get_expense(trip, expense_id, db)
        expense = expense_service.replace_splits(trip, expense, split_data, db)
    except SettlementEngineError as exc:
        raise _engine_error(exc, trip_id)
    return expense_service.build_expense_response(expense)


@router.delete("/{trip_id}/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    trip_id: int,
    expense_id: int,
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete an expense and its splits (owner only)."""
    trip = check_trip_owner(trip_id, current_user_id, db)
    try:
        expense = expense_service.get_expense(trip, expense_id, db)
    except SettlementEngineError as exc:
        raise _engine_error(exc, trip_id)
    expense_service.delete_expense(expense, db)
