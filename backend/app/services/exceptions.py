"""
Domain-specific exceptions for the expense settlement engine.

Split and settlement failures are recoverable: the caller re-prompts the
user and nothing is written. UnbalancedLedgerError is the exception to
that rule: it signals corrupted bookkeeping upstream and should be
surfaced distinctly from ordinary validation failures.
"""
from decimal import Decimal
from typing import Iterable


class SettlementEngineError(Exception):
    """Base exception for all settlement engine errors."""
    kind = "settlement_engine_error"

    def to_detail(self) -> dict:
        return {"kind": self.kind, "message": str(self)}


class SplitValidationError(SettlementEngineError):
    """Base exception for split inputs that cannot produce valid splits."""
    kind = "split_validation_error"


class EmptyParticipantSetError(SplitValidationError):
    """Raised when a split is requested over no participants."""
    kind = "empty_participant_set"

    def __init__(self):
        super().__init__("At least one participant must share the expense")


class UnknownParticipantError(SplitValidationError):
    """Raised when a participant id is not part of the trip roster."""
    kind = "unknown_participant"

    def __init__(self, participant_ids: Iterable[int]):
        self.participant_ids = sorted(participant_ids)
        super().__init__(f"Unknown participant(s): {', '.join(str(p) for p in self.participant_ids)}")

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["participant_ids"] = self.participant_ids
        return detail


class AmountMismatchError(SplitValidationError):
    """Raised when custom amounts do not add up to the expense amount."""
    kind = "amount_mismatch"

    def __init__(self, total: Decimal, target: Decimal):
        self.total = total
        self.target = target
        super().__init__(f"Custom amounts add up to {total}, expected {target}")

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail.update({"total": str(self.total), "target": str(self.target)})
        return detail


class PercentageMismatchError(SplitValidationError):
    """Raised when percentages do not add up to 100."""
    kind = "percentage_mismatch"

    def __init__(self, total: Decimal):
        self.total = total
        self.target = Decimal("100")
        super().__init__(f"Percentages add up to {total}%, expected 100%")

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail.update({"total": str(self.total), "target": str(self.target)})
        return detail


class InvalidShareError(SplitValidationError):
    """Raised for a negative amount, or a percentage outside 0-100 or finer than 0.0001."""
    kind = "invalid_share"

    def __init__(self, participant_id: int, value: Decimal):
        self.participant_id = participant_id
        self.value = value
        super().__init__(f"Invalid share {value} for participant {participant_id}")

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail.update({"participant_id": self.participant_id, "value": str(self.value)})
        return detail


class UnbalancedLedgerError(SettlementEngineError):
    """Raised when net balances do not sum to zero."""
    kind = "unbalanced_ledger"

    def __init__(self, imbalance: Decimal):
        self.imbalance = imbalance
        super().__init__(f"Net balances sum to {imbalance} instead of 0")

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["imbalance"] = str(self.imbalance)
        return detail


class TripNotFoundError(SettlementEngineError):
    """Raised when a trip does not exist."""
    kind = "trip_not_found"


class ParticipantNotFoundError(SettlementEngineError):
    """Raised when a participant does not exist in the trip."""
    kind = "participant_not_found"


class ExpenseNotFoundError(SettlementEngineError):
    """Raised when an expense does not exist in the trip."""
    kind = "expense_not_found"


class DuplicateParticipantError(SettlementEngineError):
    """Raised when a participant with the same email or account is already on the trip."""
    kind = "duplicate_participant"


class OwnerRemovalError(SettlementEngineError):
    """Raised when attempting to remove the trip owner from the roster."""
    kind = "owner_removal"


class ParticipantInUseError(SettlementEngineError):
    """Raised when removing a participant still referenced as a payer or settlement party."""
    kind = "participant_in_use"


class CurrencyMismatchError(SettlementEngineError):
    """Raised when an amount is not in the trip's settlement currency."""
    kind = "currency_mismatch"


class SelfSettlementError(SettlementEngineError):
    """Raised when a settlement names the same participant on both sides."""
    kind = "self_settlement"
