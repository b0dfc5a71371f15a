"""The value every payment flow hands back."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

# Matches the message column of the audit and invoice payment records
MESSAGE_LIMIT = 1000


class InvoiceState(Enum):
    UNPROCESSED = "UNPROCESSED"
    PAYMENT_ISSUED = "PAYMENT_ISSUED"
    PAYMENT_FAILED = "PAYMENT_FAILED"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Terminal result of one payment attempt for an invoice."""

    invoice_id: str
    invoice_type: str
    invoice_state: InvoiceState
    message: str
    transaction_id: str | None = None
    payment_option_id: str | None = None
    executed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def for_request(cls, request, invoice_state: InvoiceState, message: str, **kwargs) -> "ExecutionOutcome":
        return cls(
            invoice_id=str(request.invoice_id),
            invoice_type=request.invoice_type,
            invoice_state=invoice_state,
            message=message[:MESSAGE_LIMIT],
            **kwargs,
        )
