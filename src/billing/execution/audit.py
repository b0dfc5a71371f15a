"""Append-only audit records written by the execution flows.

Rows are created once per attempt and never updated, so a partially
completed charge can always be reconciled by hand.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from billing.domain import billing
from billing.execution.outcome import MESSAGE_LIMIT, ExecutionOutcome, InvoiceState


class TransactionStatus(Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@billing.aggregate
class DirectDebitExecution:
    """Outcome of a direct-debit attempt, including attempts that never reached the provider."""

    request_id = String(required=True, max_length=255)
    invoice_id = Identifier(required=True)
    invoice_type = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    amount = Float()
    invoice_state = String(max_length=20, choices=InvoiceState, required=True)
    transaction_id = String(max_length=255)
    message = String(max_length=MESSAGE_LIMIT)
    payment_option_id = Identifier()
    merchant_reference = String(max_length=50)
    executed_at = DateTime(required=True)

    @classmethod
    def record(cls, request_id: str, request, outcome: ExecutionOutcome, merchant_reference: str):
        return cls(
            request_id=request_id,
            invoice_id=outcome.invoice_id,
            invoice_type=outcome.invoice_type,
            user_id=str(request.user_id),
            amount=request.amount,
            invoice_state=outcome.invoice_state.value,
            transaction_id=outcome.transaction_id,
            message=outcome.message,
            payment_option_id=outcome.payment_option_id,
            merchant_reference=merchant_reference,
            executed_at=outcome.executed_at,
        )


@billing.aggregate
class ProviderResponseLog:
    """Raw direct-debit provider response with signing keys masked."""

    request_id = String(required=True, max_length=255)
    invoice_id = Identifier(required=True)
    provider = String(required=True, max_length=50)
    approved = Boolean(default=False)
    transaction_id = String(max_length=255)
    payload = Text()
    received_at = DateTime(required=True)

    @classmethod
    def record(cls, request_id: str, invoice_id: str, provider: str, response, payload: dict):
        return cls(
            request_id=request_id,
            invoice_id=invoice_id,
            provider=provider,
            approved=response.is_approved(),
            transaction_id=response.tx_id,
            payload=json.dumps(payload, default=str),
            received_at=datetime.now(UTC),
        )


@billing.aggregate
class TransactionHistory:
    """One card or wallet charge attempt: authorize, capture and any error."""

    transaction_id = String(max_length=255)  # empty when rejected before a transaction existed
    location_id = Identifier()
    user_id = Identifier(required=True)
    payment_option_id = Identifier(required=True)
    payment_option_type = String(required=True, max_length=20)
    status = String(max_length=10, choices=TransactionStatus, required=True)
    payload = Text()
    created_at = DateTime(required=True)

    @property
    def succeeded(self) -> bool:
        return self.status == TransactionStatus.SUCCESS.value

    @property
    def details(self) -> dict:
        return json.loads(self.payload) if self.payload else {}

    @classmethod
    def record(
        cls,
        option,
        location_id: str | None,
        status: TransactionStatus,
        transaction_id: str | None,
        authorization=None,
        capture=None,
        error: Exception | None = None,
    ):
        payload = {
            "authorize": authorization.as_dict() if authorization is not None else None,
            "capture": capture.as_dict() if capture is not None else None,
            "error": str(error) if error is not None else None,
        }
        return cls(
            transaction_id=transaction_id,
            location_id=location_id,
            user_id=str(option.user_id),
            payment_option_id=str(option.id),
            payment_option_type=option.option_type,
            status=status.value,
            payload=json.dumps(payload, default=str),
            created_at=datetime.now(UTC),
        )
