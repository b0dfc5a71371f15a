"""InvoicePayment aggregate — the settled result of one invoice processing request.

Created once per request by the dispatcher after the payment flow returns.
Creating it raises the InvoiceStateUpdated event that tells invoicing how
the invoice ended up.
"""

from protean.fields import DateTime, Float, Identifier, String

from billing.domain import billing
from billing.execution.outcome import MESSAGE_LIMIT, ExecutionOutcome, InvoiceState
from billing.invoice.events import InvoiceStateUpdated


@billing.aggregate
class InvoicePayment:
    request_id = String(required=True, max_length=255)
    invoice_id = Identifier(required=True)
    invoice_type = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    location_id = Identifier()
    month_str = String(max_length=20)
    amount = Float()
    invoice_state = String(max_length=20, choices=InvoiceState, required=True)
    transaction_id = String(max_length=255)
    payment_option_id = Identifier()
    payment_option_type = String(max_length=20)
    message = String(max_length=MESSAGE_LIMIT)
    processed_at = DateTime(required=True)

    @classmethod
    def settle(cls, request_id: str, request, outcome: ExecutionOutcome, payment_option_type: str | None = None):
        payment = cls(
            request_id=request_id,
            invoice_id=outcome.invoice_id,
            invoice_type=outcome.invoice_type,
            user_id=str(request.user_id),
            location_id=request.location_id,
            month_str=request.month_str,
            amount=request.amount,
            invoice_state=outcome.invoice_state.value,
            transaction_id=outcome.transaction_id,
            payment_option_id=outcome.payment_option_id,
            payment_option_type=payment_option_type,
            message=outcome.message,
            processed_at=outcome.executed_at,
        )
        payment.raise_(
            InvoiceStateUpdated(
                invoice_payment_id=str(payment.id),
                request_id=request_id,
                invoice_id=outcome.invoice_id,
                invoice_type=outcome.invoice_type,
                user_id=str(request.user_id),
                invoice_state=outcome.invoice_state.value,
                transaction_id=outcome.transaction_id,
                updated_at=outcome.executed_at,
            )
        )
        return payment
