"""Domain events for the InvoicePayment aggregate."""

from protean.fields import DateTime, Identifier, String

from billing.domain import billing


@billing.event(part_of="InvoicePayment")
class InvoiceStateUpdated:
    """Terminal state of one invoice processing request.

    Consumed by the invoicing service; exactly one is raised per request.
    """

    __version__ = 1

    invoice_payment_id = Identifier(required=True)
    request_id = String(required=True)
    invoice_id = Identifier(required=True)
    invoice_type = String(required=True)
    user_id = Identifier(required=True)
    invoice_state = String(required=True)
    transaction_id = String()
    updated_at = DateTime(required=True)
