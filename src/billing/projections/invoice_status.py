"""Latest reported state per invoice."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from billing.domain import billing
from billing.invoice.events import InvoiceStateUpdated
from billing.invoice.invoice_payment import InvoicePayment


@billing.projection
class InvoiceStatusView:
    invoice_id = Identifier(identifier=True, required=True)
    invoice_type = String(required=True)
    user_id = Identifier(required=True)
    invoice_state = String(required=True)
    transaction_id = String()
    request_id = String()
    attempts = Integer(default=0)
    updated_at = DateTime()


@billing.projector(projector_for=InvoiceStatusView, aggregates=[InvoicePayment])
class InvoiceStatusProjector:
    @on(InvoiceStateUpdated)
    def on_invoice_state_updated(self, event):
        repo = current_domain.repository_for(InvoiceStatusView)
        try:
            view = repo.get(event.invoice_id)
        except ObjectNotFoundError:
            view = InvoiceStatusView(
                invoice_id=event.invoice_id,
                invoice_type=event.invoice_type,
                user_id=event.user_id,
                invoice_state=event.invoice_state,
            )

        view.invoice_state = event.invoice_state
        view.transaction_id = event.transaction_id
        view.request_id = event.request_id
        view.attempts = (view.attempts or 0) + 1
        view.updated_at = event.updated_at
        repo.add(view)
