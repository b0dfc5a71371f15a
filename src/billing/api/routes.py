"""FastAPI routes for the Billing domain."""

from fastapi import APIRouter, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from billing.api.schemas import InvoicePaymentResponse, InvoiceStatusResponse, ProcessInvoiceRequest
from billing.errors import PaymentSetupError
from billing.invoice.invoice_payment import InvoicePayment
from billing.invoice.processing import ProcessInvoice
from billing.projections.invoice_status import InvoiceStatusView

invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])


@invoice_router.post("/process", status_code=201, response_model=InvoicePaymentResponse)
async def process_invoice(body: ProcessInvoiceRequest) -> InvoicePaymentResponse:
    """Charge an invoice against the user's active payment option."""
    command = ProcessInvoice(**body.model_dump())
    try:
        payment_id = current_domain.process(command, asynchronous=False)
    except PaymentSetupError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    payment = current_domain.repository_for(InvoicePayment).get(payment_id)
    return InvoicePaymentResponse(
        invoice_payment_id=str(payment.id),
        invoice_id=str(payment.invoice_id),
        invoice_state=payment.invoice_state,
        transaction_id=payment.transaction_id,
        message=payment.message,
    )


@invoice_router.get("/{invoice_id}/status", response_model=InvoiceStatusResponse)
async def invoice_status(invoice_id: str) -> InvoiceStatusResponse:
    """Latest state reported for an invoice."""
    try:
        view = current_domain.repository_for(InvoiceStatusView).get(invoice_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"No status recorded for invoice {invoice_id}") from exc

    return InvoiceStatusResponse(
        invoice_id=str(view.invoice_id),
        invoice_type=view.invoice_type,
        invoice_state=view.invoice_state,
        transaction_id=view.transaction_id,
        request_id=view.request_id,
        attempts=view.attempts or 0,
        updated_at=view.updated_at,
    )
