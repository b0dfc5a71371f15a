"""Invoice processing: command, dispatcher and handler.

The dispatcher picks the flow for the user's active payment option and
settles exactly one InvoicePayment per request. A user without an active
option is an expected business state: the invoice is reported UNPROCESSED.
Setup faults (PaymentSetupError) propagate and nothing is recorded.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from billing.domain import billing
from billing.errors import PaymentSetupError
from billing.execution.card import CardPaymentFlow
from billing.execution.direct_debit import DirectDebitFlow
from billing.execution.outcome import ExecutionOutcome, InvoiceState
from billing.invoice.invoice_payment import InvoicePayment
from billing.option.payment_option import PaymentOption, PaymentOptionType
from billing.utils.logging import bind_request, clear_request
from billing.wiring import BillingClients, installed

logger = structlog.get_logger(__name__)


@billing.command(part_of="InvoicePayment")
class ProcessInvoice:
    """Charge one invoice against the user's active payment option."""

    request_id = String(required=True, max_length=255)
    invoice_id = Identifier(required=True)
    invoice_type = String(required=True, max_length=50)
    user_id = Identifier(required=True)
    location_id = Identifier(required=True)
    month_str = String(required=True, max_length=20)
    amount = Float(required=True, min_value=0.0)


class InvoiceDispatcher:
    def __init__(self, clients: BillingClients) -> None:
        self.direct_debit = DirectDebitFlow(clients.users, clients.locations, clients.direct_debit)
        self.card = CardPaymentFlow(clients.users, clients.locations, clients.card_gateway)
        # One handler per option type; test_dispatcher checks the mapping is complete
        self.flows = {
            PaymentOptionType.DIRECT_DEBIT: self._pay_by_direct_debit,
            PaymentOptionType.CARD: self._pay_by_card,
            PaymentOptionType.WALLET: self._pay_by_card,
        }

    def process_invoice(self, request_id: str, request) -> InvoicePayment:
        bind_request(request_id=request_id, invoice_id=str(request.invoice_id))
        try:
            option = current_domain.repository_for(PaymentOption).get_active(str(request.user_id))
            if option is None:
                outcome = ExecutionOutcome.for_request(
                    request, InvoiceState.UNPROCESSED, "No active payment option"
                )
                option_type = None
            else:
                option_type = PaymentOptionType(option.option_type)
                outcome = self.flows[option_type](request_id, request, option)

            payment = InvoicePayment.settle(
                request_id,
                request,
                outcome,
                payment_option_type=option_type.value if option_type else None,
            )
            current_domain.repository_for(InvoicePayment).add(payment)
            logger.info(
                "Invoice processed",
                user_id=str(request.user_id),
                invoice_state=outcome.invoice_state.value,
                transaction_id=outcome.transaction_id,
            )
            return payment
        except PaymentSetupError as exc:
            logger.error("Invoice abandoned, billing setup is broken", user_id=str(request.user_id), error=str(exc))
            raise
        finally:
            clear_request()

    def _pay_by_direct_debit(self, request_id: str, request, option) -> ExecutionOutcome:
        return self.direct_debit.execute(request_id, request)

    def _pay_by_card(self, request_id: str, request, option) -> ExecutionOutcome:
        return self.card.execute(request_id, request, option)


@billing.command_handler(part_of=InvoicePayment)
class ProcessInvoiceHandler:
    @handle(ProcessInvoice)
    def process_invoice(self, command):
        payment = InvoiceDispatcher(installed()).process_invoice(command.request_id, command)
        return str(payment.id)
