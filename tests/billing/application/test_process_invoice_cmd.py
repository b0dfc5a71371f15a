"""Application tests for ProcessInvoice: dispatch to the right flow and settle.

Covers:
- users without an active option are reported UNPROCESSED
- direct-debit and card options reach their flows
- exactly one InvoiceStateUpdated per processed request
- setup faults raise and record nothing
"""

import pytest
from billing.errors import SubsidiaryNotConfigured, UserNotFound
from billing.execution.audit import DirectDebitExecution, TransactionHistory
from billing.invoice.invoice_payment import InvoicePayment
from billing.invoice.processing import InvoiceDispatcher
from billing.option.payment_option import PaymentOptionType
from protean import current_domain

INVOICE_STREAM = "billing::invoice_payment"
STATE_UPDATED = "Billing.InvoiceStateUpdated.v1"


def _state_updates():
    messages = current_domain.event_store.store.read(INVOICE_STREAM)
    return [m for m in messages if m.metadata and m.metadata.headers and m.metadata.headers.type == STATE_UPDATED]


def _process(command):
    payment_id = current_domain.process(command, asynchronous=False)
    return current_domain.repository_for(InvoicePayment).get(payment_id)


class TestDispatcherMapping:
    def test_every_option_type_has_a_flow(self, clients):
        dispatcher = InvoiceDispatcher(clients)
        assert set(dispatcher.flows) == set(PaymentOptionType)


class TestProcessInvoiceWithoutOption:
    def test_unprocessed(self, dd_user, invoice_request, clients):
        payment = _process(invoice_request(dd_user.id))

        assert payment.invoice_state == "UNPROCESSED"
        assert payment.payment_option_type is None
        assert clients.direct_debit.calls == []
        assert clients.card_gateway.calls == []

    def test_no_flow_audit_rows(self, dd_user, invoice_request):
        _process(invoice_request(dd_user.id))

        assert current_domain.repository_for(DirectDebitExecution)._dao.query.all().items == []
        assert current_domain.repository_for(TransactionHistory)._dao.query.all().items == []

    def test_unprocessed_is_still_reported(self, dd_user, invoice_request):
        _process(invoice_request(dd_user.id))

        updates = _state_updates()
        assert len(updates) == 1
        assert updates[0].data["invoice_state"] == "UNPROCESSED"

    def test_inactive_option_is_ignored(self, dd_user, add_option, invoice_request):
        add_option(dd_user.id, PaymentOptionType.DIRECT_DEBIT, active=False, provider_user_id="dd-1")

        payment = _process(invoice_request(dd_user.id))

        assert payment.invoice_state == "UNPROCESSED"


class TestProcessInvoiceDirectDebit:
    def test_issued(self, dd_option, invoice_request, clients):
        clients.direct_debit.configure(tx_id="TX1")

        payment = _process(invoice_request("user-dd"))

        assert payment.invoice_state == "PAYMENT_ISSUED"
        assert payment.transaction_id == "TX1"
        assert payment.payment_option_type == "DIRECT_DEBIT"
        assert payment.payment_option_id == str(dd_option.id)

    def test_declined_is_reported_once(self, dd_option, invoice_request, clients):
        clients.direct_debit.configure(should_approve=False)

        payment = _process(invoice_request("user-dd"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        updates = _state_updates()
        assert len(updates) == 1
        assert updates[0].data["invoice_state"] == "PAYMENT_FAILED"

    def test_provider_timeout_is_recorded(self, dd_option, invoice_request, clients):
        clients.direct_debit.configure(transport_error=TimeoutError("timeout"))

        payment = _process(invoice_request("user-dd"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        assert "timeout" in payment.message
        assert len(_state_updates()) == 1

    def test_unknown_user_with_option_fails(self, location, add_option, invoice_request):
        add_option("ghost", PaymentOptionType.DIRECT_DEBIT, provider_user_id="dd-ghost")

        payment = _process(invoice_request("ghost"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        assert len(current_domain.repository_for(DirectDebitExecution)._dao.query.all().items) == 1


class TestProcessInvoiceCard:
    def test_issued(self, card_option, invoice_request, clients):
        clients.card_gateway.configure(transaction_id="T1")

        payment = _process(invoice_request("user-card"))

        assert payment.invoice_state == "PAYMENT_ISSUED"
        assert payment.transaction_id == "T1"
        assert payment.payment_option_type == "CARD"

    def test_wallet_goes_through_card_gateway(self, card_user, add_option, invoice_request, clients):
        add_option(card_user.id, PaymentOptionType.WALLET, provider_token="wallet-1")

        payment = _process(invoice_request(card_user.id))

        assert payment.invoice_state == "PAYMENT_ISSUED"
        assert payment.payment_option_type == "WALLET"
        assert clients.direct_debit.calls == []

    def test_capture_failure(self, card_option, invoice_request, clients):
        clients.card_gateway.configure(capture_error=RuntimeError("gateway timeout"))

        payment = _process(invoice_request("user-card"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        assert len(_state_updates()) == 1


class TestProcessInvoiceFatalFaults:
    def test_card_user_missing_raises(self, location, add_option, invoice_request):
        add_option("ghost", PaymentOptionType.CARD, provider_token="tok")

        with pytest.raises(UserNotFound):
            current_domain.process(invoice_request("ghost"), asynchronous=False)

        assert current_domain.repository_for(InvoicePayment)._dao.query.all().items == []
        assert current_domain.repository_for(TransactionHistory)._dao.query.all().items == []
        assert _state_updates() == []

    def test_card_option_on_direct_debit_subsidiary_raises(self, dd_user, add_option, invoice_request, clients):
        add_option(dd_user.id, PaymentOptionType.CARD, provider_token="tok")

        with pytest.raises(SubsidiaryNotConfigured):
            current_domain.process(invoice_request(dd_user.id), asynchronous=False)

        assert clients.card_gateway.calls == []
        assert _state_updates() == []


class TestProcessInvoiceRedelivery:
    def test_same_request_processed_twice(self, dd_option, invoice_request, clients):
        first = _process(invoice_request("user-dd"))
        second = _process(invoice_request("user-dd"))

        assert first.id != second.id
        assert len(clients.direct_debit.calls) == 2
        assert len(_state_updates()) == 2


class TestProcessInvoiceLongProviderErrors:
    def test_long_transport_error_still_settles(self, dd_option, invoice_request, clients):
        clients.direct_debit.configure(transport_error=RuntimeError("<html>" + "x" * 2000))

        payment = _process(invoice_request("user-dd"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        assert len(payment.message) == 1000
        assert len(current_domain.repository_for(DirectDebitExecution)._dao.query.all().items) == 1
        assert len(_state_updates()) == 1

    def test_long_decline_message_still_settles(self, dd_option, invoice_request, clients):
        clients.direct_debit.configure(should_approve=False, decline_message="y" * 1200)

        payment = _process(invoice_request("user-dd"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        assert payment.message.startswith("Direct debit declined: yyy")
        assert len(current_domain.repository_for(DirectDebitExecution)._dao.query.all().items) == 1
        assert len(_state_updates()) == 1

    def test_long_capture_error_still_settles(self, card_option, invoice_request, clients):
        clients.card_gateway.configure(capture_error=RuntimeError("z" * 1500))

        payment = _process(invoice_request("user-card"))

        assert payment.invoice_state == "PAYMENT_FAILED"
        assert len(payment.message) == 1000
        history = current_domain.repository_for(TransactionHistory)._dao.query.all().items
        assert len(history) == 1
        assert history[0].details["error"] == "z" * 1500
        assert len(_state_updates()) == 1
