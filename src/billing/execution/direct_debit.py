"""Direct-debit execution flow.

Walks the user through the checks below, stopping at the first one that
fails, then calls the provider:

    user exists                  -> else PAYMENT_FAILED
    subsidiary resolvable        -> else UNPROCESSED
    subsidiary direct-debit ready-> else UNPROCESSED
    active payment option        -> else UNPROCESSED
    option has provider user id  -> else UNPROCESSED
    provider call                -> raises: PAYMENT_FAILED
                                    declined: PAYMENT_FAILED
                                    approved: PAYMENT_ISSUED

Every outcome is written as a DirectDebitExecution row before it is
returned, including the ones that never reached the provider.
"""

from decimal import Decimal

import structlog
from protean.utils.globals import current_domain

from billing.codec import AmountEncoder, merchant_reference, redact, statement_text, to_minor_units
from billing.directory.port import LocationDirectory, Subsidiary, UserDirectory
from billing.eligibility import find_subsidiary, is_direct_debit_eligible
from billing.execution.audit import DirectDebitExecution, ProviderResponseLog
from billing.execution.outcome import ExecutionOutcome, InvoiceState
from billing.option.payment_option import PaymentOption
from billing.provider.direct_debit_port import AuthorizationRequest, AuthorizationResponse, DirectDebitProvider

logger = structlog.get_logger(__name__)


class DirectDebitFlow:
    def __init__(
        self,
        users: UserDirectory,
        locations: LocationDirectory,
        provider: DirectDebitProvider,
        encode_amount: AmountEncoder = to_minor_units,
    ) -> None:
        self.users = users
        self.locations = locations
        self.provider = provider
        self.encode_amount = encode_amount

    def execute(self, request_id: str, request) -> ExecutionOutcome:
        outcome = self._attempt(request_id, request)
        current_domain.repository_for(DirectDebitExecution).add(
            DirectDebitExecution.record(request_id, request, outcome, merchant_reference(request_id))
        )
        logger.info(
            "Direct debit executed",
            request_id=request_id,
            invoice_id=outcome.invoice_id,
            invoice_state=outcome.invoice_state.value,
            transaction_id=outcome.transaction_id,
        )
        return outcome

    def _attempt(self, request_id: str, request) -> ExecutionOutcome:
        user = self.users.load_user(str(request.location_id), str(request.user_id), include_deleted=True)
        if user is None:
            return ExecutionOutcome.for_request(
                request, InvoiceState.PAYMENT_FAILED, f"User {request.user_id} could not be found"
            )

        location = self.locations.load_location(str(user.location_id or request.location_id))
        subsidiary = find_subsidiary(location, user.subsidiary_id)
        if subsidiary is None:
            return ExecutionOutcome.for_request(
                request, InvoiceState.UNPROCESSED, f"User {user.id} has no resolvable subsidiary"
            )
        if not is_direct_debit_eligible(subsidiary):
            return ExecutionOutcome.for_request(
                request,
                InvoiceState.UNPROCESSED,
                f"Subsidiary {subsidiary.id} is not configured for direct debit",
            )

        option = current_domain.repository_for(PaymentOption).get_active(str(user.id))
        if option is None:
            return ExecutionOutcome.for_request(
                request, InvoiceState.UNPROCESSED, f"User {user.id} has no active payment option"
            )
        if not option.provider_user_id:
            return ExecutionOutcome.for_request(
                request,
                InvoiceState.UNPROCESSED,
                f"Payment option {option.id} has no direct debit provider user id",
            )

        option_id = str(option.id)
        authorization = self._authorization_request(request_id, request, subsidiary, option)
        try:
            response = self.provider.run_authorization(authorization)
        except Exception as exc:
            logger.error(
                "Direct debit authorization failed",
                request_id=request_id,
                invoice_id=str(request.invoice_id),
                error=str(exc),
            )
            return ExecutionOutcome.for_request(
                request,
                InvoiceState.PAYMENT_FAILED,
                f"Direct debit authorization failed: {exc}",
                payment_option_id=option_id,
            )

        self._log_response(request_id, request, subsidiary, response)
        return self._outcome_from_response(request, response, option_id)

    def _authorization_request(self, request_id: str, request, subsidiary: Subsidiary, option) -> AuthorizationRequest:
        return AuthorizationRequest(
            merchant_id=subsidiary.merchant_id,
            portal_id=subsidiary.portal_id,
            key=subsidiary.key,
            sub_account_id=subsidiary.sub_account_id,
            provider_user_id=option.provider_user_id,
            amount=self.encode_amount(Decimal(str(request.amount)), subsidiary.currency),
            currency=subsidiary.currency,
            reference=merchant_reference(request_id),
            narrative=statement_text(request.invoice_type, request.month_str),
        )

    def _log_response(self, request_id: str, request, subsidiary: Subsidiary, response: AuthorizationResponse) -> None:
        current_domain.repository_for(ProviderResponseLog).add(
            ProviderResponseLog.record(
                request_id=request_id,
                invoice_id=str(request.invoice_id),
                provider=self.provider.name,
                response=response,
                payload=redact(response.as_dict(), secret=subsidiary.key),
            )
        )

    @staticmethod
    def _outcome_from_response(request, response: AuthorizationResponse, option_id: str) -> ExecutionOutcome:
        if response.is_approved():
            if not response.tx_id:
                return ExecutionOutcome.for_request(
                    request,
                    InvoiceState.PAYMENT_FAILED,
                    "Direct debit approved without a transaction id",
                    payment_option_id=option_id,
                )
            return ExecutionOutcome.for_request(
                request,
                InvoiceState.PAYMENT_ISSUED,
                "Direct debit approved",
                transaction_id=response.tx_id,
                payment_option_id=option_id,
            )

        if response.error is None:
            message = "Direct debit declined without error detail"
        else:
            message = f"Direct debit declined: {response.error.error_message}"
        return ExecutionOutcome.for_request(
            request,
            InvoiceState.PAYMENT_FAILED,
            message,
            transaction_id=response.tx_id,
            payment_option_id=option_id,
        )
