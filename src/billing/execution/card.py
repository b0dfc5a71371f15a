"""Card and wallet execution flow: authorize, then capture.

Authorize and capture share one failure boundary: whichever raises first
stops the pair, and the attempt is still written to TransactionHistory
with whatever got done. Only a capture that reports CAPTURED counts as a
successful charge.
"""

from decimal import Decimal

import structlog
from protean.utils.globals import current_domain

from billing.codec import AmountEncoder, to_minor_units
from billing.directory.port import LocationDirectory, PaymentProvider, UserDirectory
from billing.eligibility import CardProviderConfig, card_config_for, find_subsidiary
from billing.errors import LocationNotFound, SubsidiaryNotConfigured, UserNotFound
from billing.execution.audit import TransactionHistory, TransactionStatus
from billing.execution.outcome import ExecutionOutcome, InvoiceState
from billing.provider.card_port import CaptureStatus, CardGateway, CardGatewayError

logger = structlog.get_logger(__name__)


class CardPaymentFlow:
    def __init__(
        self,
        users: UserDirectory,
        locations: LocationDirectory,
        gateway: CardGateway,
        encode_amount: AmountEncoder = to_minor_units,
    ) -> None:
        self.users = users
        self.locations = locations
        self.gateway = gateway
        self.encode_amount = encode_amount

    def execute(self, request_id: str, request, option) -> ExecutionOutcome:
        """Charge the invoice on a card or wallet option.

        Raises:
            PaymentSetupError: the user, location or card configuration is missing.
        """
        config = self.payment_config(request)
        history = self.charge(
            config,
            option,
            Decimal(str(request.amount)),
            config.currency,
            location_id=str(option.location_id or request.location_id),
        )

        if history.succeeded:
            state, message = InvoiceState.PAYMENT_ISSUED, "Card payment captured"
        else:
            state = InvoiceState.PAYMENT_FAILED
            message = f"Card payment failed: {history.details.get('error') or 'not captured'}"

        logger.info(
            "Card payment executed",
            request_id=request_id,
            invoice_id=str(request.invoice_id),
            status=history.status,
            transaction_id=history.transaction_id,
        )
        return ExecutionOutcome.for_request(
            request,
            state,
            message,
            transaction_id=history.transaction_id,
            payment_option_id=str(option.id),
        )

    def payment_config(self, request) -> CardProviderConfig:
        user = self.users.load_user(str(request.location_id), str(request.user_id), include_deleted=True)
        if user is None:
            raise UserNotFound(str(request.user_id), str(request.location_id))

        location = self.locations.load_location(str(request.location_id))
        if location is None:
            raise LocationNotFound(str(request.location_id))

        subsidiary = find_subsidiary(location, user.subsidiary_id, PaymentProvider.CARD_GATEWAY)
        config = card_config_for(subsidiary)
        if config is None:
            raise SubsidiaryNotConfigured(user.subsidiary_id, PaymentProvider.CARD_GATEWAY.value)
        return config

    def charge(
        self,
        config: CardProviderConfig,
        option,
        amount: Decimal,
        currency: str,
        location_id: str | None = None,
    ) -> TransactionHistory:
        """Authorize and capture, then write exactly one TransactionHistory row."""
        authorization = capture = error = None
        try:
            authorization = self.gateway.authorize_transaction(
                config, option, self.encode_amount(amount, currency), currency
            )
            capture = self.gateway.capture_transaction(config, authorization)
        except Exception as exc:
            error = exc
            logger.warning(
                "Card gateway call failed",
                payment_option_id=str(option.id),
                authorized=authorization is not None,
                error=str(exc),
            )

        transaction_id = authorization.transaction_id if authorization is not None else None
        if isinstance(error, CardGatewayError) and error.transaction_id:
            # The gateway may create a transaction before rejecting it
            transaction_id = error.transaction_id

        if capture is not None and capture.status == CaptureStatus.CAPTURED:
            status = TransactionStatus.SUCCESS
        else:
            status = TransactionStatus.FAILED

        history = TransactionHistory.record(
            option,
            location_id=location_id,
            status=status,
            transaction_id=transaction_id,
            authorization=authorization,
            capture=capture,
            error=error,
        )
        current_domain.repository_for(TransactionHistory).add(history)
        return history
