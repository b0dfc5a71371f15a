"""Configurable fake card gateway for development and testing."""

from uuid import uuid4

from billing.provider.card_port import (
    AuthorizeResponse,
    CaptureResponse,
    CaptureStatus,
    CardGateway,
)


class FakeCardGateway(CardGateway):
    """Authorizes and captures everything unless configured otherwise."""

    def __init__(self) -> None:
        self.authorize_error: Exception | None = None
        self.capture_error: Exception | None = None
        self.capture_status: CaptureStatus = CaptureStatus.CAPTURED
        self.transaction_id: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        authorize_error: Exception | None = None,
        capture_error: Exception | None = None,
        capture_status: CaptureStatus = CaptureStatus.CAPTURED,
        transaction_id: str | None = None,
    ) -> None:
        self.authorize_error = authorize_error
        self.capture_error = capture_error
        self.capture_status = capture_status
        self.transaction_id = transaction_id

    def authorize_transaction(self, config, option, amount: int, currency: str) -> AuthorizeResponse:
        self.calls.append(
            {
                "method": "authorize_transaction",
                "merchant_account": config.merchant_account,
                "provider_token": option.provider_token,
                "amount": amount,
                "currency": currency,
            }
        )
        if self.authorize_error is not None:
            raise self.authorize_error

        return AuthorizeResponse(
            transaction_id=self.transaction_id or f"card_txn_{uuid4().hex[:12]}",
            amount=amount,
            currency=currency,
        )

    def capture_transaction(self, config, authorization: AuthorizeResponse) -> CaptureResponse:
        self.calls.append(
            {
                "method": "capture_transaction",
                "merchant_account": config.merchant_account,
                "transaction_id": authorization.transaction_id,
            }
        )
        if self.capture_error is not None:
            raise self.capture_error

        return CaptureResponse(
            transaction_id=authorization.transaction_id,
            status=self.capture_status,
            capture_reference=f"cap_{uuid4().hex[:12]}",
        )
