"""Configurable fake direct-debit provider for development and testing.

Approves by default. Tests switch it to decline, or to raise like a broken
transport, through ``configure()``.
"""

from uuid import uuid4

from billing.provider.direct_debit_port import (
    AuthorizationRequest,
    AuthorizationResponse,
    DirectDebitProvider,
    ProviderErrorDetail,
)


class FakeDirectDebitProvider(DirectDebitProvider):
    def __init__(self) -> None:
        self.should_approve: bool = True
        self.decline_message: str | None = "Mandate revoked"
        self.transport_error: Exception | None = None
        self.tx_id: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_approve: bool = True,
        decline_message: str | None = "Mandate revoked",
        transport_error: Exception | None = None,
        tx_id: str | None = None,
    ) -> None:
        self.should_approve = should_approve
        self.decline_message = decline_message
        self.transport_error = transport_error
        self.tx_id = tx_id

    def run_authorization(self, request: AuthorizationRequest) -> AuthorizationResponse:
        self.calls.append(
            {
                "method": "run_authorization",
                "provider_user_id": request.provider_user_id,
                "amount": request.amount,
                "currency": request.currency,
                "reference": request.reference,
                "narrative": request.narrative,
            }
        )

        if self.transport_error is not None:
            raise self.transport_error

        raw = {
            "merchant_id": request.merchant_id,
            "portal_id": request.portal_id,
            "key": request.key,
            "reference": request.reference,
            "amount": request.amount,
            "currency": request.currency,
        }
        if self.should_approve:
            tx_id = self.tx_id or f"dd_txn_{uuid4().hex[:12]}"
            return AuthorizationResponse(
                status="APPROVED",
                tx_id=tx_id,
                raw={**raw, "status": "APPROVED", "txid": tx_id},
            )

        error = None
        if self.decline_message:
            error = ProviderErrorDetail(error_message=self.decline_message, error_code="DECLINED")
        return AuthorizationResponse(
            status="ERROR",
            tx_id=self.tx_id,
            error=error,
            raw={**raw, "status": "ERROR", "errormessage": self.decline_message},
        )
