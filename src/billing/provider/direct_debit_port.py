"""Direct-debit provider port.

The provider authorizes a mandate-backed debit in one call. Transport
failures surface as exceptions; declines come back as a response.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AuthorizationRequest:
    merchant_id: str
    portal_id: str
    key: str
    sub_account_id: str
    provider_user_id: str
    amount: int  # minor units
    currency: str
    reference: str
    narrative: str


@dataclass(frozen=True)
class ProviderErrorDetail:
    error_message: str
    error_code: str | None = None


@dataclass(frozen=True)
class AuthorizationResponse:
    """Provider answer to an authorization call."""

    status: str
    tx_id: str | None = None
    error: ProviderErrorDetail | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    def is_approved(self) -> bool:
        return self.status.upper() == "APPROVED"

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "tx_id": self.tx_id,
            "error": (
                {"error_message": self.error.error_message, "error_code": self.error.error_code}
                if self.error
                else None
            ),
            "raw": self.raw,
        }


class DirectDebitProvider(ABC):
    name = "direct_debit"

    @abstractmethod
    def run_authorization(self, request: AuthorizationRequest) -> AuthorizationResponse:
        """Authorize a debit against the user's mandate."""
        ...
