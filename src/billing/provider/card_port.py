"""Card gateway port: two-phase authorize and capture.

Rejections are raised as ``CardGatewayError``; the gateway may already have
created a transaction when it rejects, in which case the error carries its id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class CaptureStatus(Enum):
    CAPTURED = "captured"
    PENDING = "pending"
    REFUSED = "refused"
    ERROR = "error"


@dataclass(frozen=True)
class AuthorizeResponse:
    transaction_id: str
    amount: int
    currency: str
    result_code: str = "authorised"

    def as_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "amount": self.amount,
            "currency": self.currency,
            "result_code": self.result_code,
        }


@dataclass(frozen=True)
class CaptureResponse:
    transaction_id: str
    status: CaptureStatus
    capture_reference: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "status": self.status.value,
            "capture_reference": self.capture_reference,
        }


class CardGatewayError(Exception):
    """Structured rejection returned by the card gateway."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        transaction_id: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.transaction_id = transaction_id
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.error_code}: {self.message}"
        return self.message


class CardGateway(ABC):
    name = "card_gateway"

    @abstractmethod
    def authorize_transaction(self, config, option, amount: int, currency: str) -> AuthorizeResponse:
        """Reserve ``amount`` minor units on the option's stored card or wallet."""
        ...

    @abstractmethod
    def capture_transaction(self, config, authorization: AuthorizeResponse) -> CaptureResponse:
        """Capture a previous authorization."""
        ...
