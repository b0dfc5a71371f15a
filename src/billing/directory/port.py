"""Directory ports — read-only access to users and location configuration.

Users and locations are owned by other services. The billing code programs
against these interfaces; adapters are assembled in ``billing.wiring``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class PaymentProvider(Enum):
    DIRECT_DEBIT = "direct_debit"
    CARD_GATEWAY = "card_gateway"


@dataclass(frozen=True)
class User:
    id: str
    location_id: str
    subsidiary_id: str | None = None
    email: str | None = None
    deleted: bool = False


@dataclass(frozen=True)
class Subsidiary:
    """Merchant account of a location for one provider."""

    id: str
    provider: PaymentProvider
    currency: str = "EUR"
    # Direct-debit credentials
    merchant_id: str | None = None
    portal_id: str | None = None
    key: str | None = None
    sub_account_id: str | None = None
    # Card gateway credentials
    merchant_account: str | None = None
    api_key: str | None = None


@dataclass(frozen=True)
class LocationConfig:
    id: str
    name: str = ""
    currency: str = "EUR"
    subsidiaries: tuple[Subsidiary, ...] = field(default_factory=tuple)


class UserDirectory(ABC):
    """Abstract user lookup."""

    @abstractmethod
    def load_user(self, location_id: str, user_id: str, include_deleted: bool = False) -> User | None:
        """Return the user, or None when it does not exist at the location."""
        ...


class LocationDirectory(ABC):
    """Abstract location configuration lookup."""

    @abstractmethod
    def load_location(self, location_id: str) -> LocationConfig | None:
        """Return the location with its subsidiaries, or None when unknown."""
        ...
