"""Explicit assembly of billing's outbound collaborators.

Processes build the clients once at start-up and install them:

    install(build_clients())

Nothing is created lazily; asking for the clients before installing them
is a programming error.
"""

import os
from dataclasses import dataclass

from billing.directory.port import LocationDirectory, UserDirectory
from billing.provider.card_port import CardGateway
from billing.provider.direct_debit_port import DirectDebitProvider


@dataclass(frozen=True)
class BillingClients:
    users: UserDirectory
    locations: LocationDirectory
    direct_debit: DirectDebitProvider
    card_gateway: CardGateway


_installed: BillingClients | None = None


def build_clients(adapter: str | None = None) -> BillingClients:
    """Build the collaborators named by BILLING_PROVIDER_ADAPTER (default: fake)."""
    adapter = adapter or os.environ.get("BILLING_PROVIDER_ADAPTER", "fake")
    if adapter == "fake":
        from billing.directory.fake_adapter import InMemoryLocationDirectory, InMemoryUserDirectory
        from billing.provider.fake_card import FakeCardGateway
        from billing.provider.fake_direct_debit import FakeDirectDebitProvider

        return BillingClients(
            users=InMemoryUserDirectory(),
            locations=InMemoryLocationDirectory(),
            direct_debit=FakeDirectDebitProvider(),
            card_gateway=FakeCardGateway(),
        )
    raise ValueError(f"Unknown provider adapter: {adapter}")


def install(clients: BillingClients) -> BillingClients:
    global _installed
    _installed = clients
    return clients


def uninstall() -> None:
    global _installed
    _installed = None


def installed() -> BillingClients:
    if _installed is None:
        raise RuntimeError("Billing clients are not installed; call install(build_clients()) at start-up")
    return _installed
