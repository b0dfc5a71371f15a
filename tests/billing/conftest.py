"""Shared billing fixtures: seeded locations, users and payment options."""

from datetime import UTC, datetime

import pytest
from billing.directory.port import LocationConfig, PaymentProvider, Subsidiary, User
from billing.invoice.processing import ProcessInvoice
from billing.option.payment_option import PaymentOption, PaymentOptionType
from protean import current_domain

LOCATION_ID = "loc-001"
DD_SUBSIDIARY_ID = "sub-dd"
CARD_SUBSIDIARY_ID = "sub-card"
DD_KEY = "dd-signing-key"


@pytest.fixture()
def location(clients):
    return clients.locations.add_location(
        LocationConfig(
            id=LOCATION_ID,
            name="Berlin Mitte",
            currency="EUR",
            subsidiaries=(
                Subsidiary(
                    id=DD_SUBSIDIARY_ID,
                    provider=PaymentProvider.DIRECT_DEBIT,
                    currency="EUR",
                    merchant_id="m-100",
                    portal_id="p-200",
                    key=DD_KEY,
                    sub_account_id="a-300",
                ),
                Subsidiary(
                    id=CARD_SUBSIDIARY_ID,
                    provider=PaymentProvider.CARD_GATEWAY,
                    currency="EUR",
                    merchant_account="PaystreamBerlin",
                    api_key="card-api-key",
                ),
            ),
        )
    )


@pytest.fixture()
def dd_user(clients, location):
    return clients.users.add_user(User(id="user-dd", location_id=LOCATION_ID, subsidiary_id=DD_SUBSIDIARY_ID))


@pytest.fixture()
def card_user(clients, location):
    return clients.users.add_user(User(id="user-card", location_id=LOCATION_ID, subsidiary_id=CARD_SUBSIDIARY_ID))


@pytest.fixture()
def add_option():
    """Persist a payment option for a user."""

    def _add(user_id, option_type=PaymentOptionType.DIRECT_DEBIT, active=True, **fields):
        option = PaymentOption(
            user_id=user_id,
            option_type=option_type.value,
            active=active,
            created_at=datetime.now(UTC),
            **fields,
        )
        current_domain.repository_for(PaymentOption).add(option)
        return option

    return _add


@pytest.fixture()
def dd_option(dd_user, add_option):
    return add_option(dd_user.id, PaymentOptionType.DIRECT_DEBIT, provider_user_id="dd-user-77")


@pytest.fixture()
def card_option(card_user, add_option):
    return add_option(
        card_user.id,
        PaymentOptionType.CARD,
        location_id=LOCATION_ID,
        provider_token="tok_visa_4242",
    )


@pytest.fixture()
def invoice_request():
    """Build a ProcessInvoice command with sensible defaults."""

    def _build(user_id, **overrides):
        defaults = {
            "request_id": "req-001",
            "invoice_id": "inv-001",
            "invoice_type": "SUBSCRIPTION",
            "user_id": user_id,
            "location_id": LOCATION_ID,
            "month_str": "2024-05",
            "amount": 49.90,
        }
        defaults.update(overrides)
        return ProcessInvoice(**defaults)

    return _build
