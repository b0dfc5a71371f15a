"""Shared BDD fixtures and step definitions for the Billing domain."""

import pytest
from billing.option.payment_option import PaymentOptionType
from protean import current_domain
from pytest_bdd import given, parsers


@pytest.fixture()
def stream_events():
    """Read events of one type from an event store stream."""

    def _read(stream, event_type):
        messages = current_domain.event_store.store.read(stream)
        return [m for m in messages if m.metadata and m.metadata.headers and m.metadata.headers.type == event_type]

    return _read


@pytest.fixture()
def options():
    """Options created by the Given steps, in creation order."""
    return []


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a billing user "{user_id}"'), target_fixture="user_id")
def billing_user(user_id):
    return user_id


@given(parsers.cfparse('the user has an inactive "{option_type}" option'))
def inactive_option(user_id, option_type, add_option, options):
    options.append(add_option(user_id, PaymentOptionType(option_type), active=False))


@given(parsers.cfparse('the user has an active "{option_type}" option'))
def active_option(user_id, option_type, add_option, options):
    options.append(add_option(user_id, PaymentOptionType(option_type), provider_user_id="dd-user-1"))
