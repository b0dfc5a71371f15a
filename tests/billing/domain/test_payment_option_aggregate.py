"""Tests for the PaymentOption aggregate."""

from datetime import UTC, datetime, timedelta

import pytest
from billing.option.events import PaymentOptionDeleted, PaymentOptionRemovalScheduled
from billing.option.payment_option import PaymentOption, PaymentOptionType
from protean.exceptions import ValidationError


def _option(**overrides):
    defaults = {
        "user_id": "user-001",
        "option_type": PaymentOptionType.CARD.value,
        "provider_token": "tok_visa_4242",
        "active": False,
    }
    defaults.update(overrides)
    return PaymentOption(**defaults)


class TestPaymentOptionType:
    def test_card_and_wallet_are_card_based(self):
        assert PaymentOptionType.CARD.is_card_based
        assert PaymentOptionType.WALLET.is_card_based

    def test_direct_debit_is_not_card_based(self):
        assert not PaymentOptionType.DIRECT_DEBIT.is_card_based


class TestPaymentOptionDelete:
    def test_delete_inactive_option(self):
        option = _option()
        now = datetime.now(UTC)
        option.delete(now, now + timedelta(days=30))

        assert option.is_deleted
        assert option.deleted_at == now
        assert option.removal_timestamp == now + timedelta(days=30)

    def test_delete_raises_event(self):
        option = _option()
        now = datetime.now(UTC)
        option.delete(now, now)

        assert len(option._events) == 1
        event = option._events[0]
        assert isinstance(event, PaymentOptionDeleted)
        assert event.payment_option_id == str(option.id)
        assert event.option_type == "CARD"

    def test_cannot_delete_active_option(self):
        option = _option(active=True)
        now = datetime.now(UTC)
        with pytest.raises(ValidationError):
            option.delete(now, now)
        assert not option.is_deleted


class TestPaymentOptionScheduleRemoval:
    def test_active_option_stays_usable(self):
        option = _option(active=True)
        removal = datetime.now(UTC) + timedelta(days=30)
        option.schedule_removal(removal)

        assert option.active is True
        assert not option.is_deleted
        assert option.removal_timestamp == removal

    def test_raises_event(self):
        option = _option(active=True)
        option.schedule_removal(datetime.now(UTC))

        assert len(option._events) == 1
        assert isinstance(option._events[0], PaymentOptionRemovalScheduled)


class TestPaymentOptionValidation:
    def test_unknown_option_type_rejected(self):
        with pytest.raises(ValidationError):
            _option(option_type="CHEQUE")

    def test_user_required(self):
        with pytest.raises(ValidationError):
            PaymentOption(option_type=PaymentOptionType.CARD.value)
