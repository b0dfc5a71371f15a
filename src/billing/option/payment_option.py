"""PaymentOption aggregate — a user's configured way to pay.

Options are created and activated by the onboarding service; billing only
reads them, except for the soft delete and removal stamp applied when the
owning user is deleted. At most one option per user is active at a time,
which the owning service guarantees.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from billing.domain import billing
from billing.option.events import PaymentOptionDeleted, PaymentOptionRemovalScheduled


class PaymentOptionType(Enum):
    DIRECT_DEBIT = "DIRECT_DEBIT"
    CARD = "CARD"
    WALLET = "WALLET"

    @property
    def is_card_based(self) -> bool:
        return self in (PaymentOptionType.CARD, PaymentOptionType.WALLET)


@billing.aggregate
class PaymentOption:
    user_id = Identifier(required=True)
    option_type = String(max_length=20, choices=PaymentOptionType, required=True)
    location_id = Identifier()  # empty for direct debit
    provider_user_id = String(max_length=255)
    provider_token = String(max_length=255)
    active = Boolean(default=False)
    deleted_at = DateTime()
    removal_timestamp = DateTime()
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def delete(self, deleted_at: datetime, removal_timestamp: datetime) -> None:
        """Soft-delete an inactive option."""
        if self.active:
            raise ValidationError({"active": ["Active payment options cannot be deleted"]})
        self.deleted_at = deleted_at
        self.removal_timestamp = removal_timestamp
        self.raise_(
            PaymentOptionDeleted(
                payment_option_id=str(self.id),
                user_id=str(self.user_id),
                option_type=self.option_type,
                deleted_at=deleted_at,
                removal_timestamp=removal_timestamp,
            )
        )

    def schedule_removal(self, removal_timestamp: datetime) -> None:
        """Keep the option usable, but mark when it goes away."""
        self.removal_timestamp = removal_timestamp
        self.raise_(
            PaymentOptionRemovalScheduled(
                payment_option_id=str(self.id),
                user_id=str(self.user_id),
                removal_timestamp=removal_timestamp,
            )
        )


@billing.repository(part_of=PaymentOption)
class PaymentOptionRepository:
    """Payment option lookups by user."""

    def find_for_user(self, user_id: str) -> list[PaymentOption]:
        """All options of the user that are not soft-deleted."""
        options = self._dao.query.filter(user_id=str(user_id)).all().items
        return [option for option in options if not option.is_deleted]

    def get_active(self, user_id: str) -> PaymentOption | None:
        return next((option for option in self.find_for_user(user_id) if option.active), None)
