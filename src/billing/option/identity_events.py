"""Inbound cross-domain event handler — Billing reacts to Identity events.

Listens for UserDeleted to retire the deleted user's payment options and
trigger re-invoicing.
"""

import structlog
from protean.utils.mixins import handle
from shared.events.identity import UserDeleted

from billing.domain import billing
from billing.option.lifecycle import on_user_deleted
from billing.option.payment_option import PaymentOption

logger = structlog.get_logger(__name__)

# Register external event so Protean can deserialize it
billing.register_external_event(UserDeleted, "Identity.UserDeleted.v1")


@billing.event_handler(part_of=PaymentOption, stream_category="identity::user")
class IdentityPaymentOptionHandler:
    """Reacts to Identity domain events affecting payment options."""

    @handle(UserDeleted)
    def on_user_deleted(self, event: UserDeleted) -> None:
        logger.info("User deleted, retiring payment options", user_id=str(event.user_id))
        on_user_deleted(
            user_id=str(event.user_id),
            timestamp=event.deleted_at,
            removal_timestamp=event.removal_timestamp,
        )
