"""UserRemoval aggregate — record of one user-deletion cleanup run."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer

from billing.domain import billing
from billing.option.events import UserInvoicesScheduleRequested


@billing.aggregate
class UserRemoval:
    user_id = Identifier(required=True)
    deleted_at = DateTime(required=True)
    removal_timestamp = DateTime(required=True)
    deleted_options = Integer(default=0)
    retained_option_id = Identifier()
    processed_at = DateTime()

    @classmethod
    def complete(
        cls,
        user_id: str,
        deleted_at: datetime,
        removal_timestamp: datetime,
        deleted_options: int,
        retained_option_id: str | None = None,
    ):
        """Record the cleanup and ask invoicing to re-plan the user's invoices."""
        now = datetime.now(UTC)
        removal = cls(
            user_id=user_id,
            deleted_at=deleted_at,
            removal_timestamp=removal_timestamp,
            deleted_options=deleted_options,
            retained_option_id=retained_option_id,
            processed_at=now,
        )
        removal.raise_(
            UserInvoicesScheduleRequested(
                user_id=user_id,
                deleted_options=deleted_options,
                requested_at=now,
            )
        )
        return removal
