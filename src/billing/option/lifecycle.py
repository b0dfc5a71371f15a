"""Payment-option cleanup when the owning user is deleted.

Inactive options are soft-deleted right away. The active option keeps
working until the removal timestamp so invoices already in flight can
still be charged; it only gets the timestamp stamped on it. Once every
option is saved, invoicing is asked to re-plan the user's invoices.
"""

from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from billing.option.payment_option import PaymentOption
from billing.option.removal import UserRemoval

logger = structlog.get_logger(__name__)


def on_user_deleted(user_id: str, timestamp: datetime, removal_timestamp: datetime) -> UserRemoval:
    repo = current_domain.repository_for(PaymentOption)

    deleted = 0
    retained_option_id = None
    for option in repo.find_for_user(user_id):
        if option.active:
            option.schedule_removal(removal_timestamp)
            retained_option_id = str(option.id)
        else:
            option.delete(timestamp, removal_timestamp)
            deleted += 1
        repo.add(option)

    removal = UserRemoval.complete(
        user_id=str(user_id),
        deleted_at=timestamp,
        removal_timestamp=removal_timestamp,
        deleted_options=deleted,
        retained_option_id=retained_option_id,
    )
    current_domain.repository_for(UserRemoval).add(removal)

    logger.info(
        "Payment options retired for deleted user",
        user_id=str(user_id),
        deleted_options=deleted,
        retained_option_id=retained_option_id,
    )
    return removal
