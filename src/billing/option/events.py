"""Domain events for payment options and user removal."""

from protean.fields import DateTime, Identifier, Integer, String

from billing.domain import billing


@billing.event(part_of="PaymentOption")
class PaymentOptionDeleted:
    """An inactive payment option was soft-deleted after its user was deleted."""

    __version__ = 1

    payment_option_id = Identifier(required=True)
    user_id = Identifier(required=True)
    option_type = String(required=True)
    deleted_at = DateTime(required=True)
    removal_timestamp = DateTime(required=True)


@billing.event(part_of="PaymentOption")
class PaymentOptionRemovalScheduled:
    """The active payment option stays usable until its removal timestamp."""

    __version__ = 1

    payment_option_id = Identifier(required=True)
    user_id = Identifier(required=True)
    removal_timestamp = DateTime(required=True)


@billing.event(part_of="UserRemoval")
class UserInvoicesScheduleRequested:
    """Invoicing should re-plan the remaining invoices of a deleted user."""

    __version__ = 1

    user_id = Identifier(required=True)
    deleted_options = Integer(default=0)
    requested_at = DateTime(required=True)
