"""Fatal faults raised while preparing a payment.

A ``PaymentSetupError`` means billing data or configuration is broken for
the request: the request is abandoned without an audit row or an invoice-state
update. Expected business outcomes are never raised; they are returned as
``ExecutionOutcome`` values.
"""


class PaymentSetupError(Exception):
    """Base class for configuration defects that abort a request."""


class UserNotFound(PaymentSetupError):
    def __init__(self, user_id: str, location_id: str | None = None) -> None:
        self.user_id = user_id
        self.location_id = location_id
        super().__init__(f"User {user_id} not found at location {location_id}")


class LocationNotFound(PaymentSetupError):
    def __init__(self, location_id: str) -> None:
        self.location_id = location_id
        super().__init__(f"Location {location_id} not found")


class SubsidiaryNotConfigured(PaymentSetupError):
    def __init__(self, subsidiary_id: str | None, provider: str) -> None:
        self.subsidiary_id = subsidiary_id
        self.provider = provider
        super().__init__(f"Subsidiary {subsidiary_id} has no usable {provider} configuration")
