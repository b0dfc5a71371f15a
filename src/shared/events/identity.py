"""Cross-domain event contracts for Identity domain events.

Billing consumes these from the identity service's streams. They are
registered as external events via domain.register_external_event() with
matching __type__ strings so Protean's stream deserialization works.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier


class UserDeleted(BaseEvent):
    """A user was deleted; their data is purged at removal_timestamp."""

    __version__ = 1

    user_id = Identifier(required=True)
    location_id = Identifier()
    deleted_at = DateTime(required=True)
    removal_timestamp = DateTime(required=True)
