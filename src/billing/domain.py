"""Billing bounded context — invoice payment execution.

Resolves a user's active payment option, charges the invoice through the
direct-debit provider or the card gateway, keeps an append-only audit trail
of every attempt and reports exactly one invoice-state update per request.
"""

import structlog
from protean.domain import Domain

billing = Domain(name="billing")

logger = structlog.get_logger(__name__)
