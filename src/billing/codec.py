"""Amount, reference and statement-text encoding for payment providers.

All functions are pure. Flows receive the amount encoder as a parameter so
a provider with a different scaling rule can plug in its own.
"""

import hashlib
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

AmountEncoder = Callable[[Decimal, str], int]

# ISO 4217 exponents that differ from the usual two decimal places
_MINOR_UNIT_EXPONENTS = {
    "CLP": 0,
    "ISK": 0,
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    "BHD": 3,
    "JOD": 3,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
}

REFERENCE_PREFIX = "INV"
STATEMENT_TEXT_LIMIT = 140
REDACTED = "***"
SECRET_FIELDS = frozenset({"key", "signature", "authorization", "api_key"})


def to_minor_units(amount: Decimal | float | str, currency: str) -> int:
    """Convert a major-unit amount to the integer minor units providers expect."""
    exponent = _MINOR_UNIT_EXPONENTS.get(currency.upper(), 2)
    scaled = Decimal(str(amount)).scaleb(exponent)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def merchant_reference(request_id: str) -> str:
    """Derive the merchant reference sent to the provider.

    The same request id always yields the same reference, which lets the
    provider flag a resubmitted request as a duplicate.
    """
    digest = hashlib.sha256(request_id.encode("utf-8")).hexdigest()
    return f"{REFERENCE_PREFIX}{digest[:20].upper()}"


def statement_text(invoice_type: str, month_str: str) -> str:
    """Narrative shown on the payer's bank statement, e.g. ``Subscription 2024-05``."""
    label = invoice_type.replace("_", " ").strip().title()
    return f"{label} {month_str}".strip()[:STATEMENT_TEXT_LIMIT]


def redact(payload: Any, secret: str | None = None) -> Any:
    """Mask signing keys in a provider payload before it is stored."""
    if isinstance(payload, dict):
        return {
            name: REDACTED if name.lower() in SECRET_FIELDS and value else redact(value, secret)
            for name, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact(item, secret) for item in payload]
    if secret and payload == secret:
        return REDACTED
    return payload
