"""Checks whether a subsidiary can be charged through a given provider."""

from dataclasses import dataclass

from billing.directory.port import LocationConfig, PaymentProvider, Subsidiary

DIRECT_DEBIT_CREDENTIALS = ("merchant_id", "portal_id", "key", "sub_account_id")
CARD_GATEWAY_CREDENTIALS = ("merchant_account", "api_key")


@dataclass(frozen=True)
class CardProviderConfig:
    """Credentials and currency used for one card gateway charge."""

    subsidiary_id: str
    merchant_account: str
    api_key: str
    currency: str


def _has_credentials(subsidiary: Subsidiary, names: tuple[str, ...]) -> bool:
    return all((getattr(subsidiary, name) or "").strip() for name in names)


def find_subsidiary(
    location: LocationConfig | None,
    subsidiary_id: str | None,
    provider: PaymentProvider | None = None,
) -> Subsidiary | None:
    """Return the location's subsidiary with the given id, optionally scoped to a provider."""
    if location is None or not subsidiary_id:
        return None
    for subsidiary in location.subsidiaries:
        if str(subsidiary.id) != str(subsidiary_id):
            continue
        if provider is None or subsidiary.provider == provider:
            return subsidiary
    return None


def is_direct_debit_eligible(subsidiary: Subsidiary | None) -> bool:
    if subsidiary is None or subsidiary.provider != PaymentProvider.DIRECT_DEBIT:
        return False
    return _has_credentials(subsidiary, DIRECT_DEBIT_CREDENTIALS)


def card_config_for(subsidiary: Subsidiary | None) -> CardProviderConfig | None:
    """Build the card gateway configuration, or None when the subsidiary cannot take cards."""
    if subsidiary is None or subsidiary.provider != PaymentProvider.CARD_GATEWAY:
        return None
    if not _has_credentials(subsidiary, CARD_GATEWAY_CREDENTIALS):
        return None
    return CardProviderConfig(
        subsidiary_id=str(subsidiary.id),
        merchant_account=subsidiary.merchant_account,
        api_key=subsidiary.api_key,
        currency=subsidiary.currency,
    )
