from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    "CAP_REQUEST_ISSUE_AT_APPROVED": True,
    "UNRECEIVED_ALERT_DAYS": 7,
    "SHRINKAGE_ALERT_RATIO": Decimal("0.05"),
    "DEFAULT_PAGE_SIZE": 20,
    "MAX_PAGE_SIZE": 5000,
}


def ledger_setting(name: str):
    """
    Reads settings.FUEL_LEDGER[name], falling back to DEFAULTS.
    Looked up on every call so override_settings works in tests.
    """
    overrides = getattr(settings, "FUEL_LEDGER", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
