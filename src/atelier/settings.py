"""Storefront settings read from the environment.

Protean's own configuration (providers, event processing) lives in
``domain.toml``; these are the business knobs the storefront needs on top.
"""

import os
from dataclasses import dataclass

# Public browsing page size
PAGE_SIZE = 12

# Search terms shorter than this never reach the catalog store
MIN_SEARCH_LENGTH = 2


@dataclass(frozen=True)
class StorefrontSettings:
    order_number_base: int = 1001
    shipping_flat_rate: int = 500
    currency: str = "EUR"
    fallback_language: str = "en"
    checkout_max_attempts: int = 5
    payment_success_rate: float = 0.9

    @classmethod
    def from_env(cls) -> "StorefrontSettings":
        return cls(
            order_number_base=int(os.getenv("ATELIER_ORDER_NUMBER_BASE", cls.order_number_base)),
            shipping_flat_rate=int(os.getenv("ATELIER_SHIPPING_FLAT_RATE", cls.shipping_flat_rate)),
            currency=os.getenv("ATELIER_CURRENCY", cls.currency),
            fallback_language=os.getenv("ATELIER_FALLBACK_LANGUAGE", cls.fallback_language),
            checkout_max_attempts=int(os.getenv("ATELIER_CHECKOUT_MAX_ATTEMPTS", cls.checkout_max_attempts)),
            payment_success_rate=float(os.getenv("ATELIER_PAYMENT_SUCCESS_RATE", cls.payment_success_rate)),
        )


_settings: StorefrontSettings | None = None


def get_settings() -> StorefrontSettings:
    """Return the process-wide settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = StorefrontSettings.from_env()
    return _settings


def override_settings(settings: StorefrontSettings | None) -> None:
    """Replace (or with ``None``, reset) the process-wide settings. Used by tests."""
    global _settings
    _settings = settings
