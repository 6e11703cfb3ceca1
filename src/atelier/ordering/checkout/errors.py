"""Checkout errors.

Input problems subclass Protean's ``ValidationError`` so the API maps them
to HTTP 400 with their messages dict, like every other domain validation
failure. The remaining two are not the customer's input at fault.
"""

from protean.exceptions import ValidationError


class EmptyCartError(ValidationError):
    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class IncompleteAddressError(ValidationError):
    def __init__(self, kind, missing):
        super().__init__({f"{kind}_address": [f"Missing required fields: {', '.join(missing)}"]})
        self.kind = kind
        self.missing = list(missing)


class ItemUnavailableError(ValidationError):
    """A cart line points at an item that is unpublished, sold, or short on stock."""

    def __init__(self, product_id, reason):
        super().__init__({"lines": [f"Item {product_id} is unavailable: {reason}"]})
        self.product_id = str(product_id)
        self.reason = reason


class UnsupportedPaymentMethodError(ValidationError):
    def __init__(self, method):
        super().__init__({"payment_method": [f"Unsupported payment method '{method}'"]})
        self.method = method


class AuthenticationRequiredError(Exception):
    """Checkout was attempted without a signed-in customer."""


class CheckoutFailedError(Exception):
    """The checkout transaction could not commit. Nothing was written."""

    def __init__(self, message, attempts=0):
        super().__init__(message)
        self.attempts = attempts
