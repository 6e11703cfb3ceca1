"""Payment simulation port (abstract interface).

The storefront does not talk to a real payment provider. Card payments are
settled by a simulator after checkout; adapters decide the outcome and the
checkout service records it on the order.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

PAID = "paid"
FAILED = "failed"


@dataclass(frozen=True)
class PaymentAttempt:
    """Result of one simulated payment."""

    status: str  # "paid" or "failed"
    reference: str | None = None
    failure_reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == PAID


class PaymentSimulator(ABC):
    """Abstract payment simulator interface."""

    @abstractmethod
    def attempt_payment(self, order) -> PaymentAttempt:
        """Decide the payment outcome for ``order``. May raise on simulator failure."""
        ...
