"""Configurable fake payment simulator for tests.

Outcomes are set up front instead of drawn at random, and every call is
recorded so tests can assert what was attempted.
"""

from uuid import uuid4

from atelier.payments.gateway.port import FAILED, PAID, PaymentAttempt, PaymentSimulator


class FakePaymentSimulator(PaymentSimulator):
    """Deterministic payment simulator."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.error: Exception | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Card declined",
        error: Exception | None = None,
    ) -> None:
        """Configure simulator behaviour. ``error`` is raised instead of returning an outcome."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.error = error

    def attempt_payment(self, order) -> PaymentAttempt:
        self.calls.append(
            {
                "order_id": str(order.id),
                "order_number": order.order_number,
                "amount": order.pricing.total,
                "payment_method": order.payment_method,
            }
        )

        if self.error is not None:
            raise self.error
        if self.should_succeed:
            return PaymentAttempt(status=PAID, reference=f"sim_{uuid4().hex[:12]}")
        return PaymentAttempt(status=FAILED, failure_reason=self.failure_reason)
