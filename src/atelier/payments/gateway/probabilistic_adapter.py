"""Payment simulator that approves a configurable share of payments."""

from random import Random
from uuid import uuid4

from atelier.payments.gateway.port import FAILED, PAID, PaymentAttempt, PaymentSimulator


class ProbabilisticPaymentSimulator(PaymentSimulator):
    def __init__(self, success_rate: float = 0.9, rng: Random | None = None) -> None:
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be between 0 and 1, got {success_rate}")
        self.success_rate = success_rate
        self.rng = rng or Random()

    def attempt_payment(self, order) -> PaymentAttempt:  # noqa: ARG002
        if self.rng.random() < self.success_rate:
            return PaymentAttempt(status=PAID, reference=f"sim_{uuid4().hex[:12]}")
        return PaymentAttempt(status=FAILED, failure_reason="Payment declined by simulator")
