"""Payment simulator factory.

Provides get_simulator() / set_simulator() to swap implementations:
- ProbabilisticPaymentSimulator by default, approving
  ``ATELIER_PAYMENT_SUCCESS_RATE`` of payments
- FakePaymentSimulator for tests
"""

from atelier.payments.gateway.port import PaymentSimulator
from atelier.payments.gateway.probabilistic_adapter import ProbabilisticPaymentSimulator
from atelier.settings import get_settings

_current_simulator: PaymentSimulator | None = None


def get_simulator() -> PaymentSimulator:
    """Return the current payment simulator."""
    global _current_simulator
    if _current_simulator is None:
        _current_simulator = ProbabilisticPaymentSimulator(success_rate=get_settings().payment_success_rate)
    return _current_simulator


def set_simulator(simulator: PaymentSimulator) -> None:
    """Override the active payment simulator (useful for tests)."""
    global _current_simulator
    _current_simulator = simulator


def reset_simulator() -> None:
    """Reset to the default simulator."""
    global _current_simulator
    _current_simulator = None
