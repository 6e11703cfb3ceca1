"""Tests for the payment simulators and the simulator factory."""

from random import Random

import pytest

from atelier.payments.gateway import get_simulator, reset_simulator, set_simulator
from atelier.payments.gateway.fake_adapter import FakePaymentSimulator
from atelier.payments.gateway.port import FAILED, PAID
from atelier.payments.gateway.probabilistic_adapter import ProbabilisticPaymentSimulator
from atelier.settings import StorefrontSettings, override_settings


class _Order:
    id = "order-1"
    order_number = "#1001"
    payment_method = "credit_card"

    class pricing:
        total = 41600


class TestFakePaymentSimulator:
    def test_succeeds_by_default(self):
        attempt = FakePaymentSimulator().attempt_payment(_Order())
        assert attempt.status == PAID
        assert attempt.succeeded
        assert attempt.reference.startswith("sim_")

    def test_configured_failure(self):
        simulator = FakePaymentSimulator()
        simulator.configure(should_succeed=False, failure_reason="Insufficient funds")

        attempt = simulator.attempt_payment(_Order())

        assert attempt.status == FAILED
        assert not attempt.succeeded
        assert attempt.failure_reason == "Insufficient funds"

    def test_configured_error_is_raised(self):
        simulator = FakePaymentSimulator()
        simulator.configure(error=RuntimeError("offline"))
        with pytest.raises(RuntimeError):
            simulator.attempt_payment(_Order())

    def test_records_calls(self):
        simulator = FakePaymentSimulator()
        simulator.attempt_payment(_Order())
        assert simulator.calls == [
            {"order_id": "order-1", "order_number": "#1001", "amount": 41600, "payment_method": "credit_card"}
        ]


class TestProbabilisticPaymentSimulator:
    def test_always_succeeds_at_rate_one(self):
        simulator = ProbabilisticPaymentSimulator(success_rate=1.0)
        assert all(simulator.attempt_payment(_Order()).succeeded for _ in range(20))

    def test_never_succeeds_at_rate_zero(self):
        simulator = ProbabilisticPaymentSimulator(success_rate=0.0)
        assert not any(simulator.attempt_payment(_Order()).succeeded for _ in range(20))

    def test_seeded_rng_is_reproducible(self):
        first = ProbabilisticPaymentSimulator(success_rate=0.5, rng=Random(7))
        second = ProbabilisticPaymentSimulator(success_rate=0.5, rng=Random(7))
        outcomes = [first.attempt_payment(_Order()).status for _ in range(10)]
        assert outcomes == [second.attempt_payment(_Order()).status for _ in range(10)]

    def test_rate_is_roughly_honoured(self):
        simulator = ProbabilisticPaymentSimulator(success_rate=0.9, rng=Random(42))
        successes = sum(simulator.attempt_payment(_Order()).succeeded for _ in range(1000))
        assert 850 <= successes <= 950

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_rejects_out_of_range_rate(self, rate):
        with pytest.raises(ValueError):
            ProbabilisticPaymentSimulator(success_rate=rate)


class TestSimulatorFactory:
    def test_default_uses_configured_rate(self):
        override_settings(StorefrontSettings(payment_success_rate=0.25))
        reset_simulator()

        simulator = get_simulator()

        assert isinstance(simulator, ProbabilisticPaymentSimulator)
        assert simulator.success_rate == 0.25

    def test_override_and_reset(self):
        fake = FakePaymentSimulator()
        set_simulator(fake)
        assert get_simulator() is fake

        reset_simulator()
        assert get_simulator() is not fake
