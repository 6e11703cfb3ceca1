"""Checkout orchestration.

``CheckoutService.checkout`` turns a customer's cart into an Order in one
transaction: the order counter, the order and the customer's stats are
written together or not at all. Everything after the commit (clearing the
cart, settling a card payment) is best-effort and never undoes the order.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from atelier.catalogue.catalog_item import CatalogItem
from atelier.identity.identity import Identity
from atelier.identity.profile.management import ensure_profile, profile_for
from atelier.identity.profile.profile import CustomerProfile
from atelier.ordering.cart.cart import ShoppingCart
from atelier.ordering.checkout.assembly import (
    PaymentMethod,
    ShippingRateTable,
    assemble_order,
    check_preconditions,
)
from atelier.ordering.checkout.errors import AuthenticationRequiredError
from atelier.ordering.checkout.transaction import run_in_transaction
from atelier.ordering.order.counter import OrderCounter, reserve_order_number, seed_counter
from atelier.ordering.order.management import CompletePayment, RecordPaymentOutcome
from atelier.ordering.order.order import Order, PaymentStatus
from atelier.payments.gateway import get_simulator
from atelier.settings import StorefrontSettings, get_settings
from atelier.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str
    order_number: str
    total: int
    currency: str
    payment_status: str
    settlement_scheduled: bool


class CheckoutService:
    def __init__(
        self,
        settings: StorefrontSettings | None = None,
        simulator=None,
        shipping_rates: ShippingRateTable | None = None,
    ):
        self.settings = settings or get_settings()
        self._simulator = simulator
        self.shipping_rates = shipping_rates or ShippingRateTable(flat_rate=self.settings.shipping_flat_rate)

    @property
    def simulator(self):
        return self._simulator or get_simulator()

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def checkout(
        self,
        identity: Identity | None,
        cart: ShoppingCart,
        shipping,
        billing=None,
        payment_method: str = PaymentMethod.CREDIT_CARD.value,
        language: str | None = None,
    ) -> CheckoutResult:
        """Place an order for ``cart``.

        Raises:
            AuthenticationRequiredError: No signed-in customer.
            EmptyCartError, IncompleteAddressError, UnsupportedPaymentMethodError:
                Rejected before anything is read or written.
            ItemUnavailableError: A line cannot be sold; nothing is written.
            CheckoutFailedError: The transaction kept conflicting; nothing is written.
        """
        if identity is None or not identity.user_id:
            raise AuthenticationRequiredError("Sign in to check out")

        shipping_address, billing_address = check_preconditions(cart, shipping, billing)
        method = PaymentMethod.parse(payment_method)
        language = language or self.settings.fallback_language

        add_context(customer_id=str(identity.user_id))
        try:
            # Rows the transaction updates must exist first, so racing checkouts conflict on their versions
            seed_counter(self.settings.order_number_base)
            ensure_profile(identity)

            order = run_in_transaction(
                lambda: self._place_order(identity, cart, shipping_address, billing_address, method, language),
                max_attempts=self.settings.checkout_max_attempts,
            )
            add_context(order_number=order.order_number)
            logger.info(
                "order_placed",
                order_id=str(order.id),
                total=order.pricing.total,
                payment_method=method.value,
            )

            self._clear_cart(identity.user_id)

            return CheckoutResult(
                order_id=str(order.id),
                order_number=order.order_number,
                total=order.pricing.total,
                currency=order.pricing.currency,
                payment_status=order.payment_status,
                settlement_scheduled=method.settles_immediately,
            )
        finally:
            clear_context("customer_id", "order_number")

    def _place_order(self, identity, cart, shipping_address, billing_address, method, language):
        # Reads and validation first, so a rejected attempt stages no writes
        counter, number = reserve_order_number()
        catalog = current_domain.repository_for(CatalogItem).find_many([line.product_id for line in cart.lines])
        order = assemble_order(
            number,
            identity,
            cart,
            catalog,
            shipping_address,
            billing_address,
            method.value,
            self.shipping_rates,
            language=language,
            fallback_language=self.settings.fallback_language,
            currency=self.settings.currency,
        )
        profile = profile_for(identity)
        profile.record_order(order.pricing.total)

        current_domain.repository_for(OrderCounter).add(counter)
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(CustomerProfile).add(profile)
        return order

    def _clear_cart(self, owner_id):
        repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = repo.get(owner_id)
            cart.clear()
            repo.add(cart)
        except ObjectNotFoundError:
            return
        except Exception as exc:
            # The order is committed; a stale cart is only an inconvenience
            logger.warning("cart_clear_failed", owner_id=str(owner_id), error=str(exc))

    # -------------------------------------------------------------------
    # Payment settlement
    # -------------------------------------------------------------------
    def settle_payment(self, order_id) -> str:
        """Run the payment simulator for a pending order and record its outcome.

        Returns the order's payment status afterwards. A simulator error or a
        failure to save the outcome leaves the order ``pending``.
        """
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        if PaymentStatus(order.payment_status) != PaymentStatus.PENDING:
            logger.info("settlement_skipped", order_id=str(order_id), payment_status=order.payment_status)
            return order.payment_status

        add_context(order_number=order.order_number)
        try:
            try:
                attempt = self.simulator.attempt_payment(order)
            except Exception as exc:
                logger.error("payment_simulation_failed", order_id=str(order_id), error=str(exc))
                return PaymentStatus.PENDING.value

            try:
                payment_status = current_domain.process(
                    RecordPaymentOutcome(
                        order_id=str(order.id),
                        outcome=attempt.status,
                        payment_reference=attempt.reference,
                        reason=attempt.failure_reason,
                    ),
                    asynchronous=False,
                )
            except Exception as exc:
                logger.error(
                    "payment_outcome_not_recorded",
                    order_id=str(order_id),
                    outcome=attempt.status,
                    error=str(exc),
                )
                return PaymentStatus.PENDING.value

            logger.info("payment_settled", order_id=str(order_id), payment_status=payment_status)
            return payment_status
        finally:
            clear_context("order_number")

    # -------------------------------------------------------------------
    # Queries and customer actions
    # -------------------------------------------------------------------
    def get_order(self, order_id, customer_id=None) -> Order:
        """Load an order. With ``customer_id``, another customer's order is reported as not found."""
        order = current_domain.repository_for(Order).get(order_id)
        if customer_id is not None and str(order.customer_id) != str(customer_id):
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})
        return order

    def complete_payment(self, order_id, customer_id, reference=None) -> Order:
        """Customer confirms an asynchronous payment (pix, bank transfer) on their own order."""
        order = self.get_order(order_id, customer_id=customer_id)
        current_domain.process(
            CompletePayment(
                order_id=str(order.id),
                customer_id=str(customer_id),
                payment_reference=reference,
            ),
            asynchronous=False,
        )
        logger.info("payment_completed", order_id=str(order_id), order_number=order.order_number)
        return self.get_order(order_id)

    def orders_for_customer(self, customer_id) -> list[Order]:
        return current_domain.repository_for(Order).for_customer(customer_id)
