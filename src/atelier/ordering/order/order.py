"""Order aggregate — the immutable snapshot written at checkout.

An Order freezes everything the customer saw at the moment of purchase:
line titles, image URLs and unit prices are copied from the catalog, and
never re-read. After placement only two things move:

Payment status:
    pending → paid | failed
    paid → refunded  (administrative)

Fulfilment status:
    pending → confirmed | cancelled
    confirmed → processing | cancelled
    processing → shipped
    shipped → delivered

A successful payment also confirms a pending order. Every transition appends
to ``status_history`` and raises a domain event.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from atelier.domain import atelier
from atelier.ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderShipped,
    OrderStatusChanged,
    PaymentFailed,
    PaymentRefunded,
    PaymentSucceeded,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),  # Terminal
    PaymentStatus.REFUNDED: set(),  # Terminal
}

_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@atelier.value_object(part_of="Order")
class PostalAddress:
    """A shipping or billing address captured at checkout time."""

    recipient_name = String(required=True, max_length=255)
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=2)
    phone = String(max_length=30)


@atelier.value_object(part_of="Order")
class OrderPricing:
    """Totals in integer minor units, locked at checkout."""

    subtotal = Integer(required=True, min_value=0)
    shipping = Integer(default=0, min_value=0)
    discount = Integer(default=0, min_value=0)
    tax = Integer(default=0, min_value=0)
    total = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="EUR")

    @invariant.post
    def total_must_add_up(self):
        expected = self.subtotal + (self.shipping or 0) + (self.tax or 0) - (self.discount or 0)
        if self.total != expected:
            raise ValidationError({"total": [f"Total {self.total} does not equal computed total {expected}"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@atelier.entity(part_of="Order")
class OrderLine:
    """A purchased artwork with its title, image and price frozen at checkout."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    title = String(required=True, max_length=255)
    image_url = String(max_length=500)
    unit_price = Integer(required=True, min_value=0)
    line_total = Integer(required=True, min_value=0)


@atelier.entity(part_of="Order")
class StatusHistoryEntry:
    sequence = Integer(required=True, min_value=1)
    status = String(required=True, max_length=20)
    payment_status = String(required=True, max_length=20)
    note = String(max_length=500)
    recorded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@atelier.aggregate
class Order:
    order_number = String(required=True, max_length=20)
    sequence_number = Integer(required=True, min_value=1)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    lines = HasMany(OrderLine)
    pricing = ValueObject(OrderPricing, required=True)
    shipping_address = ValueObject(PostalAddress, required=True)
    billing_address = ValueObject(PostalAddress, required=True)
    shipping_method = String(max_length=100)
    payment_method = String(required=True, max_length=50)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_reference = String(max_length=255)
    carrier = String(max_length=100)
    tracking_code = String(max_length=255)
    cancellation_reason = String(max_length=500)
    language = String(max_length=5, default="en")
    status_history = HasMany(StatusHistoryEntry)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def must_have_lines(self):
        if not self.lines:
            raise ValidationError({"lines": ["An order must have at least one line"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        sequence_number,
        customer_id,
        lines,
        shipping_address,
        billing_address,
        payment_method,
        shipping_cost=0,
        shipping_method=None,
        currency="EUR",
        customer_name=None,
        customer_email=None,
        language="en",
        tax=0,
        discount=0,
    ):
        """Build a placed order from already-validated checkout data.

        Args:
            sequence_number: Integer issued by the order counter.
            lines: List of dicts with product_id, quantity, title, image_url
                and unit_price.
            shipping_address: Dict of PostalAddress fields.
            billing_address: Dict of PostalAddress fields.
        """
        now = datetime.now(UTC)
        order_lines = [
            OrderLine(
                product_id=line["product_id"],
                quantity=line["quantity"],
                title=line["title"],
                image_url=line.get("image_url"),
                unit_price=line["unit_price"],
                line_total=line["quantity"] * line["unit_price"],
            )
            for line in lines
        ]
        subtotal = sum(line.line_total for line in order_lines)

        order = cls(
            order_number=f"#{sequence_number}",
            sequence_number=sequence_number,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            lines=order_lines,
            pricing=OrderPricing(
                subtotal=subtotal,
                shipping=shipping_cost,
                discount=discount,
                tax=tax,
                total=subtotal + shipping_cost + tax - discount,
                currency=currency,
            ),
            shipping_address=PostalAddress(**shipping_address),
            billing_address=PostalAddress(**billing_address),
            shipping_method=shipping_method,
            payment_method=payment_method,
            language=language,
            created_at=now,
            updated_at=now,
        )
        order._record_history("Order placed", now)
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                line_count=len(order_lines),
                total=order.pricing.total,
                currency=currency,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def total(self):
        return self.pricing.total

    @property
    def item_count(self):
        return sum(line.quantity for line in self.lines)

    def _record_history(self, note, recorded_at=None):
        recorded_at = recorded_at or datetime.now(UTC)
        self.add_status_history(
            StatusHistoryEntry(
                sequence=len(self.status_history) + 1,
                status=self.status,
                payment_status=self.payment_status,
                note=note,
                recorded_at=recorded_at,
            )
        )
        self.updated_at = recorded_at

    def _assert_payment_transition(self, target):
        current = PaymentStatus(self.payment_status)
        if target not in _PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot transition payment from {current.value} to {target.value}"]}
            )

    def _assert_status_transition(self, target):
        current = OrderStatus(self.status)
        if target not in _STATUS_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    # -------------------------------------------------------------------
    # Payment transitions
    # -------------------------------------------------------------------
    def record_payment_outcome(self, outcome, reference=None, reason=None, note=None):
        """Apply a payment result (``paid`` or ``failed``) to a pending payment."""
        try:
            target = PaymentStatus(outcome)
        except ValueError:
            target = None
        if target not in (PaymentStatus.PAID, PaymentStatus.FAILED):
            # Refunds go through refund()
            raise ValidationError({"payment_status": [f"'{outcome}' is not a payment outcome"]})
        if OrderStatus(self.status) == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Cannot record a payment on a cancelled order"]})
        self._assert_payment_transition(target)

        self.payment_status = target.value
        if reference:
            self.payment_reference = reference

        if target == PaymentStatus.PAID:
            if OrderStatus(self.status) == OrderStatus.PENDING:
                self.status = OrderStatus.CONFIRMED.value
            self._record_history(note or "Payment received")
            self.raise_(
                PaymentSucceeded(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    payment_reference=self.payment_reference,
                    amount=self.pricing.total,
                )
            )
        else:
            self._record_history(note or f"Payment failed: {reason or 'declined'}")
            self.raise_(
                PaymentFailed(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    payment_reference=self.payment_reference,
                    reason=reason,
                )
            )

    def complete_payment(self, reference=None):
        """Customer-initiated completion of an asynchronous payment (pix, bank transfer)."""
        self.record_payment_outcome(
            PaymentStatus.PAID.value,
            reference=reference,
            note="Payment completed by customer",
        )

    def refund(self, reason=None):
        self._assert_payment_transition(PaymentStatus.REFUNDED)

        self.payment_status = PaymentStatus.REFUNDED.value
        self._record_history(f"Refunded: {reason}" if reason else "Refunded")
        self.raise_(
            PaymentRefunded(
                order_id=str(self.id),
                order_number=self.order_number,
                amount=self.pricing.total,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Fulfilment transitions
    # -------------------------------------------------------------------
    def advance_status(self, new_status, note=None):
        """Move fulfilment forward to ``confirmed``, ``processing`` or ``delivered``.

        Shipping and cancelling carry extra data and go through
        ``record_shipment`` and ``cancel``.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{new_status}'"]}) from None
        if target == OrderStatus.SHIPPED:
            raise ValidationError({"status": ["Use record_shipment to mark an order as shipped"]})
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Use cancel to cancel an order"]})
        self._assert_status_transition(target)

        previous = self.status
        self.status = target.value
        now = datetime.now(UTC)
        self._record_history(note or f"Status changed to {target.value}", now)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    def record_shipment(self, carrier, tracking_code):
        self._assert_status_transition(OrderStatus.SHIPPED)
        if not carrier or not tracking_code:
            raise ValidationError({"tracking_code": ["Carrier and tracking code are required"]})

        self.status = OrderStatus.SHIPPED.value
        self.carrier = carrier
        self.tracking_code = tracking_code
        now = datetime.now(UTC)
        self._record_history(f"Shipped with {carrier} ({tracking_code})", now)
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                order_number=self.order_number,
                carrier=carrier,
                tracking_code=tracking_code,
                shipped_at=now,
            )
        )

    def cancel(self, reason=None):
        self._assert_status_transition(OrderStatus.CANCELLED)

        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        now = datetime.now(UTC)
        self._record_history(f"Cancelled: {reason}" if reason else "Cancelled", now)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                reason=reason,
                cancelled_at=now,
            )
        )
