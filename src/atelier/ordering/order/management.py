"""Order lifecycle — commands and handler for payment and fulfilment changes.

Placing an order is not a command: it happens inside the checkout
transaction (see ``atelier.ordering.checkout``). Everything after placement
goes through here.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from atelier.domain import atelier
from atelier.ordering.order.order import Order


@atelier.command(part_of="Order")
class RecordPaymentOutcome:
    order_id = Identifier(required=True)
    outcome = String(required=True, max_length=10)  # paid | failed
    payment_reference = String(max_length=255)
    reason = String(max_length=500)


@atelier.command(part_of="Order")
class CompletePayment:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_reference = String(max_length=255)


@atelier.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@atelier.command(part_of="Order")
class UpdateFulfillmentStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = String(max_length=500)


@atelier.command(part_of="Order")
class RecordShipment:
    order_id = Identifier(required=True)
    carrier = String(required=True, max_length=100)
    tracking_code = String(required=True, max_length=255)


@atelier.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@atelier.command_handler(part_of=Order)
class ManageOrderHandler:
    @handle(RecordPaymentOutcome)
    def record_payment_outcome(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_outcome(
            command.outcome,
            reference=command.payment_reference,
            reason=command.reason,
        )
        repo.add(order)
        return order.payment_status

    @handle(CompletePayment)
    def complete_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if str(order.customer_id) != str(command.customer_id):
            raise ValidationError({"order_id": ["Order does not belong to this customer"]})
        order.complete_payment(reference=command.payment_reference)
        repo.add(order)
        return order.payment_status

    @handle(RefundOrder)
    def refund_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.refund(reason=command.reason)
        repo.add(order)

    @handle(UpdateFulfillmentStatus)
    def update_fulfillment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.advance_status(command.status, note=command.note)
        repo.add(order)

    @handle(RecordShipment)
    def record_shipment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_shipment(carrier=command.carrier, tracking_code=command.tracking_code)
        repo.add(order)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(reason=command.reason)
        repo.add(order)
