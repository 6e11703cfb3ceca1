"""Repository for the Order aggregate."""

from atelier.domain import atelier
from atelier.ordering.order.order import Order


@atelier.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id) -> list[Order]:
        """All orders of a customer, newest first."""
        orders = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return sorted(orders, key=lambda order: order.sequence_number, reverse=True)

    def find_by_number(self, order_number: str) -> Order | None:
        orders = self._dao.query.filter(order_number=order_number).all().items
        return orders[0] if orders else None
