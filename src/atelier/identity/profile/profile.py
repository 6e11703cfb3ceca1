"""CustomerProfile aggregate root with the CustomerStats value object.

A profile exists for every customer who has signed in at least once. Its
stats count orders placed (not orders paid) and are only ever bumped inside
the checkout transaction, together with the order they count.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, ValueObject

from atelier.domain import atelier
from atelier.identity.profile.events import (
    CustomerDetailsUpdated,
    CustomerRegistered,
    OrderCountedOnProfile,
)


@atelier.value_object(part_of="CustomerProfile")
class CustomerStats:
    """Running totals across a customer's placed orders, in minor units."""

    total_orders: Integer(default=0, min_value=0)
    total_spent: Integer(default=0, min_value=0)


@atelier.aggregate
class CustomerProfile:
    user_id: Identifier(identifier=True, required=True)
    display_name: String(max_length=255)
    email: String(max_length=254)
    stats: ValueObject(CustomerStats)
    registered_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def register(cls, user_id, display_name=None, email=None):
        now = datetime.now(UTC)
        profile = cls(
            user_id=user_id,
            display_name=display_name,
            email=email,
            stats=CustomerStats(total_orders=0, total_spent=0),
            registered_at=now,
        )
        profile.raise_(
            CustomerRegistered(
                user_id=str(user_id),
                display_name=display_name,
                email=email,
                registered_at=now,
            )
        )
        return profile

    @property
    def total_orders(self):
        return self.stats.total_orders if self.stats else 0

    @property
    def total_spent(self):
        return self.stats.total_spent if self.stats else 0

    def update_details(self, display_name=None, email=None):
        if display_name is not None:
            self.display_name = display_name
        if email is not None:
            self.email = email
        self.raise_(
            CustomerDetailsUpdated(
                user_id=str(self.user_id),
                display_name=self.display_name,
                email=self.email,
            )
        )

    def record_order(self, order_total):
        if order_total < 0:
            raise ValidationError({"order_total": ["Order total cannot be negative"]})

        # Value object: replaced wholesale
        self.stats = CustomerStats(
            total_orders=self.total_orders + 1,
            total_spent=self.total_spent + order_total,
        )
        self.raise_(
            OrderCountedOnProfile(
                user_id=str(self.user_id),
                order_total=order_total,
                total_orders=self.stats.total_orders,
                total_spent=self.stats.total_spent,
            )
        )
