"""Order counter — the single shared row behind gap-free order numbers.

``seed_counter`` creates the row before any checkout transaction needs it.
Inside the transaction the counter is read, incremented and written. Two
checkouts racing for the same value conflict on the aggregate version; the
loser's transaction is retried, so every committed order gets the next
integer and no number is skipped or repeated.
"""

from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from atelier.domain import atelier
from atelier.settings import get_settings
from atelier.utils.db import get_or_create

ORDER_COUNTER_KEY = "orders"


@atelier.aggregate
class OrderCounter:
    counter_key = Identifier(identifier=True, required=True)
    last_issued = Integer(required=True, min_value=0)

    @classmethod
    def bootstrap(cls, base):
        """A counter whose first issued number will be ``base``."""
        return cls(counter_key=ORDER_COUNTER_KEY, last_issued=base - 1)

    def issue(self):
        self.last_issued += 1
        return self.last_issued


def seed_counter(base=None):
    """Create the counter row if missing, outside any unit of work. Returns the stored counter.

    A row that already exists is left untouched, whatever ``base`` says.
    """
    return get_or_create(
        current_domain.repository_for(OrderCounter),
        ORDER_COUNTER_KEY,
        lambda: OrderCounter.bootstrap(base or get_settings().order_number_base),
    )


def load_counter():
    """Return the stored counter. Raises ``ObjectNotFoundError`` until it is seeded."""
    return current_domain.repository_for(OrderCounter).get(ORDER_COUNTER_KEY)


def reserve_order_number():
    """Issue the next number on a loaded counter without saving it yet.

    Returns ``(counter, number)``; the caller persists the counter once the
    rest of its unit of work has been validated.
    """
    counter = load_counter()
    return counter, counter.issue()


def next_order_number():
    """Issue the next order number within the caller's unit of work."""
    counter, number = reserve_order_number()
    current_domain.repository_for(OrderCounter).add(counter)
    return number
