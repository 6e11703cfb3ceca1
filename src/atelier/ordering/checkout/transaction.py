"""Run a unit of work, retrying when a concurrent writer got there first."""

from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError

from atelier.ordering.checkout.errors import CheckoutFailedError
from atelier.utils.logging import get_logger

logger = get_logger(__name__)


def run_in_transaction(work, max_attempts=5):
    """Call ``work()`` inside a UnitOfWork and commit it.

    A version conflict (another checkout committed the counter or a profile
    first) discards everything the attempt staged and starts over with fresh
    reads. After ``max_attempts`` conflicts ``CheckoutFailedError`` is raised
    and nothing has been written. Any other exception propagates unchanged.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            with UnitOfWork():
                result = work()
            return result
        except ExpectedVersionError as exc:
            logger.warning(
                "transaction_conflict",
                attempt=attempt,
                max_attempts=max_attempts,
                error=str(exc),
            )

    logger.error("transaction_exhausted", attempts=max_attempts)
    raise CheckoutFailedError(
        f"Could not complete checkout after {max_attempts} attempts",
        attempts=max_attempts,
    )
