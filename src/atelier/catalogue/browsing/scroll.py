"""Infinite scroll coordinator — an explicit state machine over catalog pages.

State Machine:
    IDLE → LOADING_INITIAL (mount / filter change)
    LOADING_INITIAL → IDLE | EXHAUSTED (page arrived)
    IDLE → LOADING_MORE (sentinel visible)
    LOADING_MORE → IDLE | EXHAUSTED (page arrived)
    LOADING_* → ERRORED (fetch failed)
    ERRORED → LOADING_INITIAL (manual retry)

Every fetch is issued as a ticket stamped with the generation current when it
started. Changing filters bumps the generation, so a page that arrives for an
older generation is dropped instead of being appended to the new listing.
"""

from dataclasses import dataclass
from enum import Enum

from atelier.catalogue.browsing.filters import CatalogFilters
from atelier.catalogue.browsing.listing import CatalogPager
from atelier.catalogue.browsing.store import CatalogPage
from atelier.settings import PAGE_SIZE
from atelier.utils.logging import get_logger

logger = get_logger(__name__)


class ScrollState(Enum):
    IDLE = "idle"
    LOADING_INITIAL = "loading_initial"
    LOADING_MORE = "loading_more"
    EXHAUSTED = "exhausted"
    ERRORED = "errored"


_LOADING_STATES = {ScrollState.LOADING_INITIAL, ScrollState.LOADING_MORE}


@dataclass(frozen=True)
class FetchTicket:
    generation: int
    pager: CatalogPager


class InfiniteScrollCoordinator:
    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self.state = ScrollState.IDLE
        self.generation = 0
        self.filters = None
        self.items = []
        self.error = None
        self._pager = None

    @property
    def is_loading(self) -> bool:
        return self.state in _LOADING_STATES

    def _begin(self, filters: CatalogFilters) -> FetchTicket:
        self.generation += 1
        self.filters = filters
        self.items = []
        self.error = None
        self._pager = CatalogPager(filters, page_size=self.page_size)
        self.state = ScrollState.LOADING_INITIAL
        return FetchTicket(generation=self.generation, pager=self._pager)

    def mount(self, filters: CatalogFilters | None = None) -> FetchTicket:
        return self._begin(filters or CatalogFilters())

    def change_filters(self, filters: CatalogFilters) -> FetchTicket:
        """Restart the listing for new filters; any fetch in flight becomes stale."""
        return self._begin(filters)

    def sentinel_visible(self) -> FetchTicket | None:
        """The last rendered item scrolled into view. Returns a ticket only when a fetch should start."""
        if self.state != ScrollState.IDLE or self._pager is None:
            return None
        self.state = ScrollState.LOADING_MORE
        return FetchTicket(generation=self.generation, pager=self._pager)

    def retry(self) -> FetchTicket | None:
        if self.state != ScrollState.ERRORED:
            return None
        return self._begin(self.filters)

    def _is_current(self, ticket: FetchTicket) -> bool:
        return ticket.generation == self.generation and self.is_loading

    def receive(self, ticket: FetchTicket, page: CatalogPage) -> bool:
        """Apply a page. Returns False when the ticket is stale and the page was discarded."""
        if not self._is_current(ticket):
            logger.debug("stale_page_discarded", ticket_generation=ticket.generation, generation=self.generation)
            return False

        self.items.extend(page.items)
        self.state = ScrollState.EXHAUSTED if page.exhausted else ScrollState.IDLE
        return True

    def fail(self, ticket: FetchTicket, error: Exception) -> bool:
        if not self._is_current(ticket):
            return False

        self.error = error
        self.state = ScrollState.ERRORED
        logger.warning("catalog_page_failed", generation=ticket.generation, error=str(error))
        return True

    async def run(self, ticket: FetchTicket | None) -> bool:
        """Perform the fetch a ticket stands for and apply its outcome."""
        if ticket is None:
            return False
        try:
            page = await ticket.pager.next_page()
        except Exception as exc:
            return self.fail(ticket, exc)
        return self.receive(ticket, page)
