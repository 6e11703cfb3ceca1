import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Initialize the atelier domain once, before collection.

    Test modules import aggregates at module level, so the domain must be
    configured for the requested environment before anything is collected.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from atelier.domain import init_domain

    init_domain()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from atelier.domain import atelier
    from atelier.utils.db import drop_db, setup_db

    setup_db(atelier)

    yield

    drop_db(atelier)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Push the domain context before each test; reset storage and process-wide seams after."""
    from atelier.catalogue.browsing.listing import reset_store
    from atelier.domain import atelier
    from atelier.payments.gateway import reset_simulator
    from atelier.settings import override_settings

    ctx = atelier.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()

    reset_store()
    reset_simulator()
    override_settings(None)
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_catalog_item():
    """Create and persist a catalog item; published unless ``published_at=None`` is passed."""
    from datetime import UTC, datetime

    from protean import current_domain

    from atelier.catalogue.catalog_item import CatalogItem

    _unset = object()

    def _make(
        title="Untitled",
        price=10000,
        category="painting",
        published_at=_unset,
        created_at=None,
        stock=1,
        status="available",
        tags=None,
        keywords=None,
        translations=None,
        images=None,
    ):
        item = CatalogItem.create(
            category=category,
            translations=translations or {"en": {"title": title, "material": "Oil on canvas"}},
            price=price,
            images=images
            if images is not None
            else [{"url": f"https://cdn.example.com/{title}.jpg", "thumbnail_url": f"https://cdn.example.com/{title}_t.jpg"}],
            status=status,
            stock=stock,
            tags=tags,
            keywords=keywords,
        )
        if created_at is not None:
            item.created_at = created_at
        if published_at is _unset:
            item.publish()
        elif published_at is not None:
            item.publish(published_at=published_at)
        current_domain.repository_for(CatalogItem).add(item)
        return item

    return _make


@pytest.fixture()
def shipping_address():
    return {
        "recipient_name": "Ana Souza",
        "line1": "Rua das Flores 12",
        "city": "Lisboa",
        "postal_code": "1100-001",
        "country": "PT",
    }
