"""Database schema management for relational providers, and race-safe row creation."""

import threading

from protean.domain import Domain
from protean.exceptions import ObjectNotFoundError
from sqlalchemy import create_engine

from atelier.utils.logging import get_logger

logger = get_logger(__name__)

RELATIONAL_PROVIDERS = ("sqlite", "postgresql")

# Serializes first-time inserts made by this process
_create_lock = threading.Lock()


def _relational_providers(domain: Domain):
    return [provider for provider in domain.providers.values() if provider.conn_info["provider"] in RELATIONAL_PROVIDERS]


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every aggregate and entity. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching a repository's DAO registers its model with SQLAlchemy's metadata
            for record in domain.registry.aggregates.values():
                if record.cls.meta_.provider == provider.name:
                    domain.repository_for(record.cls)._dao  # noqa: B018
            for record in domain.registry.entities.values():
                if record.cls.meta_.provider == provider.name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            # Outbox tables are registered internally, outside the aggregate registry
            if hasattr(domain, "_outbox_repos") and provider.name in domain._outbox_repos:
                domain._outbox_repos[provider.name]._dao  # noqa: B018

            provider._metadata.create_all(engine)
            touched.append(provider.name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    """Drop every table the providers know about."""
    touched = []
    with domain.domain_context():
        for provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            touched.append(provider.name)
    return touched


def _find(repository, identifier):
    try:
        return repository.get(identifier)
    except ObjectNotFoundError:
        return None


def get_or_create(repository, identifier, build):
    """Return the aggregate stored under ``identifier``, inserting ``build()`` if there is none.

    Call it outside any unit of work, so the insert commits on its own and
    later transactions load the row with a version they can be checked
    against. Inserts from this process are serialized; an insert that loses
    to another process (a duplicate key on a relational provider) falls back
    to the row the winner stored.
    """
    existing = _find(repository, identifier)
    if existing is not None:
        return existing

    with _create_lock:
        existing = _find(repository, identifier)
        if existing is not None:
            return existing

        aggregate = build()
        try:
            repository.add(aggregate)
        except Exception:
            stored = _find(repository, identifier)
            if stored is None:
                raise
            logger.info("concurrent_create_resolved", identifier=str(identifier))
            return stored
        return aggregate
