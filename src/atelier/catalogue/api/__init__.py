"""Catalogue API package."""

from atelier.catalogue.api.routes import router

__all__ = ["router"]
