"""Identity API package."""

from atelier.identity.api.routes import router

__all__ = ["router"]
