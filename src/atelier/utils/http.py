"""HTTP error mapping shared by the application and API tests."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from atelier.catalogue.browsing.listing import CatalogFetchError
from atelier.ordering.checkout.errors import AuthenticationRequiredError, CheckoutFailedError
from atelier.utils.logging import get_logger

logger = get_logger(__name__)


async def authentication_required_handler(request: Request, exc: AuthenticationRequiredError):
    return JSONResponse(status_code=401, content={"detail": str(exc) or "Authentication required"})


async def checkout_failed_handler(request: Request, exc: CheckoutFailedError):
    logger.error("checkout_failed", path=request.url.path, attempts=exc.attempts)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


async def catalog_fetch_failed_handler(request: Request, exc: CatalogFetchError):
    return JSONResponse(status_code=503, content={"detail": "Catalog is temporarily unavailable"})


def register_error_handlers(app: FastAPI) -> None:
    """Protean's domain exception mapping (400/404/...) plus the storefront's own errors."""
    register_exception_handlers(app)
    app.add_exception_handler(AuthenticationRequiredError, authentication_required_handler)
    app.add_exception_handler(CheckoutFailedError, checkout_failed_handler)
    app.add_exception_handler(CatalogFetchError, catalog_fetch_failed_handler)
