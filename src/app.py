"""Atelier storefront FastAPI application.

Every request runs inside the atelier domain context. Domain exceptions are
translated to HTTP responses by Protean's FastAPI integration, plus the
storefront's own handlers for authentication and unavailable-service errors.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the domain.toml overlay (test, staging, production).
from atelier.domain import atelier, init_domain  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

init_domain()

from atelier.utils.http import register_error_handlers  # noqa: E402

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Atelier Storefront API",
    description="Catalog browsing, cart, wishlist, checkout and orders for an art atelier",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the atelier domain context for each request."""
    with atelier.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from atelier.catalogue.api import router as catalog_router  # noqa: E402
from atelier.identity.api import router as profile_router  # noqa: E402
from atelier.ordering.api import (  # noqa: E402
    cart_router,
    checkout_router,
    order_router,
    wishlist_router,
)

app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(wishlist_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(profile_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": atelier.name}})
