"""FastAPI endpoints for the Catalogue domain: public browsing and the admin seam."""

import json

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from atelier.catalogue.api.schemas import (
    AdjustStockRequest,
    CatalogItemDetail,
    CatalogItemIdResponse,
    CatalogItemSummary,
    CatalogPageResponse,
    ChangePriceRequest,
    CreateCatalogItemRequest,
    ImageResponse,
    PublishRequest,
    StatusResponse,
)
from atelier.catalogue.browsing.filters import CatalogFilters
from atelier.catalogue.browsing.listing import get_store, list_catalog_page
from atelier.catalogue.catalog_item import CatalogItem
from atelier.catalogue.management import (
    AdjustCatalogItemStock,
    ChangeCatalogItemPrice,
    CreateCatalogItem,
    PublishCatalogItem,
    UnpublishCatalogItem,
)
from atelier.settings import get_settings

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _summary(item: CatalogItem, language: str) -> CatalogItemSummary:
    image = item.primary_image
    return CatalogItemSummary(
        id=str(item.id),
        category=item.category,
        title=item.title_for(language, get_settings().fallback_language),
        price=item.price.amount,
        currency=item.price.currency,
        compare_at_price=item.price.compare_at,
        status=item.status,
        thumbnail_url=image.thumbnail_url if image else None,
        published_at=item.published_at,
    )


# --- Public browsing ---


@router.get("", response_model=CatalogPageResponse)
async def browse_catalog(
    category: str | None = None,
    status: str | None = None,
    search: str | None = None,
    cursor: str | None = None,
    language: str = Query("en", max_length=5),
) -> CatalogPageResponse:
    filters = CatalogFilters(category=category, status=status, search_term=search)
    page = list_catalog_page(filters, cursor)
    return CatalogPageResponse(
        items=[_summary(item, language) for item in page.items],
        next_cursor=page.next_cursor,
        exhausted=page.exhausted,
    )


@router.get("/{item_id}", response_model=CatalogItemDetail)
async def get_catalog_item(item_id: str, language: str = Query("en", max_length=5)) -> CatalogItemDetail:
    item = get_store().get_by_id(item_id)
    if not item.is_published:
        raise ObjectNotFoundError({"_entity": f"Catalog item {item_id} not found"})

    translation = item.translation_for(language, get_settings().fallback_language)
    return CatalogItemDetail(
        **_summary(item, language).model_dump(),
        description=translation.description,
        material=translation.material,
        language=translation.language,
        images=[
            ImageResponse(url=image.url, thumbnail_url=image.thumbnail_url, position=image.position or 0)
            for image in sorted(item.images, key=lambda image: image.position or 0)
        ],
        stock=item.stock or 0,
        tags=list(item.tags or []),
    )


# --- Admin seam ---


@router.post("", status_code=201, response_model=CatalogItemIdResponse)
async def create_catalog_item(body: CreateCatalogItemRequest) -> CatalogItemIdResponse:
    command = CreateCatalogItem(
        category=body.category,
        translations=json.dumps({language: t.model_dump() for language, t in body.translations.items()}),
        price=body.price,
        currency=body.currency,
        compare_at_price=body.compare_at_price,
        images=json.dumps([image.model_dump() for image in body.images]),
        status=body.status,
        stock=body.stock,
        tags=json.dumps(body.tags),
        keywords=json.dumps(body.keywords),
    )
    result = current_domain.process(command, asynchronous=False)
    return CatalogItemIdResponse(item_id=result)


@router.put("/{item_id}/publish", response_model=StatusResponse)
async def publish_catalog_item(item_id: str, body: PublishRequest | None = None) -> StatusResponse:
    command = PublishCatalogItem(item_id=item_id, published_at=body.published_at if body else None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/{item_id}/unpublish", response_model=StatusResponse)
async def unpublish_catalog_item(item_id: str) -> StatusResponse:
    current_domain.process(UnpublishCatalogItem(item_id=item_id), asynchronous=False)
    return StatusResponse()


@router.put("/{item_id}/price", response_model=StatusResponse)
async def change_catalog_item_price(item_id: str, body: ChangePriceRequest) -> StatusResponse:
    command = ChangeCatalogItemPrice(item_id=item_id, price=body.price, compare_at_price=body.compare_at_price)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/{item_id}/stock", response_model=StatusResponse)
async def adjust_catalog_item_stock(item_id: str, body: AdjustStockRequest) -> StatusResponse:
    current_domain.process(AdjustCatalogItemStock(item_id=item_id, stock=body.stock), asynchronous=False)
    return StatusResponse()
