"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# --- Admin Request Schemas ---


class TranslationInput(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = None
    material: str | None = Field(None, max_length=255)


class ImageInput(BaseModel):
    url: str = Field(..., max_length=500)
    thumbnail_url: str = Field(..., max_length=500)


class CreateCatalogItemRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "category": "painting",
                    "translations": {
                        "en": {"title": "Harbour at Dusk", "material": "Oil on canvas"},
                        "pt": {"title": "Porto ao Entardecer", "material": "Óleo sobre tela"},
                    },
                    "price": 120000,
                    "currency": "EUR",
                    "images": [
                        {
                            "url": "https://cdn.example.com/harbour.jpg",
                            "thumbnail_url": "https://cdn.example.com/harbour_thumb.jpg",
                        }
                    ],
                    "tags": ["seascape", "oil"],
                }
            ]
        }
    }

    category: str
    translations: dict[str, TranslationInput]
    price: int = Field(..., ge=0)
    currency: str = Field("EUR", max_length=3)
    compare_at_price: int | None = Field(None, ge=0)
    images: list[ImageInput] = Field(default_factory=list)
    status: str = "available"
    stock: int = Field(1, ge=0)
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class PublishRequest(BaseModel):
    published_at: datetime | None = None


class ChangePriceRequest(BaseModel):
    price: int = Field(..., ge=0)
    compare_at_price: int | None = Field(None, ge=0)


class AdjustStockRequest(BaseModel):
    stock: int = Field(..., ge=0)


# --- Response Schemas ---


class CatalogItemIdResponse(BaseModel):
    item_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CatalogItemSummary(BaseModel):
    id: str
    category: str
    title: str
    price: int
    currency: str
    compare_at_price: int | None = None
    status: str
    thumbnail_url: str | None = None
    published_at: datetime | None = None


class CatalogPageResponse(BaseModel):
    items: list[CatalogItemSummary]
    next_cursor: str | None = None
    exhausted: bool


class ImageResponse(BaseModel):
    url: str
    thumbnail_url: str
    position: int


class CatalogItemDetail(CatalogItemSummary):
    description: str | None = None
    material: str | None = None
    language: str
    images: list[ImageResponse] = Field(default_factory=list)
    stock: int
    tags: list[str] = Field(default_factory=list)
