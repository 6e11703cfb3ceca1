"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Cart Request Schemas ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class SetCartQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=0)


class GuestCartLine(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class MergeGuestCartRequest(BaseModel):
    lines: list[GuestCartLine]


# --- Wishlist Request Schemas ---


class AddToWishlistRequest(BaseModel):
    product_id: str


# --- Checkout Request Schemas ---


class AddressInput(BaseModel):
    recipient_name: str | None = None
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "recipient_name": "Ana Souza",
                        "line1": "Rua das Flores 12",
                        "city": "Lisboa",
                        "postal_code": "1100-001",
                        "country": "PT",
                    },
                    "payment_method": "credit_card",
                    "language": "pt",
                }
            ]
        }
    }

    # Completeness is checked by the checkout service, which names the missing fields
    shipping_address: AddressInput
    billing_address: AddressInput | None = None
    payment_method: str = "credit_card"
    language: str | None = Field(None, max_length=5)


# --- Order Admin Request Schemas ---


class UpdateOrderStatusRequest(BaseModel):
    status: str
    note: str | None = Field(None, max_length=500)


class RecordShipmentRequest(BaseModel):
    carrier: str = Field(..., max_length=100)
    tracking_code: str = Field(..., max_length=255)


class ReasonRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class CompletePaymentRequest(BaseModel):
    payment_reference: str | None = Field(None, max_length=255)


# --- Response Schemas ---


class StatusResponse(BaseModel):
    status: str = "ok"


class CartLineResponse(BaseModel):
    product_id: str
    quantity: int
    unit_price: int | None = None
    line_total: int | None = None


class CartResponse(BaseModel):
    owner_id: str
    lines: list[CartLineResponse]
    item_count: int
    subtotal: int


class WishlistResponse(BaseModel):
    owner_id: str
    product_ids: list[str]


class ToggleWishlistResponse(BaseModel):
    product_id: str
    saved: bool


class CheckoutResponse(BaseModel):
    order_id: str
    order_number: str
    total: int
    currency: str
    payment_status: str
    settlement_scheduled: bool


class OrderLineResponse(BaseModel):
    product_id: str
    quantity: int
    title: str
    image_url: str | None = None
    unit_price: int
    line_total: int


class PricingResponse(BaseModel):
    subtotal: int
    shipping: int
    discount: int
    tax: int
    total: int
    currency: str


class AddressResponse(BaseModel):
    recipient_name: str
    line1: str
    line2: str | None = None
    city: str
    postal_code: str
    country: str
    phone: str | None = None


class StatusHistoryResponse(BaseModel):
    sequence: int
    status: str
    payment_status: str
    note: str | None = None
    recorded_at: datetime


class OrderSummaryResponse(BaseModel):
    order_id: str
    order_number: str
    status: str
    payment_status: str
    total: int
    currency: str
    item_count: int
    created_at: datetime | None = None


class OrderDetailResponse(OrderSummaryResponse):
    customer_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    lines: list[OrderLineResponse]
    pricing: PricingResponse
    shipping_address: AddressResponse
    billing_address: AddressResponse
    shipping_method: str | None = None
    payment_method: str
    payment_reference: str | None = None
    carrier: str | None = None
    tracking_code: str | None = None
    cancellation_reason: str | None = None
    language: str | None = None
    status_history: list[StatusHistoryResponse]
