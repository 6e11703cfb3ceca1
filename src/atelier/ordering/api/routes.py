"""FastAPI routes for the Ordering domain — cart, wishlist, checkout and orders."""

import json

from fastapi import APIRouter, BackgroundTasks, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from atelier.catalogue.catalog_item import CatalogItem
from atelier.domain import atelier
from atelier.identity.api.dependencies import require_identity
from atelier.identity.identity import Identity
from atelier.ordering.api.schemas import (
    AddressResponse,
    AddToCartRequest,
    AddToWishlistRequest,
    CartLineResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    CompletePaymentRequest,
    MergeGuestCartRequest,
    OrderDetailResponse,
    OrderLineResponse,
    OrderSummaryResponse,
    PricingResponse,
    ReasonRequest,
    RecordShipmentRequest,
    SetCartQuantityRequest,
    StatusHistoryResponse,
    StatusResponse,
    ToggleWishlistResponse,
    UpdateOrderStatusRequest,
    WishlistResponse,
)
from atelier.ordering.cart.cart import ShoppingCart
from atelier.ordering.cart.management import (
    AddToCart,
    ClearCart,
    MergeGuestCart,
    RemoveFromCart,
    SetCartQuantity,
)
from atelier.ordering.checkout.checkout import CheckoutService
from atelier.ordering.order.management import (
    CancelOrder,
    RecordShipment,
    RefundOrder,
    UpdateFulfillmentStatus,
)
from atelier.ordering.order.order import Order
from atelier.ordering.wishlist.management import (
    AddToWishlist,
    ClearWishlist,
    RemoveFromWishlist,
    ToggleWishlistItem,
)
from atelier.ordering.wishlist.wishlist import Wishlist
from atelier.utils.logging import get_logger

logger = get_logger(__name__)


def _stored_cart(owner_id) -> ShoppingCart:
    try:
        return current_domain.repository_for(ShoppingCart).get(owner_id)
    except ObjectNotFoundError:
        return ShoppingCart.create(owner_id=owner_id)


def _cart_response(cart: ShoppingCart) -> CartResponse:
    catalog = current_domain.repository_for(CatalogItem).find_many([line.product_id for line in cart.lines])
    prices = {product_id: item.price.amount for product_id, item in catalog.items()}

    lines = []
    for line in cart.lines:
        unit_price = prices.get(str(line.product_id))
        lines.append(
            CartLineResponse(
                product_id=str(line.product_id),
                quantity=line.quantity,
                unit_price=unit_price,
                line_total=unit_price * line.quantity if unit_price is not None else None,
            )
        )
    return CartResponse(
        owner_id=str(cart.owner_id),
        lines=lines,
        item_count=cart.item_count,
        subtotal=cart.subtotal(lambda product_id: prices.get(product_id, 0)),
    )


def _order_summary(order: Order) -> OrderSummaryResponse:
    return OrderSummaryResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        status=order.status,
        payment_status=order.payment_status,
        total=order.pricing.total,
        currency=order.pricing.currency,
        item_count=order.item_count,
        created_at=order.created_at,
    )


def _address(address) -> AddressResponse:
    return AddressResponse(
        recipient_name=address.recipient_name,
        line1=address.line1,
        line2=address.line2,
        city=address.city,
        postal_code=address.postal_code,
        country=address.country,
        phone=address.phone,
    )


def _order_detail(order: Order) -> OrderDetailResponse:
    return OrderDetailResponse(
        **_order_summary(order).model_dump(),
        customer_id=str(order.customer_id),
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        lines=[
            OrderLineResponse(
                product_id=str(line.product_id),
                quantity=line.quantity,
                title=line.title,
                image_url=line.image_url,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in order.lines
        ],
        pricing=PricingResponse(
            subtotal=order.pricing.subtotal,
            shipping=order.pricing.shipping,
            discount=order.pricing.discount,
            tax=order.pricing.tax,
            total=order.pricing.total,
            currency=order.pricing.currency,
        ),
        shipping_address=_address(order.shipping_address),
        billing_address=_address(order.billing_address),
        shipping_method=order.shipping_method,
        payment_method=order.payment_method,
        payment_reference=order.payment_reference,
        carrier=order.carrier,
        tracking_code=order.tracking_code,
        cancellation_reason=order.cancellation_reason,
        language=order.language,
        status_history=[
            StatusHistoryResponse(
                sequence=entry.sequence,
                status=entry.status,
                payment_status=entry.payment_status,
                note=entry.note,
                recorded_at=entry.recorded_at,
            )
            for entry in sorted(order.status_history, key=lambda entry: entry.sequence)
        ],
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(identity: Identity = Depends(require_identity)) -> CartResponse:
    return _cart_response(_stored_cart(identity.user_id))


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, identity: Identity = Depends(require_identity)) -> CartResponse:
    command = AddToCart(owner_id=identity.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(_stored_cart(identity.user_id))


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def set_cart_quantity(
    product_id: str, body: SetCartQuantityRequest, identity: Identity = Depends(require_identity)
) -> CartResponse:
    command = SetCartQuantity(owner_id=identity.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(_stored_cart(identity.user_id))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, identity: Identity = Depends(require_identity)) -> CartResponse:
    current_domain.process(RemoveFromCart(owner_id=identity.user_id, product_id=product_id), asynchronous=False)
    return _cart_response(_stored_cart(identity.user_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(identity: Identity = Depends(require_identity)) -> CartResponse:
    current_domain.process(ClearCart(owner_id=identity.user_id), asynchronous=False)
    return _cart_response(_stored_cart(identity.user_id))


@cart_router.post("/merge", response_model=CartResponse)
async def merge_guest_cart(body: MergeGuestCartRequest, identity: Identity = Depends(require_identity)) -> CartResponse:
    command = MergeGuestCart(
        owner_id=identity.user_id,
        guest_lines=json.dumps([line.model_dump() for line in body.lines]),
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(_stored_cart(identity.user_id))


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def _wishlist_response(owner_id) -> WishlistResponse:
    try:
        wishlist = current_domain.repository_for(Wishlist).get(owner_id)
    except ObjectNotFoundError:
        return WishlistResponse(owner_id=str(owner_id), product_ids=[])
    return WishlistResponse(owner_id=str(owner_id), product_ids=wishlist.product_ids)


@wishlist_router.get("", response_model=WishlistResponse)
async def get_wishlist(identity: Identity = Depends(require_identity)) -> WishlistResponse:
    return _wishlist_response(identity.user_id)


@wishlist_router.post("/items", status_code=201, response_model=WishlistResponse)
async def add_to_wishlist(body: AddToWishlistRequest, identity: Identity = Depends(require_identity)) -> WishlistResponse:
    current_domain.process(AddToWishlist(owner_id=identity.user_id, product_id=body.product_id), asynchronous=False)
    return _wishlist_response(identity.user_id)


@wishlist_router.post("/items/{product_id}/toggle", response_model=ToggleWishlistResponse)
async def toggle_wishlist_item(product_id: str, identity: Identity = Depends(require_identity)) -> ToggleWishlistResponse:
    saved = current_domain.process(
        ToggleWishlistItem(owner_id=identity.user_id, product_id=product_id),
        asynchronous=False,
    )
    return ToggleWishlistResponse(product_id=product_id, saved=saved)


@wishlist_router.delete("/items/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(product_id: str, identity: Identity = Depends(require_identity)) -> WishlistResponse:
    current_domain.process(RemoveFromWishlist(owner_id=identity.user_id, product_id=product_id), asynchronous=False)
    return _wishlist_response(identity.user_id)


@wishlist_router.delete("", response_model=WishlistResponse)
async def clear_wishlist(identity: Identity = Depends(require_identity)) -> WishlistResponse:
    current_domain.process(ClearWishlist(owner_id=identity.user_id), asynchronous=False)
    return _wishlist_response(identity.user_id)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


def settle_in_background(order_id: str) -> None:
    """Settle a card payment after the checkout response has been sent."""
    with atelier.domain_context():
        payment_status = CheckoutService().settle_payment(order_id)
        logger.info("background_settlement_finished", order_id=order_id, payment_status=payment_status)


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def checkout(
    body: CheckoutRequest,
    background_tasks: BackgroundTasks,
    identity: Identity = Depends(require_identity),
) -> CheckoutResponse:
    result = CheckoutService().checkout(
        identity,
        _stored_cart(identity.user_id),
        shipping=body.shipping_address.model_dump(),
        billing=body.billing_address.model_dump() if body.billing_address else None,
        payment_method=body.payment_method,
        language=body.language,
    )
    if result.settlement_scheduled:
        background_tasks.add_task(settle_in_background, result.order_id)

    return CheckoutResponse(
        order_id=result.order_id,
        order_number=result.order_number,
        total=result.total,
        currency=result.currency,
        payment_status=result.payment_status,
        settlement_scheduled=result.settlement_scheduled,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(identity: Identity = Depends(require_identity)) -> list[OrderSummaryResponse]:
    return [_order_summary(order) for order in CheckoutService().orders_for_customer(identity.user_id)]


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str, identity: Identity = Depends(require_identity)) -> OrderDetailResponse:
    return _order_detail(CheckoutService().get_order(order_id, customer_id=identity.user_id))


@order_router.put("/{order_id}/payment/complete", response_model=OrderDetailResponse)
async def complete_payment(
    order_id: str,
    body: CompletePaymentRequest | None = None,
    identity: Identity = Depends(require_identity),
) -> OrderDetailResponse:
    order = CheckoutService().complete_payment(
        order_id,
        customer_id=identity.user_id,
        reference=body.payment_reference if body else None,
    )
    return _order_detail(order)


# --- Admin seam ---


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateFulfillmentStatus(order_id=order_id, status=body.status, note=body.note)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/shipment", response_model=StatusResponse)
async def record_shipment(order_id: str, body: RecordShipmentRequest) -> StatusResponse:
    command = RecordShipment(order_id=order_id, carrier=body.carrier, tracking_code=body.tracking_code)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: ReasonRequest | None = None) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, reason=body.reason if body else None), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/refund", response_model=StatusResponse)
async def refund_order(order_id: str, body: ReasonRequest | None = None) -> StatusResponse:
    current_domain.process(RefundOrder(order_id=order_id, reason=body.reason if body else None), asynchronous=False)
    return StatusResponse()
