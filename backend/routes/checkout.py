# backend/routes/checkout.py
import math
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Query, status
from sqlalchemy.orm import Session
import logging

from database import get_db
from utils.tokenJWT import get_current_user, role_required
from utils.audit import write_log, client_ip
from utils import checkout as checkout_service
from utils.errors import StoreError
from utils.pricing import line_total, to_amount
from models.users import User
from models.order import Order
from schemas.common import ApiResponse
from schemas.cart import SizeOut, DesignOut
from schemas.order import (
    CheckoutCreate, OrderOut, OrderItemOut, OrdersPage, OrderStatusPatch, ShippingDetails,
)

router = APIRouter(prefix="/checkout", tags=["Checkout"])
logger = logging.getLogger(__name__)

# Map Order model to OrderOut schema
def order_to_out(order: Order) -> OrderOut:
    items: List[OrderItemOut] = []
    for it in order.items:
        size = None
        if it.size_label is not None:
            size = SizeOut(size_id=it.size_id, label=it.size_label, price=to_amount(it.size_surcharge))
        design = None
        if it.design_title is not None:
            design = DesignOut(
                design_id=it.design_id, title=it.design_title,
                price=to_amount(it.design_surcharge), image=it.design_image_url,
            )
        items.append(OrderItemOut(
            product_id=it.product_id,
            name=it.name,
            image=it.image_url,
            price=to_amount(it.unit_price),
            quantity=it.quantity,
            size=size,
            design=design,
            line_total=to_amount(line_total(it)),
        ))
    return OrderOut(
        id=order.id,
        customer_id=order.customer_id,
        cart_id=order.cart_id,
        shipping_details=ShippingDetails(
            full_name=order.shipping_full_name,
            email=order.shipping_email,
            phone=order.shipping_phone,
            address=order.shipping_address,
            country_id=order.shipping_country_id,
            province_id=order.shipping_province_id,
            city_id=order.shipping_city_id,
            postal_code=order.shipping_postal_code,
            location_url=order.shipping_location_url,
        ),
        items=items,
        subtotal=to_amount(order.subtotal),
        shipping=to_amount(order.shipping),
        total_amount=to_amount(order.total_amount),
        items_count=order.items_count,
        status=order.status.value,
        payment_status=order.payment_status.value,
        payment_method=order.payment_method,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )

# Create an order from the customer's cart
@router.post("", response_model=ApiResponse[OrderOut], status_code=status.HTTP_201_CREATED)
def create_checkout(
    payload: CheckoutCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        order = checkout_service.materialize(
            db,
            current_user,
            payload.cart_id,
            payload.shipping_details,
            items=payload.items,
            payment_method=payload.payment_method,
        )
    except StoreError as e:
        write_log(
            db, user_id=current_user.id, action="CHECKOUT_CREATE", resource="orders", status="FAIL",
            ip=client_ip(request), meta={"cart_id": payload.cart_id, "reason": e.message},
        )
        raise

    out = order_to_out(order)
    write_log(
        db, user_id=current_user.id, action="CHECKOUT_CREATE", resource="orders", resource_id=order.id,
        ip=client_ip(request),
        meta={"cart_id": payload.cart_id, "items": out.items_count, "total": out.total_amount},
    )
    return ApiResponse[OrderOut](message="Checkout created successfully", data=out)

# List orders: own orders for customers, all orders for admins
@router.get("", response_model=ApiResponse[OrdersPage])
def list_checkouts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    rows, total = checkout_service.list_orders(db, current_user, page=page, limit=limit, status=status, search=search)
    data = OrdersPage(
        checkouts=[order_to_out(o) for o in rows],
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
    )
    return ApiResponse[OrdersPage](message="Checkouts retrieved successfully", data=data)

# Get details of a specific order
@router.get("/{order_id}", response_model=ApiResponse[OrderOut])
def get_checkout(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    order = checkout_service.get_order(db, current_user, order_id)
    return ApiResponse[OrderOut](message="Order retrieved successfully", data=order_to_out(order))

# Manually update order or payment status (admin only)
@router.patch("/{order_id}", response_model=ApiResponse[OrderOut])
def update_checkout_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin"))
):
    order, previous = checkout_service.update_status(
        db, order_id, status=payload.status, payment_status=payload.payment_status
    )
    out = order_to_out(order)
    write_log(
        db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", resource_id=order.id,
        ip=client_ip(request),
        meta={"old": previous, "new": {"status": out.status, "payment_status": out.payment_status}},
    )
    logger.info("Order %s status %s -> %s", order_id, previous["status"], out.status)
    return ApiResponse[OrderOut](message="Order updated successfully", data=out)
