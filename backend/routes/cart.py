# backend/routes/cart.py
from typing import Optional
from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.orm import Session
from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils import cart_store
from utils.pricing import totals, line_total, to_amount
from models.users import User
from models.cart import Cart
from schemas.common import ApiResponse
from schemas.cart import CartItemPayload, CartRemovePayload, CartOut, CartItemOut, SizeOut, DesignOut

router = APIRouter(prefix="/cart", tags=["Cart"])

def _item_to_out(it) -> CartItemOut:
    size = None
    if it.size_label is not None:
        size = SizeOut(size_id=it.size_id, label=it.size_label, price=to_amount(it.size_surcharge))
    design = None
    if it.design_title is not None:
        design = DesignOut(
            design_id=it.design_id,
            title=it.design_title,
            price=to_amount(it.design_surcharge),
            image=it.design_image_url,
        )
    return CartItemOut(
        product_id=it.product_id,
        name=it.name,
        image=it.image_url,
        price=to_amount(it.unit_price), # Snapshot price without options
        quantity=it.quantity,
        size=size,
        design=design,
        line_total=to_amount(line_total(it)),
    )

def cart_to_out(cart: Optional[Cart]) -> CartOut:
    # No cart is reported as an empty cart with a null id
    if cart is None:
        return CartOut()

    t = totals(cart.items)
    return CartOut(
        id=cart.id,
        items=[_item_to_out(it) for it in cart.items],
        subtotal=to_amount(t.subtotal),
        shipping=to_amount(t.shipping),
        total=to_amount(t.total),
        total_items=t.items_count,
    )

@router.get("", response_model=ApiResponse[CartOut])
def get_cart(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_store.get_cart(db, current_user)
    out = cart_to_out(cart)

    # Log cart view action
    write_log(
        db,
        user_id=current_user.id,
        action="CART_VIEW",
        resource="cart",
        resource_id=out.id,
        ip=client_ip(request),
        meta={"items": len(out.items), "total": out.total},
    )
    message = "Cart retrieved successfully" if cart else "No cart found"
    return ApiResponse[CartOut](message=message, data=out)

@router.post("", response_model=ApiResponse[CartOut], status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_store.add_item(
        db, current_user, payload.product_id, payload.quantity,
        size_id=payload.size_id, design_id=payload.design_id,
    )
    out = cart_to_out(cart)
    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        resource_id=out.id,
        ip=client_ip(request),
        meta={"product_id": payload.product_id, "qty": payload.quantity, "cart_items": len(out.items), "total": out.total},
    )
    return ApiResponse[CartOut](message="Product added to cart successfully", data=out)

@router.patch("", response_model=ApiResponse[CartOut])
def update_cart_item(
    payload: CartItemPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_store.update_item(
        db, current_user, payload.product_id, payload.quantity,
        size_id=payload.size_id, design_id=payload.design_id,
    )
    out = cart_to_out(cart)
    write_log(
        db,
        user_id=current_user.id,
        action="CART_UPDATE",
        resource="cart",
        resource_id=out.id,
        ip=client_ip(request),
        meta={"product_id": payload.product_id, "qty": payload.quantity, "total": out.total},
    )
    return ApiResponse[CartOut](message="Cart item updated successfully", data=out)

@router.delete("", response_model=ApiResponse[CartOut])
def delete_cart_item(
    payload: CartRemovePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_store.remove_item(db, current_user, payload.product_id)
    out = cart_to_out(cart)
    write_log(
        db,
        user_id=current_user.id,
        action="CART_REMOVE",
        resource="cart",
        resource_id=out.id,
        ip=client_ip(request),
        meta={"product_id": payload.product_id, "cart_items": len(out.items), "total": out.total},
    )
    if cart is None:
        return ApiResponse[CartOut](message="Cart item removed and cart deleted", data=out)
    return ApiResponse[CartOut](message="Cart item removed successfully", data=out)

@router.delete("/clear", response_model=ApiResponse[CartOut])
def clear_cart(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    removed = cart_store.clear_cart(db, current_user)
    write_log(
        db,
        user_id=current_user.id,
        action="CART_CLEAR",
        resource="cart",
        ip=client_ip(request),
        meta={"removed": removed},
    )
    return ApiResponse[CartOut](message="Your shopping cart has been cleared", data=CartOut())
