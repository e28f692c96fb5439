# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_pos_user
from utils.cart import SaleCart, CartError
from models.users import User
from routes.products import get_tenant_product
from schemas.cart import CartState, CartAddItem, CartUpdateItem, CartRemoveItem, CartOut

# The cart lives on the client; each call applies one change and returns the result
router = APIRouter(prefix="/pos/cart", tags=["POS Cart"])


def _load_cart(payload: CartState) -> SaleCart:
    try:
        return SaleCart.from_lines(payload.lines)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))


def cart_to_out(cart: SaleCart) -> CartOut:
    return CartOut(lines=cart.to_dicts(), totals=cart.totals())


@router.post("/add", response_model=CartOut)
def add_to_cart(
    payload: CartAddItem,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_pos_user),
):
    cart = _load_cart(payload)
    product = get_tenant_product(db, current_user.tenant_id, payload.product_id)
    try:
        cart.add_product(product)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart_to_out(cart)


@router.post("/update", response_model=CartOut)
def update_cart_line(
    payload: CartUpdateItem,
    current_user: User = Depends(get_pos_user),
):
    cart = _load_cart(payload)
    try:
        cart.update_line(payload.line_id, payload.field, payload.value)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart_to_out(cart)


@router.post("/remove", response_model=CartOut)
def remove_cart_line(
    payload: CartRemoveItem,
    current_user: User = Depends(get_pos_user),
):
    cart = _load_cart(payload)
    cart.remove_line(payload.line_id)
    return cart_to_out(cart)


@router.post("/totals", response_model=CartOut)
def cart_totals(
    payload: CartState,
    current_user: User = Depends(get_pos_user),
):
    return cart_to_out(_load_cart(payload))
