# artistconnect/routers/cart.py
from fastapi import APIRouter, Depends

from artistconnect.schemas.cart import CartLineItemCreate, CartQuantityUpdate, CartSummary
from artistconnect.services.cart_service import CartStore, get_cart_store

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
def get_my_cart(cart: CartStore = Depends(get_cart_store)):
    """
    Get the current client profile's cart summary.

    Auth:
      - None. Guests keep a cart too; checkout is what needs a login.
    """
    return cart.summary()


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartLineItemCreate,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Add one unit of a product, gig or music track to the cart.

    Adding an id that is already in the cart bumps its quantity by one and
    keeps the price captured the first time.

    Returns the updated cart summary.
    """
    cart.add_item(payload)
    return cart.summary()


@router.patch("/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: str,
    payload: CartQuantityUpdate,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Set the quantity of an item in the cart.

    A quantity of 0 or less removes the item.

    Returns the updated cart summary.
    """
    cart.update_quantity(item_id, payload.quantity)
    return cart.summary()


@router.delete("/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: str,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Remove an item from the cart (no-op if it is not there).

    Returns the updated cart summary.
    """
    cart.remove_item(item_id)
    return cart.summary()


@router.delete("", response_model=CartSummary)
def clear_cart(cart: CartStore = Depends(get_cart_store)):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    cart.clear_cart()
    return cart.summary()
