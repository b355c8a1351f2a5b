# artistconnect/services/line_items.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from artistconnect.core.errors import InvalidLineItemsError
from artistconnect.schemas.cart import CartLineItem
from artistconnect.schemas.checkout import CheckoutLineItem

CENTS = Decimal(100)


def to_minor_units(amount: Decimal) -> int:
    """
    Convert a major-unit amount (dollars) to integer cents.

    Rounds half up (away from zero for the non-negative prices we handle):
        9.99   -> 999
        0.125  -> 13
        1.005  -> 101
    Decimal arithmetic keeps canonical inputs exact.
    """
    return int((amount * CENTS).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_checkout_line_item(item: CartLineItem, currency: str) -> CheckoutLineItem:
    return CheckoutLineItem(
        product_name=item.name,
        product_description=item.description or "",
        price_in_cents=to_minor_units(item.price),
        quantity=item.quantity,
        currency=currency,
    )


def build_checkout_line_items(
    items: Iterable[CartLineItem], currency: str
) -> list[CheckoutLineItem]:
    """
    Map cart rows to checkout line items.

    Every row is checked before anything is built so the user sees all
    problems at once:
      - name must not be blank
      - price must be >= 0
      - quantity must be >= 1

    Raises:
        InvalidLineItemsError: listing each offending row id and reason.
    """
    items = list(items)
    errors: list[dict[str, str]] = []

    for it in items:
        if not it.name.strip():
            errors.append({"id": it.id, "reason": "Missing product name"})
        elif it.price < 0:
            errors.append({"id": it.id, "reason": "Invalid price in cart"})
        elif it.quantity < 1:
            errors.append({"id": it.id, "reason": "Invalid quantity in cart"})

    if errors:
        raise InvalidLineItemsError(errors)

    return [to_checkout_line_item(it, currency) for it in items]
