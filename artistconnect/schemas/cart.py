# artistconnect/schemas/cart.py
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Closed set of purchasable entity kinds. The kind drives grouping and the
# confirmation copy only; it never changes how a price is computed.
ItemKind = Literal["product", "gig", "music"]

# 12 significant digits survive a round trip through an IEEE double.
MAX_PRICE_DIGITS = 12


class CartLineItemBase(BaseModel):
    """
    Fields shared by the add-to-cart payload and the stored line item.

    Aliases match the persisted cart record (`type`, `imageUrl`), so the
    same model reads a stored record and an API payload.

    Validation rules:
      - id and name cannot be empty or whitespace
      - price is in major currency units (dollars), must be >= 0, and
        has at most 2 decimal places and 12 digits in total, so the JSON
        number in the persisted record reads back to the same value
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: ItemKind = Field(alias="type")
    id: str
    name: str
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=MAX_PRICE_DIGITS, decimal_places=2)
    image_url: str | None = Field(default=None, alias="imageUrl")
    artist: str | None = None
    subcategory: str | None = None

    @field_validator("id", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        # Persisted as a JSON number, same as the browser record.
        return float(price)


class CartLineItemCreate(CartLineItemBase):
    """
    Payload for adding to cart.

    Quantity is not accepted: each add contributes exactly one unit.
    """

    pass


class CartLineItem(CartLineItemBase):
    """
    One distinct purchasable entry in the cart.

    `price` is a snapshot taken when the item was first added; re-adding
    the same id only bumps `quantity`.
    """

    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class CartQuantityUpdate(BaseModel):
    """
    Payload for setting the quantity of a cart item.

    Zero or negative removes the item.
    """

    quantity: int


class CartItemRead(BaseModel):
    """
    Read model for a single cart row, including line_total.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: ItemKind = Field(serialization_alias="type")
    id: str
    name: str
    description: str
    price: Decimal
    quantity: int
    image_url: str | None = Field(default=None, serialization_alias="imageUrl")
    artist: str | None = None
    subcategory: str | None = None
    line_total: Decimal


class CartSummary(BaseModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    total_price: Decimal
