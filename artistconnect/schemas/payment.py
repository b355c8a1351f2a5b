# artistconnect/schemas/payment.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# What a payment was for. "cart" means a cart checkout whose contents were
# not a single kind; terminal pages render it with the generic copy.
PaymentKind = Literal["product", "gig", "music", "donation", "stripe-connect", "cart"]


class PaymentContext(BaseModel):
    """
    Session-scoped note about the payment in flight.

    Written right before redirecting to the payment provider and read by
    the terminal pages. Stored under the `paymentContext` key with the
    browser's camelCase field names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: PaymentKind
    product_id: str | None = Field(default=None, alias="productId")
    gig_id: str | None = Field(default=None, alias="gigId")
    music_id: str | None = Field(default=None, alias="musicId")
    artist_id: str | None = Field(default=None, alias="artistId")
    # Donation amount in cents.
    amount: int | None = None


class PageLink(BaseModel):
    label: str
    href: str


class PaymentSuccessRead(BaseModel):
    """Confirmation shown on the payment-success return path."""

    kind: PaymentKind | None
    title: str
    description: str
    note: str | None = None
    next_step: PageLink | None = None
    home: PageLink = PageLink(label="Back to Home", href="/")


class PaymentFailureRead(BaseModel):
    """Retry guidance shown on the payment-failure return path."""

    kind: PaymentKind | None
    title: str
    description: str
    reasons: list[str]
    retry: PageLink
    home: PageLink = PageLink(label="Back to Home", href="/")
