# artistconnect/schemas/checkout.py
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckoutLineItem(BaseModel):
    """
    Wire shape of one line item sent to `create_checkout_session`.

    Serialized by alias:
        {"productName", "productDescription", "priceInCents",
         "quantity", "currency"}
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    product_name: str = Field(alias="productName", min_length=1)
    product_description: str = Field(default="", alias="productDescription")
    price_in_cents: int = Field(alias="priceInCents", ge=0)
    quantity: int = Field(ge=1)
    currency: str = Field(min_length=3, max_length=3)


class CheckoutSession(BaseModel):
    """
    Checkout session returned by the Remote Commerce API.

    The backend answers with a JSON document `{"id": ..., "url": ...}`.
    A blank `url` fails validation; the orchestrator reports that as a
    missing redirect, never as a generic failure.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    url: str

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty")
        return v


class DonationCreate(BaseModel):
    """
    Payload for a direct donation to an artist.

    `amount` is in major units (dollars); the minimum is checked by the
    orchestrator so the user sees the donation-specific message.
    """

    artist_id: str = Field(min_length=1)
    amount: Decimal


class StripeConfigurationUpdate(BaseModel):
    """Admin payload forwarded to `set_stripe_configuration`."""

    model_config = ConfigDict(populate_by_name=True)

    secret_key: str = Field(alias="secretKey", min_length=1)
    allowed_countries: list[str] = Field(alias="allowedCountries", default_factory=list)


class StripeConfigRead(BaseModel):
    configured: bool


class SessionStatusRead(BaseModel):
    """
    Outcome of a payment session as reported by the backend.

      - completed: `response` is the backend's raw payload,
        `user_principal` the buyer when known
      - failed: `error` carries the provider's reason
    """

    session_id: str
    status: Literal["completed", "failed"]
    response: str | None = None
    user_principal: str | None = None
    error: str | None = None
