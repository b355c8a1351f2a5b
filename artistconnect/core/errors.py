# artistconnect/core/errors.py
"""
Checkout errors surfaced to the user.

Every error here is recoverable: it is raised before the cart is touched,
so the user can go back to the cart and retry. Services raise them
directly; FastAPI renders them like any other HTTPException, with
`detail` as the user-facing message.

Hierarchy:

    CheckoutError (HTTPException)
    ├── EmptyCartError                 400  nothing to buy
    ├── InvalidLineItemsError          400  cart rows missing required data
    ├── InvalidDonationAmountError     400  donation below the minimum
    ├── CheckoutInProgressError        409  duplicate submission
    ├── ProviderNotConfiguredError     503  payment provider not set up
    ├── SessionCreationFailedError     502  remote call failed
    ├── SessionMissingRedirectError    502  remote returned no session URL
    └── SessionStatusUnavailableError  502  status lookup failed
"""
from typing import Any

from fastapi import HTTPException, status

GENERIC_CHECKOUT_FAILURE = "Failed to create checkout session. Please try again."


class CheckoutError(HTTPException):
    """
    Base class for checkout errors.

    Attributes:
        code: stable machine-readable name, sent as the X-Error-Code header
    """

    code = "checkout_error"

    def __init__(self, status_code: int, detail: Any):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers={"X-Error-Code": self.code},
        )


class EmptyCartError(CheckoutError):
    code = "empty_cart"

    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Your cart is empty")


class InvalidLineItemsError(CheckoutError):
    code = "invalid_line_items"

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            {"message": "Cart validation failed", "items": errors},
        )
        self.errors = errors


class InvalidDonationAmountError(CheckoutError):
    code = "invalid_donation_amount"

    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "Please enter a valid amount (minimum $1)",
        )


class CheckoutInProgressError(CheckoutError):
    code = "checkout_in_progress"

    def __init__(self):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "A checkout is already in progress",
        )


class ProviderNotConfiguredError(CheckoutError):
    """
    The payment provider has not been configured on the platform.

    Administrators get a hint pointing at the admin settings; everyone else
    gets a generic unavailability message.
    """

    code = "provider_not_configured"

    ADMIN_MESSAGE = (
        "Stripe is not configured. "
        "Please configure Stripe in the admin settings to enable checkout."
    )
    USER_MESSAGE = "Stripe is not configured. Please contact the administrator."

    def __init__(self, is_admin: bool):
        super().__init__(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            self.ADMIN_MESSAGE if is_admin else self.USER_MESSAGE,
        )
        self.is_admin = is_admin


class SessionCreationFailedError(CheckoutError):
    code = "session_creation_failed"

    def __init__(self, reason: str | None = None):
        super().__init__(
            status.HTTP_502_BAD_GATEWAY,
            reason or GENERIC_CHECKOUT_FAILURE,
        )
        self.reason = reason


class SessionMissingRedirectError(CheckoutError):
    """The backend reported success but gave no session URL to redirect to."""

    code = "session_missing_redirect"

    def __init__(self):
        super().__init__(status.HTTP_502_BAD_GATEWAY, "Stripe session missing url")


class SessionStatusUnavailableError(CheckoutError):
    code = "session_status_unavailable"

    def __init__(self, reason: str | None = None):
        super().__init__(
            status.HTTP_502_BAD_GATEWAY,
            reason or "Unable to retrieve payment status",
        )
        self.reason = reason
