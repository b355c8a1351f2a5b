# artistconnect/services/payment_pages.py
import logging

from artistconnect.repositories.payment_context_repo import PaymentContextRepository
from artistconnect.schemas.payment import (
    PageLink,
    PaymentContext,
    PaymentFailureRead,
    PaymentSuccessRead,
)
from artistconnect.services.cart_service import CartStore

logger = logging.getLogger(__name__)

# ---- success copy, per payment kind ----

_SUCCESS_TITLES = {
    "product": "Order Confirmed!",
    "music": "Music Purchase Complete!",
    "gig": "Gig Booked Successfully!",
    "donation": "Thank You for Your Support!",
    "stripe-connect": "Stripe Account Connected!",
}

_SUCCESS_DESCRIPTIONS = {
    "product": (
        "Your order has been confirmed and is being processed. "
        "You will receive a confirmation email shortly."
    ),
    "music": (
        "Your music purchase is complete. "
        "You can now access your music in your library."
    ),
    "gig": (
        "Your gig booking has been confirmed. "
        "The artist will contact you soon to discuss the details."
    ),
    "stripe-connect": (
        "Your Stripe account has been successfully connected. "
        "You can now receive payments directly from customers."
    ),
}

_SUCCESS_NOTES = {
    "product": "A portion of your purchase goes directly to the artist who created this product.",
    "donation": "100% of your donation goes directly to the artist to support their creative work.",
    "stripe-connect": (
        "You'll now receive 90% of all sales directly to your Stripe account, "
        "with 10% going to platform fees."
    ),
}

_SUCCESS_NEXT_STEPS = {
    "product": PageLink(label="View My Orders", href="/account/products"),
    "music": PageLink(label="Go to Music Library", href="/music"),
    "gig": PageLink(label="View My Bookings", href="/bookings"),
    "stripe-connect": PageLink(label="Go to Dashboard", href="/account/dashboard"),
}

GENERIC_SUCCESS_TITLE = "Payment Successful!"
GENERIC_SUCCESS_DESCRIPTION = (
    "Your payment has been processed successfully. Thank you for your purchase!"
)

# ---- failure copy ----

PAYMENT_FAILURE_REASONS = [
    "Insufficient funds in your account",
    "Incorrect card details or expired card",
    "Payment declined by your bank",
    "Network connection issues",
]

CONNECT_FAILURE_REASONS = [
    "Connection process was cancelled",
    "Invalid or incomplete account information",
    "Account verification issues",
    "Network connection problems",
]


def _donation_description(context: PaymentContext) -> str:
    if context.amount:
        return (
            f"Your donation of ${context.amount / 100:.2f} has been received. "
            "Thank you for supporting this artist!"
        )
    return "Your donation has been received. Thank you for supporting this artist!"


def _classify_cart(cart: CartStore) -> PaymentContext | None:
    """Single-kind carts get the kind's copy; mixed or empty carts get none."""
    kinds = cart.kinds()
    if len(kinds) != 1:
        return None
    return PaymentContext(type=kinds.pop())


def _retry_link(context: PaymentContext | None) -> PageLink:
    kind = context.type if context else None

    if kind == "product":
        href = f"/store/{context.product_id}" if context.product_id else "/store"
        return PageLink(label="Return to Product", href=href)
    if kind == "music":
        return PageLink(label="Return to Music Library", href="/music")
    if kind == "gig":
        href = f"/gigs/{context.gig_id}" if context.gig_id else "/"
        return PageLink(label="Return to Gig", href=href)
    if kind == "donation":
        href = f"/artists/{context.artist_id}" if context.artist_id else "/"
        return PageLink(label="Try Donation Again", href=href)
    if kind == "stripe-connect":
        return PageLink(label="Try Connecting Again", href="/stripe-connect")
    if kind == "cart":
        return PageLink(label="Return to Cart", href="/cart")
    return PageLink(label="Try Again", href="/")


class PaymentPagesService:
    """
    The two terminal pages the payment provider sends the browser back to.

      - success: classify what was bought, then clear the cart
      - failure: leave the cart alone and point the user back to retry

    Both are safe to reload. A reloaded success page finds an empty cart
    and no context and shows the generic confirmation.
    """

    def __init__(self, context_repo: PaymentContextRepository):
        self.context_repo = context_repo

    def payment_success(
        self,
        cart: CartStore,
        code: str | None = None,
        state: str | None = None,
    ) -> PaymentSuccessRead:
        """
        Build the confirmation and clear the cart.

        Context resolution order:
          1. `code` + `state` query params => Stripe Connect OAuth return
          2. stored payment context (consumed)
          3. kind of the cart contents, when they are a single kind
        """
        stored = self.context_repo.get(cart.session, cart.profile_id)
        if stored is not None:
            self.context_repo.remove(cart.session, cart.profile_id)

        if code and state:
            context: PaymentContext | None = PaymentContext(type="stripe-connect")
        elif stored is not None and stored.type != "cart":
            context = stored
        else:
            context = _classify_cart(cart)

        cart.clear_cart()

        kind = context.type if context else None
        if kind == "donation":
            description = _donation_description(context)
        else:
            description = _SUCCESS_DESCRIPTIONS.get(kind, GENERIC_SUCCESS_DESCRIPTION)

        next_step = _SUCCESS_NEXT_STEPS.get(kind)
        if kind == "donation" and context.artist_id:
            next_step = PageLink(
                label="View Artist Profile", href=f"/artists/{context.artist_id}"
            )

        logger.info("Payment success for profile %s (kind=%s)", cart.profile_id, kind)
        return PaymentSuccessRead(
            kind=kind,
            title=_SUCCESS_TITLES.get(kind, GENERIC_SUCCESS_TITLE),
            description=description,
            note=_SUCCESS_NOTES.get(kind),
            next_step=next_step,
        )

    def payment_failure(
        self,
        cart: CartStore,
        error: str | None = None,
    ) -> PaymentFailureRead:
        """
        Build retry guidance. The cart and the stored context are kept so
        the user can try again with the same contents.
        """
        if error:
            context: PaymentContext | None = PaymentContext(type="stripe-connect")
        else:
            context = self.context_repo.get(cart.session, cart.profile_id)

        kind = context.type if context else None
        logger.info("Payment failure for profile %s (kind=%s)", cart.profile_id, kind)

        if kind == "stripe-connect":
            return PaymentFailureRead(
                kind=kind,
                title="Connection Failed",
                description=(
                    "We were unable to connect your Stripe account. This could be "
                    "due to cancellation or an error during the connection process."
                ),
                reasons=CONNECT_FAILURE_REASONS,
                retry=_retry_link(context),
            )

        return PaymentFailureRead(
            kind=kind,
            title="Payment Failed",
            description=(
                "We were unable to process your payment. "
                "Please try again or use a different payment method."
            ),
            reasons=PAYMENT_FAILURE_REASONS,
            retry=_retry_link(context),
        )
