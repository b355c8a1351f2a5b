# artistconnect/services/checkout_service.py
import enum
import json
import logging
import threading
import uuid
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator

from pydantic import ValidationError
from sqlmodel import Session

from artistconnect.core.commerce_client import CommerceApiError, CommerceClient
from artistconnect.core.errors import (
    CheckoutError,
    CheckoutInProgressError,
    EmptyCartError,
    InvalidDonationAmountError,
    ProviderNotConfiguredError,
    SessionCreationFailedError,
    SessionMissingRedirectError,
    SessionStatusUnavailableError,
)
from artistconnect.repositories.payment_context_repo import PaymentContextRepository
from artistconnect.schemas.cart import CartLineItem
from artistconnect.schemas.checkout import (
    CheckoutSession,
    DonationCreate,
    SessionStatusRead,
)
from artistconnect.schemas.payment import PaymentContext
from artistconnect.services.cart_service import CartStore
from artistconnect.services.line_items import build_checkout_line_items, to_minor_units

logger = logging.getLogger(__name__)

SUCCESS_PATH = "/payment-success"
FAILURE_PATH = "/payment-failure"

MIN_DONATION = Decimal("1")

# Field of PaymentContext that carries the item id, per cart kind.
_CONTEXT_ID_FIELD = {
    "product": "product_id",
    "gig": "gig_id",
    "music": "music_id",
}


class CheckoutState(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    REDIRECTING = "redirecting"
    FAILED = "failed"


# Allowed transitions of one checkout attempt.
_TRANSITIONS: dict[CheckoutState, set[CheckoutState]] = {
    CheckoutState.IDLE: {CheckoutState.VALIDATING},
    CheckoutState.VALIDATING: {CheckoutState.SUBMITTING, CheckoutState.FAILED},
    CheckoutState.SUBMITTING: {CheckoutState.REDIRECTING, CheckoutState.FAILED},
    CheckoutState.REDIRECTING: set(),
    CheckoutState.FAILED: set(),
}


class CheckoutAttempt:
    """
    One checkout attempt, from the click to the redirect.

    A REDIRECTING attempt is done as far as this service is concerned: the
    browser leaves for the payment provider and control only comes back on
    one of the two return paths, in a new request.
    """

    def __init__(self, profile_id: uuid.UUID):
        self.profile_id = profile_id
        self.state = CheckoutState.IDLE
        self.session: CheckoutSession | None = None
        self.error: CheckoutError | None = None

    def advance(self, new: CheckoutState) -> None:
        if new not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid checkout transition: {self.state.value} -> {new.value}")
        logger.debug("Checkout %s: %s -> %s", self.profile_id, self.state.value, new.value)
        self.state = new

    def fail(self, error: CheckoutError) -> CheckoutError:
        self.error = error
        self.advance(CheckoutState.FAILED)
        return error

    @property
    def redirect_url(self) -> str | None:
        return self.session.url if self.session else None


class InFlightGuard:
    """
    At most one checkout submission per client profile at a time.

    Guards against double clicks: a second submission while the first is
    still waiting on the backend is rejected instead of creating a second
    remote session.

    The lock lives in this process only. With several server workers each
    worker has its own guard, so two submissions that land on different
    workers are not de-duplicated.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active: set[uuid.UUID] = set()

    @contextmanager
    def hold(self, profile_id: uuid.UUID) -> Iterator[None]:
        with self._lock:
            if profile_id in self._active:
                raise CheckoutInProgressError()
            self._active.add(profile_id)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(profile_id)


def return_urls(origin: str) -> tuple[str, str]:
    """(success_url, cancel_url) for the given origin."""
    origin = origin.rstrip("/")
    return f"{origin}{SUCCESS_PATH}", f"{origin}{FAILURE_PATH}"


def parse_checkout_session(raw: Any) -> CheckoutSession:
    """
    Validate the backend's answer to a session-creating call.

    The backend returns the provider session as a JSON string (or, through
    some RPC paths, an already-decoded object). Anything without a usable
    `url` breaks the contract and is reported as a missing redirect.
    """
    try:
        if isinstance(raw, (str, bytes)):
            return CheckoutSession.model_validate_json(raw)
        if isinstance(raw, dict):
            return CheckoutSession.model_validate(raw)
    except ValidationError as e:
        logger.error("Checkout session response rejected: %s", e)
        raise SessionMissingRedirectError()

    logger.error("Checkout session response has unexpected type %s", type(raw).__name__)
    raise SessionMissingRedirectError()


def context_for_cart(items: list[CartLineItem]) -> PaymentContext:
    """
    Payment context describing a cart checkout.

    A cart of a single kind is recorded as that kind (and, for a single
    row, with that row's id so a failed payment can link back to it).
    Mixed carts are recorded as "cart".
    """
    kinds = {it.kind for it in items}
    if len(kinds) != 1:
        return PaymentContext(type="cart")

    kind = kinds.pop()
    if len(items) == 1:
        return PaymentContext(type=kind, **{_CONTEXT_ID_FIELD[kind]: items[0].id})
    return PaymentContext(type=kind)


class CheckoutService:
    """
    Turns a cart (or a donation) into a payment-provider session.

    Responsibilities:
      - local validation before any network call (empty cart, line items,
        donation minimum)
      - provider-configured precondition, with an admin-specific message
      - one create-session call per attempt; no automatic retries
      - contract check on the returned session
      - recording the payment context read by the terminal pages

    The cart is never modified here. It is cleared by the payment-success
    page only.
    """

    def __init__(
        self,
        context_repo: PaymentContextRepository,
        currency: str,
        guard: InFlightGuard | None = None,
    ):
        self.context_repo = context_repo
        self.currency = currency
        self.guard = guard or InFlightGuard()

    # ---- internal helpers ----

    def _ensure_provider_configured(
        self, attempt: CheckoutAttempt, commerce: CommerceClient
    ) -> None:
        try:
            configured = commerce.is_stripe_configured()
        except CommerceApiError as e:
            raise attempt.fail(SessionCreationFailedError(e.message))
        if configured:
            return

        try:
            is_admin = commerce.is_caller_admin()
        except CommerceApiError as e:
            logger.warning("Admin lookup failed, using the user message: %s", e)
            is_admin = False
        logger.warning("Checkout blocked: payment provider not configured")
        raise attempt.fail(ProviderNotConfiguredError(is_admin))

    def _submit(self, attempt: CheckoutAttempt, call) -> CheckoutSession:
        attempt.advance(CheckoutState.SUBMITTING)
        try:
            raw = call()
        except CommerceApiError as e:
            logger.error("Checkout error for profile %s: %s", attempt.profile_id, e)
            raise attempt.fail(SessionCreationFailedError(e.message))

        try:
            session = parse_checkout_session(raw)
        except SessionMissingRedirectError as e:
            raise attempt.fail(e)

        attempt.session = session
        attempt.advance(CheckoutState.REDIRECTING)
        return session

    # ---- public operations ----

    def start_checkout(
        self,
        cart: CartStore,
        commerce: CommerceClient,
        origin: str,
    ) -> CheckoutAttempt:
        """
        Create a checkout session for the whole cart.

        Steps:
          1. Reject an empty cart (no network call).
          2. Validate and map every row to a checkout line item.
          3. Require a configured payment provider.
          4. Submit items + return URLs in one call.
          5. Validate the session; record the payment context.

        Returns:
            The attempt in REDIRECTING state; `attempt.redirect_url` is
            where the browser goes next.

        Raises:
            CheckoutError subclasses; the cart is left untouched.
        """
        attempt = CheckoutAttempt(cart.profile_id)
        with self.guard.hold(cart.profile_id):
            attempt.advance(CheckoutState.VALIDATING)

            items = cart.items
            if not items:
                raise attempt.fail(EmptyCartError())

            try:
                line_items = build_checkout_line_items(items, self.currency)
            except CheckoutError as e:
                raise attempt.fail(e)

            self._ensure_provider_configured(attempt, commerce)

            success_url, cancel_url = return_urls(origin)
            session = self._submit(
                attempt,
                lambda: commerce.create_checkout_session(line_items, success_url, cancel_url),
            )

            self.context_repo.set(cart.session, cart.profile_id, context_for_cart(items))
            logger.info(
                "Checkout session %s created for profile %s (%d line items)",
                session.id,
                cart.profile_id,
                len(line_items),
            )
            return attempt

    def start_donation(
        self,
        session: Session,
        profile_id: uuid.UUID,
        commerce: CommerceClient,
        payload: DonationCreate,
        origin: str,
    ) -> CheckoutAttempt:
        """
        Create a checkout session for a direct donation to an artist.

        Raises:
            InvalidDonationAmountError: amount below $1 (no network call).
            CheckoutError subclasses for the remote part.
        """
        attempt = CheckoutAttempt(profile_id)
        with self.guard.hold(profile_id):
            attempt.advance(CheckoutState.VALIDATING)
            if payload.amount < MIN_DONATION:
                raise attempt.fail(InvalidDonationAmountError())

            amount_in_cents = to_minor_units(payload.amount)
            self._ensure_provider_configured(attempt, commerce)

            success_url, cancel_url = return_urls(origin)
            checkout_session = self._submit(
                attempt,
                lambda: commerce.donate_to_artist(
                    payload.artist_id, amount_in_cents, success_url, cancel_url
                ),
            )

            self.context_repo.set(
                session,
                profile_id,
                PaymentContext(
                    type="donation",
                    artist_id=payload.artist_id,
                    amount=amount_in_cents,
                ),
            )
            logger.info(
                "Donation session %s created for artist %s (%d cents)",
                checkout_session.id,
                payload.artist_id,
                amount_in_cents,
            )
            return attempt

    def get_session_status(
        self, commerce: CommerceClient, session_id: str
    ) -> SessionStatusRead:
        """
        Ask the backend once for the outcome of a payment session.

        Accepted shapes:
          {"completed": {"response": ..., "userPrincipal": ...}}
          {"failed": {"error": ...}}
        optionally tagged with "__kind__", or the same as a JSON string.
        """
        try:
            raw = commerce.get_stripe_session_status(session_id)
        except CommerceApiError as e:
            raise SessionStatusUnavailableError(e.message)

        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError:
                raw = None

        if isinstance(raw, dict):
            completed = raw.get("completed")
            if isinstance(completed, dict):
                return SessionStatusRead(
                    session_id=session_id,
                    status="completed",
                    response=completed.get("response"),
                    user_principal=completed.get("userPrincipal"),
                )
            failed = raw.get("failed")
            if isinstance(failed, dict):
                return SessionStatusRead(
                    session_id=session_id,
                    status="failed",
                    error=failed.get("error"),
                )

        logger.error("Unexpected payment status for session %s: %r", session_id, raw)
        raise SessionStatusUnavailableError("Unexpected payment status response")
