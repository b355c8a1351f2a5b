# artistconnect/routers/checkout.py
import uuid

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlmodel import Session

from artistconnect.core.auth import get_commerce_client, require_auth
from artistconnect.core.client_profile import get_profile_id, get_request_origin
from artistconnect.core.commerce_client import CommerceClient
from artistconnect.core.config import get_settings
from artistconnect.database import get_session
from artistconnect.repositories.client_storage_repo import ClientStorageRepository
from artistconnect.repositories.payment_context_repo import PaymentContextRepository
from artistconnect.schemas.checkout import DonationCreate, SessionStatusRead
from artistconnect.services.cart_service import CartStore, get_cart_store
from artistconnect.services.checkout_service import CheckoutService

settings = get_settings()

router = APIRouter(tags=["Checkout"])

context_repo = PaymentContextRepository(
    ClientStorageRepository(), settings.PAYMENT_CONTEXT_KEY
)
service = CheckoutService(context_repo, settings.CHECKOUT_CURRENCY)


@router.post(
    "/checkout",
    status_code=status.HTTP_303_SEE_OTHER,
    dependencies=[Depends(require_auth)],
)
def checkout(
    request: Request,
    cart: CartStore = Depends(get_cart_store),
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """
    Start a payment-provider checkout for the whole cart.

    On success the response is a 303 redirect to the provider's hosted
    checkout page. The cart is not modified; it is cleared when the
    provider sends the browser back to /payment-success.

    Auth:
      - Signed-in callers only.
    """
    attempt = service.start_checkout(cart, commerce, get_request_origin(request))
    return RedirectResponse(attempt.redirect_url, status_code=status.HTTP_303_SEE_OTHER)


@router.post(
    "/donations",
    status_code=status.HTTP_303_SEE_OTHER,
    dependencies=[Depends(require_auth)],
)
def donate(
    payload: DonationCreate,
    request: Request,
    session: Session = Depends(get_session),
    profile_id: uuid.UUID = Depends(get_profile_id),
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """
    Start a checkout for a direct donation to an artist (minimum $1).

    Auth:
      - Signed-in callers only.
    """
    attempt = service.start_donation(
        session, profile_id, commerce, payload, get_request_origin(request)
    )
    return RedirectResponse(attempt.redirect_url, status_code=status.HTTP_303_SEE_OTHER)


@router.get(
    "/payment-status/{session_id}",
    response_model=SessionStatusRead,
    dependencies=[Depends(require_auth)],
)
def get_payment_status(
    session_id: str,
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """
    Outcome of a payment session (completed / failed), checked once.
    """
    return service.get_session_status(commerce, session_id)
