# artistconnect/routers/payment_pages.py
from fastapi import APIRouter, Depends

from artistconnect.core.config import get_settings
from artistconnect.repositories.client_storage_repo import ClientStorageRepository
from artistconnect.repositories.payment_context_repo import PaymentContextRepository
from artistconnect.schemas.payment import PaymentFailureRead, PaymentSuccessRead
from artistconnect.services.cart_service import CartStore, get_cart_store
from artistconnect.services.payment_pages import PaymentPagesService

settings = get_settings()

# Mounted at the site root: the provider redirects to these exact paths.
router = APIRouter(tags=["Payment Return"])

context_repo = PaymentContextRepository(
    ClientStorageRepository(), settings.PAYMENT_CONTEXT_KEY
)
service = PaymentPagesService(context_repo)


@router.get("/payment-success", response_model=PaymentSuccessRead)
def payment_success(
    code: str | None = None,
    state: str | None = None,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Landing page after a successful payment.

    Clears the cart. Reloading is harmless and shows the generic
    confirmation.

    Query params (optional):
      - code, state: present on a Stripe Connect OAuth return
    """
    return service.payment_success(cart, code=code, state=state)


@router.get("/payment-failure", response_model=PaymentFailureRead)
def payment_failure(
    error: str | None = None,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Landing page after a cancelled or declined payment.

    The cart is kept so the user can retry.

    Query params (optional):
      - error: present on a failed Stripe Connect OAuth return
    """
    return service.payment_failure(cart, error=error)
