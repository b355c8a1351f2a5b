# artistconnect/routers/admin_stripe.py
from fastapi import APIRouter, Depends, HTTPException, status

from artistconnect.core.auth import get_commerce_client, require_admin
from artistconnect.core.commerce_client import CommerceApiError, CommerceClient
from artistconnect.schemas.checkout import StripeConfigRead, StripeConfigurationUpdate

router = APIRouter(prefix="/admin/stripe", tags=["Admin Payments"])


@router.get(
    "",
    response_model=StripeConfigRead,
    dependencies=[Depends(require_admin)],
)
def get_stripe_status(commerce: CommerceClient = Depends(get_commerce_client)):
    """
    Whether the payment provider is configured on the platform.

    Only accessible to platform admins.
    """
    try:
        return StripeConfigRead(configured=commerce.is_stripe_configured())
    except CommerceApiError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)


@router.put(
    "",
    response_model=StripeConfigRead,
    dependencies=[Depends(require_admin)],
)
def set_stripe_configuration(
    payload: StripeConfigurationUpdate,
    commerce: CommerceClient = Depends(get_commerce_client),
):
    """
    Save the payment provider configuration.

    Clears the cached "configured" flag so checkout sees the change on the
    next request.
    """
    try:
        commerce.set_stripe_configuration(payload)
        return StripeConfigRead(configured=commerce.is_stripe_configured())
    except CommerceApiError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
