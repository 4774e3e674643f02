# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_lock_service, get_notification_service
from storefront.data.database import get_db
from storefront.domain.errors import (
    CheckoutValidationError,
    CheckoutInProgressError,
    OrderPlacementError,
)
from storefront.domain.schemas import CheckoutIn, CheckoutOut, CheckoutStep
from storefront.services.cart_store import CartStore
from storefront.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("", response_model=CheckoutOut)
def checkout(
    payload: CheckoutIn,
    db: Session = Depends(get_db),
    lock_service=Depends(get_lock_service),
    notification_service=Depends(get_notification_service),
):
    """
    Places an order from the client's cart snapshot.
    A card payment answers with step=card_details until card_confirmed is sent.
    """
    # the cart stays on the client, the server only sees this request's copy
    cart = CartStore()
    cart.save(payload.lines)

    svc = CheckoutService(
        db=db,
        cart=cart,
        lock_service=lock_service,
        notification_service=notification_service,
    )
    try:
        result = svc.submit(payload.buyer, payload.payment_method, payload.user_id)
        if result.step == CheckoutStep.CARD_DETAILS and payload.card_confirmed:
            result = svc.confirm_payment()
        return result
    except CheckoutValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except CheckoutInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OrderPlacementError as e:
        raise HTTPException(status_code=503, detail=str(e))
