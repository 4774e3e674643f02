# storefront/api/routers/account.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    AccountProfileIn,
    AddressIn,
    AddressOut,
    CustomerOut,
    OrderTrackingOut,
    ProfileOut,
)
from storefront.services.address_service import AddressService
from storefront.services.order_service import OrderService
from storefront.services.profile_service import ProfileService

router = APIRouter(prefix="/account", tags=["account"])


@router.get("/orders", response_model=List[OrderTrackingOut])
def my_orders(user_id: str = Query(...), db: Session = Depends(get_db)):
    return OrderService(db).list_for_user(user_id)


@router.get("/orders/{order_id}", response_model=OrderTrackingOut)
def my_order(order_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    try:
        return OrderService(db).get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/profile", response_model=ProfileOut)
def my_profile(user_id: str = Query(...), db: Session = Depends(get_db)):
    return ProfileService(db).get_profile(user_id)


@router.post("/profile", response_model=CustomerOut)
def register_profile(payload: AccountProfileIn, db: Session = Depends(get_db)):
    return ProfileService(db).ensure_account_customer(
        user_id=payload.user_id,
        full_name=payload.full_name,
        email=payload.email,
        phone=payload.phone,
    )


@router.get("/addresses", response_model=List[AddressOut])
def list_addresses(user_id: str = Query(...), db: Session = Depends(get_db)):
    return AddressService(db).list_addresses(user_id)


@router.post("/addresses", response_model=AddressOut, status_code=201)
def add_address(payload: AddressIn, user_id: str = Query(...), db: Session = Depends(get_db)):
    try:
        return AddressService(db).add_address(
            user_id,
            payload.address,
            label=payload.label,
            make_default=payload.is_default,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/addresses/{address_id}", status_code=204)
def delete_address(address_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    try:
        AddressService(db).delete_address(user_id, address_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/addresses/{address_id}/default", response_model=AddressOut)
def set_default_address(address_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    try:
        return AddressService(db).set_default(user_id, address_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
