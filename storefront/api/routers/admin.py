# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    CustomerOut,
    OrderOut,
    OrderStatusIn,
    PointsAdjustIn,
    StatsOut,
    TrackingStatusIn,
)
from storefront.domain.tracking import OrderStatus
from storefront.services.customer_service import CustomerService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/orders", response_model=List[OrderOut])
def list_orders(status: OrderStatus | None = Query(None), db: Session = Depends(get_db)):
    return OrderService(db).list_orders(status)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_status(order_id: str, payload: OrderStatusIn, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_status(order_id, payload.status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/orders/{order_id}/tracking", response_model=OrderOut)
def update_tracking(order_id: str, payload: TrackingStatusIn, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_tracking(order_id, payload.tracking_status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    try:
        OrderService(db).delete_order(order_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/orders")
def clear_orders(db: Session = Depends(get_db)):
    return {"deleted": OrderService(db).clear_orders()}


@router.get("/customers", response_model=List[CustomerOut])
def list_customers(search: str | None = Query(None), db: Session = Depends(get_db)):
    return CustomerService(db).list_customers(search)


@router.get("/customers/{customer_id}/orders", response_model=List[OrderOut])
def customer_orders(customer_id: str, db: Session = Depends(get_db)):
    try:
        return CustomerService(db).order_history(customer_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/customers/{customer_id}/points", response_model=CustomerOut)
def adjust_points(customer_id: str, payload: PointsAdjustIn, db: Session = Depends(get_db)):
    try:
        return CustomerService(db).adjust_points(customer_id, payload.amount)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_db)):
    return CustomerService(db).stats()
