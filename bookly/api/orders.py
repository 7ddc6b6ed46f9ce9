"""
Order CRUD routes.

Cancellation is a status change; orders are never removed.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .deps import get_store
from ..data import analytics
from ..data.database import get_db
from ..data.models import Order, OrderStatus
from ..data.store import SupportStore
from ..schemas.order_models import OrderCreate, OrderOut, OrderQuery, OrderUpdate
from ..utils.errors import InputError, InvalidOperation, NotFoundError

router = APIRouter(prefix="/api/orders", tags=["Orders"])


def _load(store: SupportStore, order_pk: int) -> Order:
    order = store.get_order(order_pk)
    if order is None:
        raise NotFoundError("Order not found")
    return order


@router.post("", status_code=201)
def create_order(body: OrderCreate, store: SupportStore = Depends(get_store)):
    order = Order(**body.model_dump(exclude_none=True))
    store.save(order)
    return {"success": True, "data": OrderOut.model_validate(order)}


@router.get("")
def list_orders(
    customer_email: Optional[str] = None,
    order_id: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=500),
    skip: int = Query(0, ge=0),
    sort: str = "-order_date",
    store: SupportStore = Depends(get_store),
):
    try:
        params = OrderQuery(
            email_contains=customer_email,
            order_id_contains=order_id,
            status=status,
            from_date=from_date,
            to_date=to_date,
            limit=limit,
            skip=skip,
            sort=sort,
        )
    except ValidationError as e:
        raise InputError("Invalid order query", details=str(e)) from e

    orders, total = store.list_orders(params)
    return {
        "success": True,
        "data": [OrderOut.model_validate(o) for o in orders],
        "pagination": {
            "total": total,
            "limit": limit,
            "skip": skip,
            "hasMore": total > skip + len(orders),
        },
    }


@router.get("/stats/overview")
def order_stats(db: Session = Depends(get_db)):
    return {"success": True, "data": analytics.order_overview(db)}


@router.get("/{order_pk}")
def get_order(order_pk: int, store: SupportStore = Depends(get_store)):
    return {"success": True, "data": OrderOut.model_validate(_load(store, order_pk))}


@router.put("/{order_pk}")
def update_order(order_pk: int, body: OrderUpdate, store: SupportStore = Depends(get_store)):
    order = _load(store, order_pk)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(order, field, value)
    store.save(order)
    return {"success": True, "data": OrderOut.model_validate(order)}


@router.delete("/{order_pk}")
def cancel_order(order_pk: int, store: SupportStore = Depends(get_store)):
    order = _load(store, order_pk)
    if not order.can_be_cancelled():
        raise InvalidOperation("Order cannot be cancelled in current status")
    order.status = OrderStatus.cancelled
    store.save(order)
    return {"success": True, "data": OrderOut.model_validate(order)}
