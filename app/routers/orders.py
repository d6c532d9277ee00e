from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.errors import raise_for_failure
from app.models.order import OrderStatus
from app.schemas.order import OrderCreate, OrderResponse, OrderStatusUpdate
from app.security import require_admin
from app.services.notifications import Notifier, get_notifier
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=201)
def create_order(payload: OrderCreate, background_tasks: BackgroundTasks,
                 db: Session = Depends(get_db), notifier: Notifier = Depends(get_notifier)):
    result = raise_for_failure(OrderService.create_order(db, payload, notifier, background_tasks))
    return result.data


@router.get("", response_model=List[OrderResponse], dependencies=[Depends(require_admin)])
def list_orders(status: Optional[OrderStatus] = None, skip: int = 0, limit: int = 100,
                db: Session = Depends(get_db)):
    return OrderService.get_orders(db, status, skip, limit)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = OrderService.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.patch("/{order_id}/status", response_model=OrderResponse, dependencies=[Depends(require_admin)])
def update_order_status(order_id: int, payload: OrderStatusUpdate, background_tasks: BackgroundTasks,
                        db: Session = Depends(get_db), notifier: Notifier = Depends(get_notifier)):
    result = raise_for_failure(
        OrderService.update_order_status(db, order_id, payload.status, notifier, background_tasks)
    )
    return result.data
