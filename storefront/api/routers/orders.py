# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_lock_service, get_session_id, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import InvalidStateError, LockConflictError, NotFoundError
from storefront.domain.schemas import OrderCreate, OrderDetailOut, OrderRead, OrderStatusIn
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, lock_service: LockService):
    return OrderService(db, lock_service=lock_service)


@router.get("/", response_model=list[OrderRead])
def list_orders(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return get_service(db, lock_service).list_orders(user.id)


@router.post("/", response_model=OrderRead, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Checkout: turns the caller's cart into an order.
    """
    svc = get_service(db, lock_service)
    try:
        return svc.checkout(user.id, session_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LockConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        detail = svc.get_order_detail(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if detail.order.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")
    return detail


@router.patch("/{order_id}/status", response_model=OrderRead, dependencies=[Depends(require_admin)])
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        return svc.update_order_status(order_id, payload.status.value)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e))
