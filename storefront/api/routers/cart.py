# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_optional_user, get_session_id
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import InvalidStateError, NotFoundError
from storefront.domain.schemas import CartItemIn, CartItemQuantityIn, CartItemRead, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


def _user_id(user: UserModel | None) -> int | None:
    return user.id if user else None


@router.get("/", response_model=CartOut)
def get_cart(
    user: UserModel | None = Depends(get_optional_user),
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    cart = svc.resolve_cart(_user_id(user), session_id)
    return svc.get_cart_view(cart)


@router.post("/items", response_model=CartItemRead, status_code=201)
def add_item(
    payload: CartItemIn,
    user: UserModel | None = Depends(get_optional_user),
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    cart = svc.resolve_cart(_user_id(user), session_id)
    try:
        return svc.add_item(cart.id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/items/{item_id}", response_model=CartItemRead)
def update_item(
    item_id: int,
    payload: CartItemQuantityIn,
    user: UserModel | None = Depends(get_optional_user),
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    cart = svc.resolve_cart(_user_id(user), session_id)
    try:
        return svc.update_item_quantity(cart.id, item_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/items/{item_id}", status_code=204)
def remove_item(
    item_id: int,
    user: UserModel | None = Depends(get_optional_user),
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    cart = svc.resolve_cart(_user_id(user), session_id)
    try:
        svc.remove_item(cart.id, item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
