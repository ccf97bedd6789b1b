from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import AddressCreate, AddressRead, AddressUpdate
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


def _get_owned(svc: AddressService, address_id: int, user: UserModel):
    address = svc.get_address(address_id)
    if not address:
        raise HTTPException(status_code=404, detail="Address not found")
    if address.user_id != user.id:
        raise HTTPException(status_code=403, detail="Access denied")
    return address


@router.get("/", response_model=list[AddressRead])
def list_addresses(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return AddressService(db).list_addresses(user.id)


@router.post("/", response_model=AddressRead, status_code=201)
def create_address(
    payload: AddressCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AddressService(db).create_address(user.id, payload)


@router.put("/{address_id}", response_model=AddressRead)
def update_address(
    address_id: int,
    payload: AddressUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = AddressService(db)
    _get_owned(svc, address_id, user)
    return svc.update_address(address_id, payload)


@router.delete("/{address_id}", status_code=204)
def delete_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = AddressService(db)
    _get_owned(svc, address_id, user)
    svc.delete_address(address_id)
