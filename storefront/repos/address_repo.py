# storefront/repos/address_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.errors import NotFoundError


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def get_addresses_by_user(self, user_id: int) -> list[AddressModel]:
        stmt = (
            select(AddressModel)
            .where(AddressModel.user_id == user_id)
            .order_by(AddressModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create_address(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def update_address(self, address_id: int, data: dict) -> AddressModel:
        address = self.get_address(address_id)
        if not address:
            raise NotFoundError("Address", address_id)
        for field, value in data.items():
            setattr(address, field, value)
        self.db.flush()
        return address

    def delete_address(self, address: AddressModel) -> None:
        self.db.delete(address)
        self.db.flush()

    def clear_default_except(self, user_id: int, keep_id: int) -> int:
        # single pass over the siblings, order independent
        result = self.db.execute(
            update(AddressModel)
            .where(AddressModel.user_id == user_id, AddressModel.id != keep_id)
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
