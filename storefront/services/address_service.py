# storefront/services/address_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import AddressCreate, AddressUpdate
from storefront.repos.address_repo import AddressRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    """
    Address book of a user.
    At most one address per user carries is_default.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = AddressRepo(db)

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.repo.get_address(address_id)

    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.get_addresses_by_user(user_id)

    def create_address(self, user_id: int, payload: AddressCreate) -> AddressModel:
        address = self.repo.create_address(
            AddressModel(user_id=user_id, **payload.model_dump())
        )

        if address.is_default:
            cleared = self.repo.clear_default_except(user_id, address.id)
            logger.info(f"Address {address.id} is now default for user {user_id}, cleared {cleared} siblings")

        self.db.commit()
        return address

    def update_address(self, address_id: int, payload: AddressUpdate) -> AddressModel:
        patch = payload.model_dump(exclude_unset=True, exclude_none=True)
        address = self.repo.update_address(address_id, patch)

        if patch.get("is_default"):
            self.repo.clear_default_except(address.user_id, address.id)
            logger.info(f"Address {address.id} is now default for user {address.user_id}")

        self.db.commit()
        return address

    def delete_address(self, address_id: int) -> None:
        address = self.repo.get_address(address_id)
        if not address:
            raise NotFoundError("Address", address_id)

        user_id = address.user_id
        was_default = address.is_default
        self.repo.delete_address(address)

        if was_default:
            remaining = self.repo.get_addresses_by_user(user_id)
            if remaining:
                # any survivor will do, the oldest one is picked
                promoted = remaining[0]
                promoted.is_default = True
                logger.info(f"Promoted address {promoted.id} to default for user {user_id}")

        self.db.commit()
