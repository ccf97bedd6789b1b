from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import ValidationConflictError
from storefront.domain.schemas import UserCreate
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserModel:
        if self.repo.get_user_by_username(payload.username):
            raise ValidationConflictError("Username already taken")
        if self.repo.get_user_by_email(payload.email):
            raise ValidationConflictError("Email already registered")

        # is_admin is only ever set by the auth side
        user = UserModel(
            username=payload.username,
            password=payload.password,
            email=payload.email,
            full_name=payload.full_name,
            phone=payload.phone,
            is_admin=False,
        )
        created = self.repo.create_user(user)
        self.db.commit()

        logger.info(f"Created user {created.id} ({created.username})")
        return created

    def get_user(self, user_id: int) -> UserModel | None:
        return self.repo.get_user(user_id)

    def get_user_by_username(self, username: str) -> UserModel | None:
        return self.repo.get_user_by_username(username)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.repo.get_user_by_email(email)
