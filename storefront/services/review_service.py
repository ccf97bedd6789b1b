from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel
from storefront.domain.errors import ValidationConflictError
from storefront.domain.schemas import ReviewCreate, ReviewView
from storefront.repos.review_repo import ReviewRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepo(db)

    def get_user_review(self, user_id: int, product_id: int) -> ReviewModel | None:
        return self.repo.get_user_product_review(user_id, product_id)

    def create_review(self, user_id: int, product_id: int, payload: ReviewCreate) -> ReviewModel:
        # one review per user and product
        if self.repo.get_user_product_review(user_id, product_id):
            raise ValidationConflictError(f"User {user_id} already reviewed product {product_id}")

        review = self.repo.create_review(
            ReviewModel(user_id=user_id, product_id=product_id, **payload.model_dump())
        )
        self.db.commit()
        logger.info(f"Review {review.id} by user {user_id} for product {product_id}")
        return review

    def list_reviews(self, product_id: int) -> list[ReviewView]:
        return [
            ReviewView.model_validate(review).model_copy(
                update={
                    "username": user.username if user else None,
                    "user_full_name": user.full_name if user else None,
                }
            )
            for review, user in self.repo.get_product_reviews_enriched(product_id)
        ]
