from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel
from storefront.data.models.user import UserModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user_product_review(self, user_id: int, product_id: int) -> ReviewModel | None:
        stmt = select(ReviewModel).where(
            ReviewModel.user_id == user_id,
            ReviewModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalars().first()

    def create_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.flush()
        return review

    def delete_product_reviews(self, product_id: int) -> None:
        self.db.execute(delete(ReviewModel).where(ReviewModel.product_id == product_id))

    def get_product_reviews_enriched(self, product_id: int):
        # newest first, with the author joined in
        stmt = (
            select(ReviewModel, UserModel)
            .outerjoin(UserModel, UserModel.id == ReviewModel.user_id)
            .where(ReviewModel.product_id == product_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]
