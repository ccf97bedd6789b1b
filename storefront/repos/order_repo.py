# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel
from storefront.domain.errors import NotFoundError


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_orders_by_user(self, user_id: int) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order_id: int, status: str) -> OrderModel:
        order = self.get_order(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        order.status = status
        order.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order_items_enriched(self, order_id: int):
        stmt = (
            select(OrderItemModel, ProductModel, ProductVariantModel)
            .outerjoin(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .outerjoin(ProductVariantModel, ProductVariantModel.id == OrderItemModel.variant_id)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]
