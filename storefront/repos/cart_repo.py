# storefront/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel
from storefront.domain.errors import NotFoundError


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    # carts

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.user_id == user_id).order_by(CartModel.id)
        return self.db.execute(stmt).scalars().first()

    def get_cart_by_session(self, session_id: str) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.session_id == session_id).order_by(CartModel.id)
        return self.db.execute(stmt).scalars().first()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def touch(self, cart_id: int) -> None:
        cart = self.get_cart(cart_id)
        if cart:
            cart.updated_at = datetime.now(timezone.utc)

    # items

    def get_cart_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_cart_items(self, cart_id: int, fresh: bool = False) -> list[CartItemModel]:
        # fresh reloads rows another session may have changed
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
            .execution_options(populate_existing=fresh)
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_cart_item(
        self, cart_id: int, product_id: int, variant_id: int | None
    ) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.cart_id == cart_id,
            CartItemModel.product_id == product_id,
        )
        if variant_id is None:
            stmt = stmt.where(CartItemModel.variant_id.is_(None))
        else:
            stmt = stmt.where(CartItemModel.variant_id == variant_id)
        return self.db.execute(stmt).scalars().first()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def update_cart_item(self, item_id: int, data: dict) -> CartItemModel:
        item = self.get_cart_item(item_id)
        if not item:
            raise NotFoundError("CartItem", item_id)
        for field, value in data.items():
            setattr(item, field, value)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_cart_items(self, cart_id: int) -> int:
        items = self.get_cart_items(cart_id)
        for item in items:
            self.db.delete(item)
        self.db.flush()
        return len(items)

    def get_cart_items_enriched(self, cart_id: int):
        """
        Read-time join: (item, product or None, variant or None) per row.
        Stored rows stay normalized.
        """
        stmt = (
            select(CartItemModel, ProductModel, ProductVariantModel)
            .outerjoin(ProductModel, ProductModel.id == CartItemModel.product_id)
            .outerjoin(ProductVariantModel, ProductVariantModel.id == CartItemModel.variant_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]
