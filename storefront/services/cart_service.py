# storefront/services/cart_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import InvalidStateError, NotFoundError
from storefront.domain.schemas import (
    CartItemIn,
    CartItemView,
    CartOut,
    CartRead,
    ProductRead,
    VariantRead,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services import pricing
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart domain.
    Commands (resolve, add, update, remove, clear) change state,
    queries (get_cart_items, get_cart_view) only read.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.repo.get_cart(cart_id)

    def get_cart_items(self, cart_id: int) -> list[CartItemView]:
        views = []
        for item, product, variant in self.repo.get_cart_items_enriched(cart_id):
            view = CartItemView.model_validate(item)
            if product is not None:
                view.product = ProductRead.model_validate(product)
                view.unit_price = pricing.unit_price(product, variant)
                view.line_total = pricing.line_total(product, variant, item.quantity)
            if variant is not None:
                view.variant = VariantRead.model_validate(variant)
            views.append(view)
        return views

    def get_cart_view(self, cart: CartModel) -> CartOut:
        items = self.get_cart_items(cart.id)
        totals = pricing.cart_totals(
            (i.product, i.variant, i.quantity) for i in items
        )
        return CartOut(cart=CartRead.model_validate(cart), items=items, totals=totals)

    # commands

    def resolve_cart(self, user_id: int | None, session_id: str | None) -> CartModel:
        """
        Exactly one cart per (user, session):
        1. a logged in user's own cart wins, the session is ignored
        2. otherwise the session cart; an anonymous one gets attached to the user
        3. otherwise a new cart
        A user cart and a different anonymous session cart can coexist;
        the session cart is then left alone.
        """
        if user_id is not None:
            cart = self.repo.get_cart_by_user(user_id)
            if cart:
                return cart

        if session_id:
            cart = self.repo.get_cart_by_session(session_id)
            if cart:
                if user_id is not None and cart.user_id is None:
                    cart.user_id = user_id
                    cart.updated_at = datetime.now(timezone.utc)
                    self.db.commit()
                    logger.info(f"Session cart {cart.id} attached to user {user_id}")
                return cart

        created = self.repo.create_cart(CartModel(user_id=user_id, session_id=session_id))
        self.db.commit()
        logger.info(f"Created cart {created.id} for user {user_id} session {session_id}")
        return created

    def add_item(self, cart_id: int, payload: CartItemIn) -> CartItemModel:
        if payload.quantity < 1:
            raise InvalidStateError("Quantity must be at least 1")

        if not self.repo.get_cart(cart_id):
            raise NotFoundError("Cart", cart_id)

        if not self.products.get_product(payload.product_id):
            raise NotFoundError("Product", payload.product_id)

        if payload.variant_id is not None:
            variant = self.products.get_variant(payload.variant_id)
            if not variant or variant.product_id != payload.product_id:
                raise InvalidStateError(
                    f"Variant {payload.variant_id} is not valid for product {payload.product_id}"
                )

        existing = self.repo.find_cart_item(cart_id, payload.product_id, payload.variant_id)

        if existing:
            logger.info(
                f"Product {payload.product_id} already in cart {cart_id}, quantity "
                f"{existing.quantity} -> {existing.quantity + payload.quantity}"
            )
            existing.quantity += payload.quantity
            item = existing
        else:
            item = self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart_id,
                    product_id=payload.product_id,
                    variant_id=payload.variant_id,
                    quantity=payload.quantity,
                )
            )
            logger.info(f"Added product {payload.product_id} to cart {cart_id}")

        self.repo.touch(cart_id)
        self.db.commit()
        return item

    def update_item_quantity(self, cart_id: int, item_id: int, quantity: int) -> CartItemModel:
        if quantity < 1:
            raise InvalidStateError("Quantity must be at least 1")

        self._get_owned_item(cart_id, item_id)
        item = self.repo.update_cart_item(item_id, {"quantity": quantity})

        self.repo.touch(cart_id)
        self.db.commit()
        return item

    def remove_item(self, cart_id: int, item_id: int) -> None:
        item = self._get_owned_item(cart_id, item_id)
        self.repo.delete_cart_item(item)

        self.repo.touch(cart_id)
        self.db.commit()
        logger.info(f"Removed item {item_id} from cart {cart_id}")

    def clear_cart(self, cart_id: int) -> None:
        removed = self.repo.clear_cart_items(cart_id)
        self.repo.touch(cart_id)
        self.db.commit()
        logger.info(f"Cleared {removed} items from cart {cart_id}")

    def _get_owned_item(self, cart_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_cart_item(item_id)
        if not item or item.cart_id != cart_id:
            raise NotFoundError("CartItem", item_id)
        return item
