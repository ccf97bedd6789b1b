# storefront/services/order_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import EmptyCartError, InvalidStateError, NotFoundError
from storefront.domain.schemas import (
    OrderCreate,
    OrderDetailOut,
    OrderItemView,
    OrderRead,
    OrderStatus,
    ProductRead,
    VariantRead,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services import pricing
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order domain, kept apart from CartService.
    Turns a cart into an immutable order snapshot with frozen prices.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    # queries

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.repo.get_order(order_id)

    def list_orders(self, user_id: int) -> list[OrderModel]:
        return self.repo.get_orders_by_user(user_id)

    def get_order_items(self, order_id: int) -> list[OrderItemView]:
        views = []
        for item, product, variant in self.repo.get_order_items_enriched(order_id):
            view = OrderItemView.model_validate(item)
            if product is not None:
                view.product = ProductRead.model_validate(product)
            if variant is not None:
                view.variant = VariantRead.model_validate(variant)
            views.append(view)
        return views

    def get_order_detail(self, order_id: int) -> OrderDetailOut:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return OrderDetailOut(
            order=OrderRead.model_validate(order),
            items=self.get_order_items(order_id),
        )

    # commands

    def create_order(self, user_id: int, payload: OrderCreate) -> OrderModel:
        if payload.total is None:
            raise InvalidStateError("Order total is required")
        order = self.repo.create_order(self._build_order(user_id, payload))
        self.db.commit()
        return order

    def update_order_status(self, order_id: int, status: str) -> OrderModel:
        try:
            status = OrderStatus(status).value
        except ValueError:
            raise InvalidStateError(f"Unknown order status {status!r}")

        order = self.repo.update_order_status(order_id, status)
        self.db.commit()
        logger.info(f"Order {order_id} status -> {status}")
        return order

    def checkout(self, user_id: int, session_id: str | None, payload: OrderCreate) -> OrderModel:
        """
        Resolves the caller's cart, prices it when no total was sent,
        then materializes the order.
        """
        cart_service = CartService(self.db)
        cart = cart_service.resolve_cart(user_id, session_id)

        if payload.total is None:
            totals = cart_service.get_cart_view(cart).totals
            payload = payload.model_copy(update={"total": totals.total})

        return self.create_order_from_cart(user_id, payload, cart.id)

    def create_order_from_cart(self, user_id: int, payload: OrderCreate, cart_id: int) -> OrderModel:
        """
        Use case: order from cart.

        1. Cart must exist and hold at least one item
        2. Order row with the caller's total
        3. One order item per cart item, unit price frozen now
        4. Stock decremented, floored at 0
        5. Cart emptied, the cart row stays

        The cart lock is taken before the items are read and the product locks
        before stock is read; both reads bypass the session cache.
        Everything is written in one transaction.
        A cart item whose product is gone is skipped; overselling is not rejected.
        """
        cart = self.carts.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Cart", cart_id)

        with self.lock_service.cart_lock(cart_id):
            items = self.carts.get_cart_items(cart_id, fresh=True)
            if not items:
                raise EmptyCartError(cart_id)

            if payload.total is None:
                raise InvalidStateError("Order total is required")

            with self.lock_service.product_locks(i.product_id for i in items):
                try:
                    order = self._materialize(user_id, payload, cart, items)
                    self.db.commit()
                except Exception:
                    self.db.rollback()
                    raise

        logger.info(f"Order {order.id} created from cart {cart_id}, total {order.total}")

        try:
            self.notification_service.send_order_notification(user_id, order.id, str(order.total))
        except Exception as e:
            logger.warning(f"Failed to enqueue notification for order {order.id}: {e}")

        return order

    def _materialize(
        self, user_id: int, payload: OrderCreate, cart: CartModel, items: list[CartItemModel]
    ) -> OrderModel:
        order = self.repo.create_order(self._build_order(user_id, payload))

        for item in items:
            product = self.products.get_product(item.product_id, fresh=True)
            if product is None:
                logger.warning(
                    f"Product {item.product_id} no longer exists, skipping cart item {item.id}"
                )
                continue

            variant = self.products.get_variant(item.variant_id, fresh=True) if item.variant_id else None

            self.repo.add_order_item(
                OrderItemModel(
                    order_id=order.id,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    price=pricing.unit_price(product, variant),
                )
            )

            if item.quantity > product.stock:
                logger.warning(
                    f"Product {product.id}: ordered {item.quantity} with {product.stock} in stock"
                )
            product.stock = max(0, product.stock - item.quantity)

        self.carts.clear_cart_items(cart.id)
        cart.updated_at = datetime.now(timezone.utc)
        return order

    def _build_order(self, user_id: int, payload: OrderCreate) -> OrderModel:
        return OrderModel(
            user_id=user_id,
            address_id=payload.address_id,
            total=payload.total,
            status=OrderStatus(payload.status).value,
            payment_method=payload.payment_method,
            shipping_method=payload.shipping_method,
            tracking_number=payload.tracking_number,
        )
