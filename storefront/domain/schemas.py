# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class OrderStatus(str, Enum):
    PENDIENTE = "pendiente"
    ENVIADO = "enviado"
    ENTREGADO = "entregado"
    CANCELADO = "cancelado"


class ProductSort(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"


# ---------------------------------------------------------------- users

class UserCreate(BaseModel):
    """Schema for registering a user. The password arrives already hashed."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    email: EmailStr
    full_name: Optional[str] = None
    phone: Optional[str] = None


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    is_admin: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------ addresses

class AddressCreate(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    is_default: bool = False


class AddressUpdate(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    is_default: Optional[bool] = None


class AddressRead(BaseModel):
    id: int
    user_id: int
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


# -------------------------------------------------------------- catalog

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    image: Optional[str] = None


class CategoryRead(CategoryCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0, description="Absolute amount subtracted from price")
    stock: int = Field(..., ge=0)
    sku: str = Field(..., min_length=1)
    category_id: Optional[int] = None
    image: Optional[str] = None
    featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    discount: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    image: Optional[str] = None
    featured: Optional[bool] = None


class ProductRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    discount: Decimal
    stock: int
    sku: str
    category_id: Optional[int] = None
    image: Optional[str] = None
    featured: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VariantCreate(BaseModel):
    name: str = Field(..., min_length=1, description="e.g. Color")
    value: str = Field(..., min_length=1, description="e.g. Red")
    price_modifier: Decimal = Decimal("0")
    stock_modifier: int = 0


class VariantRead(VariantCreate):
    id: int
    product_id: int

    model_config = ConfigDict(from_attributes=True)


class ProductFilters(BaseModel):
    category_id: Optional[int] = None
    search: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    featured: Optional[bool] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ProductPage(BaseModel):
    products: List[ProductRead]
    pagination: Pagination


# ----------------------------------------------------------------- cart

class CartItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    variant_id: Optional[int] = Field(None, gt=0)
    quantity: int = Field(1, ge=1)


class CartItemQuantityIn(BaseModel):
    quantity: int = Field(..., ge=1)


class CartRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    session_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartItemRead(BaseModel):
    id: int
    cart_id: int
    product_id: int
    variant_id: Optional[int] = None
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CartItemView(CartItemRead):
    """Cart item joined with its product and variant at read time."""

    product: Optional[ProductRead] = None
    variant: Optional[VariantRead] = None
    unit_price: Optional[Decimal] = None
    line_total: Optional[Decimal] = None


class CartTotals(BaseModel):
    subtotal: Decimal
    taxes: Decimal
    shipping: Decimal
    total: Decimal


class CartOut(BaseModel):
    cart: CartRead
    items: List[CartItemView]
    totals: CartTotals


# --------------------------------------------------------------- orders

class OrderCreate(BaseModel):
    """
    Checkout payload. When total is omitted the checkout computes it
    from the cart; the order materialization itself requires it.
    """

    address_id: Optional[int] = None
    total: Optional[Decimal] = Field(None, ge=0)
    status: OrderStatus = OrderStatus.PENDIENTE
    payment_method: Optional[str] = None
    shipping_method: Optional[str] = None
    tracking_number: Optional[str] = None


class OrderStatusIn(BaseModel):
    status: OrderStatus


class OrderRead(BaseModel):
    id: int
    user_id: int
    address_id: Optional[int] = None
    total: Decimal
    status: str
    payment_method: Optional[str] = None
    shipping_method: Optional[str] = None
    tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderItemView(BaseModel):
    id: int
    order_id: int
    product_id: int
    variant_id: Optional[int] = None
    quantity: int
    price: Decimal
    product: Optional[ProductRead] = None
    variant: Optional[VariantRead] = None

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(BaseModel):
    order: OrderRead
    items: List[OrderItemView]


# -------------------------------------------------------------- reviews

class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewRead(BaseModel):
    id: int
    user_id: int
    product_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewView(ReviewRead):
    username: Optional[str] = None
    user_full_name: Optional[str] = None
