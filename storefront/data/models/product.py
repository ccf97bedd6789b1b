from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    # absolute amount subtracted from price
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False)
    sku = Column(String, nullable=False, unique=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    image = Column(String, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
