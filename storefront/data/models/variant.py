from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, UniqueConstraint

from storefront.data.database import Base


class ProductVariantModel(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    value = Column(String, nullable=False)
    price_modifier = Column(Numeric(10, 2), nullable=False, default=0)
    # not used by the order flow
    stock_modifier = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("product_id", "name", "value", name="u_variant_name_value"),
        {"sqlite_autoincrement": True},
    )
