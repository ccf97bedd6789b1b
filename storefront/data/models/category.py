from sqlalchemy import Column, Integer, String

from storefront.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    # self reference, no cycle check
    parent_id = Column(Integer, nullable=True)
    image = Column(String, nullable=True)
