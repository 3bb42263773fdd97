from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base


# Product category
class Category(Base):
    __tablename__ = "categories"

    id = Column("category_id", Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    description = Column(String, nullable=True)

    products = relationship("Product", back_populates="category")


# Catalog product.
# The price is the live list price; carts and orders take a snapshot of it.
class Product(Base):
    __tablename__ = "products"

    id = Column("product_id", Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, index=True)
    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.category_id"), nullable=False)
    description = Column(String, nullable=True)
    color = Column(String(20), nullable=True)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)
    image_url = Column(String(200), nullable=True)

    category = relationship("Category", back_populates="products")
