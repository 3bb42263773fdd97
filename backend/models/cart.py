# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# One row per (user, product) pair in a user's shopping cart
class CartEntry(Base):
    __tablename__ = "shopping_cart" # Table name

    # Composite key keeps a product unique within a user's cart
    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), primary_key=True)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1) # Product quantity

    product = relationship("Product", lazy="joined", innerjoin=True) # Relationship to Product
