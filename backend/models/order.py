from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column("order_id", Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False)

    # Shipping address snapshot taken from the profile at checkout time
    address = Column(String(200), nullable=True)
    city = Column(String(50), nullable=True)
    state = Column(String(50), nullable=True)
    zip = Column(String(20), nullable=True)

    # Cart total at checkout time
    shipping_amount = Column(Numeric(10, 2), nullable=False, default=0)

    items = relationship(
        "OrderLineItem", back_populates="order",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="OrderLineItem.id",
    )

class OrderLineItem(Base):
    __tablename__ = "order_line_items"

    id = Column("order_line_id", Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)

    # Unit price snapshot, not the live product price
    sales_price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    discount = Column(Numeric(5, 4), nullable=False, default=0)

    order = relationship("Order", back_populates="items")
