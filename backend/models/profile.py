from sqlalchemy import Column, Integer, String, ForeignKey
from database import Base


# Shipping and contact details of a user, keyed by the user id
class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(200), nullable=True)

    # Address block copied into every order at checkout
    address = Column(String(200), nullable=True)
    city = Column(String(50), nullable=True)
    state = Column(String(2), nullable=True)
    zip = Column(String(20), nullable=True)
