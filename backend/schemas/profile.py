from pydantic import BaseModel, Field
from typing import Optional


# Schema for displaying the current user's profile
class ProfileOut(BaseModel):
    userId: int
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


# Schema for updating profile information; omitted fields stay untouched.
# Lengths follow the profiles columns.
class ProfileUpdate(BaseModel):
    firstName: Optional[str] = Field(None, max_length=50)
    lastName: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=50)
    state: Optional[str] = Field(None, max_length=2)
    zip: Optional[str] = Field(None, max_length=20)
