from pydantic import BaseModel, Field

# Shared properties for user models
class UserBase(BaseModel):
    username: str = Field(min_length=1, max_length=50)

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests
class UserCreate(UserBase):
    password: str = Field(min_length=1)
    confirmPassword: str
    role: str = "USER"

# Output schema for user account details
class UserResponse(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True

# Schema for login response: bearer token plus the user it belongs to
class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
