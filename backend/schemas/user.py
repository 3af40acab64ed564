from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Literal, Optional

Role = Literal["user", "superadmin"]

# Shared properties for profile models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Self sign-up; the role is always "user"
class UserRegister(UserBase):
    password: str
    name: str

# Account created by a superadmin, role chosen explicitly
class UserCreate(BaseModel):
    email: str
    password: str
    name: str
    role: Role = "user"

# Output schema for profile details
class UserResponse(UserBase):
    id: int
    name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
