from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


# -------- Enums --------
class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


# -------------------------------
# SQLAlchemy ORM Model
# -------------------------------
class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    created_at = Column(TIMESTAMP, server_default=func.now())

    issues = relationship("Issue", back_populates="reporter")
    comments = relationship("Comment", back_populates="user")
    upvotes = relationship("Upvote", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


# -------------------------------
# Pydantic Schemas (for FastAPI)
# -------------------------------

# -------- Requests --------
class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str


class AdminRegisterRequest(RegisterRequest):
    admin_key: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -------- Responses --------
class UserBase(BaseModel):
    user_id: int
    name: str
    email: EmailStr
    role: Role

    # Pydantic V2 Config
    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(UserBase):
    token: str


class LoginResponse(UserBase):
    token: str


class ProfileResponse(UserBase):
    created_at: Optional[datetime] = None


class UserSummary(BaseModel):
    user_id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
