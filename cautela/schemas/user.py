#!/usr/bin/env python
"""
    User Schemas for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from cautela.core.permissions import Role
from cautela.schemas.customer import EMAIL_PATTERN


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)


class RegisterRequest(LoginRequest):
    name: str = Field(..., min_length=2)


class UserCreate(RegisterRequest):
    role: Role
    phone: Optional[str] = None
    document: Optional[str] = None
    rank: Optional[str] = None
    war_name: Optional[str] = None
    military_organization: Optional[str] = None
    function_name: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    role: Optional[Role] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    rank: Optional[str] = None
    war_name: Optional[str] = None
    military_organization: Optional[str] = None
    function_name: Optional[str] = None


class User(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    phone: Optional[str] = None
    document: Optional[str] = None
    rank: Optional[str] = None
    war_name: Optional[str] = None
    military_organization: Optional[str] = None
    function_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PasswordReset(BaseModel):
    success: bool = True
    new_password: str
    user: User
