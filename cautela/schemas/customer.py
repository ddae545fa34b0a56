#!/usr/bin/env python
"""
    Customer Schemas for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    phone: str = Field(..., min_length=10, pattern=r"^\d+$")
    rank: str = Field(..., min_length=2)
    war_name: str = Field(..., min_length=2)
    military_organization: str = Field(..., min_length=4)
    document: str = Field(..., min_length=11, pattern=r"^\d+$")


class Customer(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    rank: str
    war_name: str
    military_organization: str
    document: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
