#!/usr/bin/env python
"""
    Equipment Alteration Schemas for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from cautela.schemas.customer import Customer


class AlterationCreate(BaseModel):
    description: str = Field(..., min_length=1)
    mission: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    date: datetime
    loan_id: Optional[int] = None
    customer_id: int
    equipment: str = Field(..., min_length=2)
    serial_numbers: List[str] = []
    amount: str = Field(..., min_length=1)


class AlterationUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    mission: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    amount: Optional[str] = Field(None, min_length=1)


class Alteration(BaseModel):
    id: int
    description: str
    mission: str
    location: str
    date: datetime
    equipment: str
    serial_numbers: List[str] = []
    amount: str
    customer_id: int
    loan_id: Optional[int] = None
    created_at: Optional[datetime] = None
    customer: Customer
    equipment_meta: Dict[str, Any] = {}

    class Config:
        from_attributes = True
