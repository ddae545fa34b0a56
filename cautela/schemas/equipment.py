#!/usr/bin/env python
"""
    Equipment and Serial Number Schemas for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from cautela.core.models import ConditionEnum, SerialStatusEnum


class EquipmentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category_id: int
    amount: int = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0)
    condition: ConditionEnum
    observation: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Rádio HT",
                "description": "Rádio portátil VHF",
                "category_id": 1,
                "amount": 5,
                "unit_price": "1250.00",
                "condition": "GOOD",
            }
        }


class SerialNumberCreate(BaseModel):
    equipment_id: int
    number: str = Field(..., min_length=1)
    # Unrecognized values fall back to IN_STOCK / GOOD
    status: Optional[str] = SerialStatusEnum.IN_STOCK.value
    condition: Optional[str] = ConditionEnum.GOOD.value
    observation: Optional[str] = None


class CategoryBrief(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class EquipmentBrief(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class SerialNumberBrief(BaseModel):
    id: int
    number: str
    equipment_id: int
    status: SerialStatusEnum
    condition: ConditionEnum
    observation: Optional[str] = None

    class Config:
        from_attributes = True


class SerialNumber(SerialNumberBrief):
    created_at: Optional[datetime] = None
    equipment: EquipmentBrief


class Equipment(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: int
    amount: int
    unit_price: float
    condition: ConditionEnum
    observation: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: CategoryBrief
    serial_numbers: List[SerialNumberBrief] = []
    in_stock_count: int = 0

    class Config:
        from_attributes = True
