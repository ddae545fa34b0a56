#!/usr/bin/env python
"""
    Category Schemas for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class Category(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    equipment_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryDeleted(BaseModel):
    success: bool = True
    deletedEquipments: int
    deletedSerials: int
