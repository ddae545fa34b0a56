#!/usr/bin/env python
"""
    Loan ("cautela") Schemas for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from cautela.core.models import LoanStatusEnum, LoanTypeEnum
from cautela.schemas.customer import Customer
from cautela.schemas.equipment import EquipmentBrief


class LoanItemRequest(BaseModel):
    equipment_id: int
    quantity: int = Field(..., ge=1)
    serial_numbers: Optional[List[int]] = None


class LoanCreate(BaseModel):
    customer_id: Optional[int] = None
    equipments: List[LoanItemRequest] = Field(..., min_length=1)
    devolution_date: Optional[datetime] = None
    observation: Optional[str] = None
    mission: Optional[str] = None
    type: LoanTypeEnum = LoanTypeEnum.CUSTODY
    urgency: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 1,
                "equipments": [
                    {"equipment_id": 1, "quantity": 1, "serial_numbers": [3]}
                ],
                "mission": "Operação Ágata",
                "type": "CUSTODY",
            }
        }


class LoanStatusUpdate(BaseModel):
    status: LoanStatusEnum


class Lender(BaseModel):
    name: str
    email: str

    class Config:
        from_attributes = True


class LoanEquipment(BaseModel):
    id: int
    equipment_id: int
    quantity: int
    total_price: float
    equipment: EquipmentBrief

    class Config:
        from_attributes = True


class LoanSerialNumber(BaseModel):
    id: int
    number: str
    equipment_id: int
    equipment: EquipmentBrief

    class Config:
        from_attributes = True


class LoanSerial(BaseModel):
    id: int
    serial_number_id: int
    serial_number: LoanSerialNumber

    class Config:
        from_attributes = True


class Loan(BaseModel):
    id: int
    order_number: int
    lender_id: int
    customer_id: Optional[int] = None
    status: LoanStatusEnum
    type: LoanTypeEnum
    date: datetime
    devolution_date: Optional[datetime] = None
    mission: Optional[str] = None
    urgency: Optional[str] = None
    observation: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoanDetail(Loan):
    lender: Lender
    customer: Optional[Customer] = None
    equipments: List[LoanEquipment] = []
    serial_numbers: List[LoanSerial] = []
    total_price: float = 0


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class LoanPage(BaseModel):
    loans: List[LoanDetail]
    pagination: Pagination
