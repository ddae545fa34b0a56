#!/usr/bin/env python

"""
    Models for Cautela: users, customers, the equipment catalog,
    serial numbered units, loans ("cautelas") and alteration records.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import enum
from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Numeric,
    DateTime,
    ForeignKey,
    JSON,
    Enum as SQLAlchemyEnum,
    func,
)
from sqlalchemy.orm import relationship
from cautela.core.db import Base
from cautela.core.permissions import Role


class ConditionEnum(str, enum.Enum):
    NEW = "NEW"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"

class SerialStatusEnum(str, enum.Enum):
    IN_STOCK = "IN_STOCK"
    ON_LOAN = "ON_LOAN"
    MAINTENANCE = "MAINTENANCE"
    DECOMMISSIONED = "DECOMMISSIONED"

class LoanStatusEnum(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"

class LoanTypeEnum(str, enum.Enum):
    CUSTODY = "CUSTODY"
    TEMPORARY_LOAN = "TEMPORARY_LOAN"


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())


class User(TimestampMixin, Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLAlchemyEnum(Role), default=Role.COMMON, nullable=False)
    phone = Column(String(30))
    document = Column(String(30))
    rank = Column(String(30))
    war_name = Column(String(100))
    military_organization = Column(String(255))
    function_name = Column(String(255))

    loans = relationship('Loan', back_populates='lender')

    @classmethod
    def get_by_email(cls, session, email):
        return session.query(cls).filter(cls.email == email.strip().lower()).first()


class Customer(TimestampMixin, Base):
    __tablename__ = 'customers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    rank = Column(String(30), nullable=False)
    war_name = Column(String(100), nullable=False)
    military_organization = Column(String(255), nullable=False)
    document = Column(String(30), nullable=False)

    loans = relationship('Loan', back_populates='customer')
    alterations = relationship('EquipmentAlteration', back_populates='customer')


class Category(TimestampMixin, Base):
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)

    equipments = relationship('Equipment', back_populates='category')

    @classmethod
    def exists(cls, session, name, exclude_id=None):
        query = session.query(cls).filter(cls.name == name)
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        return query.first()

    @property
    def equipment_count(self):
        return len(self.equipments)


class Equipment(TimestampMixin, Base):
    __tablename__ = 'equipments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False)
    amount = Column(Integer, default=0, nullable=False)
    unit_price = Column(Numeric(12, 2), default=0, nullable=False)
    condition = Column(SQLAlchemyEnum(ConditionEnum), default=ConditionEnum.GOOD, nullable=False)
    observation = Column(Text)

    category = relationship('Category', back_populates='equipments')
    serial_numbers = relationship(
        'SerialNumber', back_populates='equipment', order_by='SerialNumber.number')

    @classmethod
    def exists(cls, session, name, exclude_id=None):
        query = session.query(cls).filter(cls.name == name)
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        return query.first()

    @property
    def available_serials(self):
        """Serial numbered units currently in stock."""
        return [s for s in self.serial_numbers if s.status == SerialStatusEnum.IN_STOCK]

    @property
    def in_stock_count(self):
        return len(self.available_serials)


class SerialNumber(TimestampMixin, Base):
    __tablename__ = 'serial_numbers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(255), unique=True, nullable=False)
    equipment_id = Column(Integer, ForeignKey('equipments.id'), nullable=False)
    status = Column(SQLAlchemyEnum(SerialStatusEnum), default=SerialStatusEnum.IN_STOCK, nullable=False)
    condition = Column(SQLAlchemyEnum(ConditionEnum), default=ConditionEnum.GOOD, nullable=False)
    observation = Column(Text)

    equipment = relationship('Equipment', back_populates='serial_numbers')
    loans = relationship('LoanSerial', back_populates='serial_number')

    @classmethod
    def exists(cls, session, number):
        return session.query(cls).filter(cls.number == number).first()

    @property
    def open_loan(self):
        """The OPEN loan this unit is attached to, if any."""
        for link in self.loans:
            if link.loan.status == LoanStatusEnum.OPEN:
                return link.loan
        return None


class Loan(TimestampMixin, Base):
    __tablename__ = 'loans'

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(Integer, unique=True, nullable=False)
    lender_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    customer_id = Column(Integer, ForeignKey('customers.id'))
    status = Column(SQLAlchemyEnum(LoanStatusEnum), default=LoanStatusEnum.OPEN, nullable=False)
    type = Column(SQLAlchemyEnum(LoanTypeEnum), default=LoanTypeEnum.CUSTODY, nullable=False)
    date = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    devolution_date = Column(DateTime(timezone=True))
    mission = Column(Text)
    urgency = Column(String(255))
    observation = Column(Text)

    lender = relationship('User', back_populates='loans')
    customer = relationship('Customer', back_populates='loans')
    equipments = relationship('LoanEquipment', back_populates='loan', order_by='LoanEquipment.id')
    serial_numbers = relationship('LoanSerial', back_populates='loan', order_by='LoanSerial.id')
    alterations = relationship('EquipmentAlteration', back_populates='loan')

    @classmethod
    def next_order_number(cls, session):
        current = session.query(func.max(cls.order_number)).scalar()
        return (current or 0) + 1

    @property
    def total_price(self):
        return sum((le.total_price or 0) for le in self.equipments)


class LoanEquipment(Base):
    __tablename__ = 'loan_equipments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_id = Column(Integer, ForeignKey('loans.id'), nullable=False)
    equipment_id = Column(Integer, ForeignKey('equipments.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    loan = relationship('Loan', back_populates='equipments')
    equipment = relationship('Equipment')


class LoanSerial(Base):
    __tablename__ = 'loan_serials'

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_id = Column(Integer, ForeignKey('loans.id'), nullable=False)
    serial_number_id = Column(Integer, ForeignKey('serial_numbers.id'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    loan = relationship('Loan', back_populates='serial_numbers')
    serial_number = relationship('SerialNumber', back_populates='loans')


class EquipmentAlteration(TimestampMixin, Base):
    __tablename__ = 'equipment_alterations'

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(Text, nullable=False)
    mission = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    equipment = Column(String(255), nullable=False)
    serial_numbers = Column(JSON, default=list, nullable=False)
    amount = Column(String(50), nullable=False)
    customer_id = Column(Integer, ForeignKey('customers.id'), nullable=False)
    loan_id = Column(Integer, ForeignKey('loans.id'))

    customer = relationship('Customer', back_populates='alterations')
    loan = relationship('Loan', back_populates='alterations')

    @property
    def equipment_meta(self):
        """The first loaned equipment (with its category) or the free text name."""
        if self.loan and self.loan.equipments:
            equipment = self.loan.equipments[0].equipment
            return {
                "name": equipment.name,
                "category": {"name": equipment.category.name},
            }
        return {"name": self.equipment}
