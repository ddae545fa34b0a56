import os

# Set TESTING before any cautela imports
os.environ["TESTING"] = "true"
os.environ.pop("CAUTELA_DB_URI", None)

import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cautela.core import auth
from cautela.core.auth import Claims
from cautela.core.db import Base
from cautela.core.models import (
    Category,
    ConditionEnum,
    Customer,
    Equipment,
    SerialNumber,
    User,
)
from cautela.core.permissions import Role


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    def make(role=Role.COMMON, email=None, password="secret123", **fields):
        user = User(
            name=fields.pop("name", f"{role.value.lower()} user"),
            email=email or f"{role.value.lower()}@example.com",
            password_hash=auth.hash_password(password),
            role=role,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return make


@pytest.fixture
def claims_for():
    def claims(user):
        return Claims(user_id=user.id, role=user.role, name=user.name, email=user.email)
    return claims


@pytest.fixture
def customer(db_session):
    customer = Customer(
        name="joão da silva",
        email="joao@example.com",
        phone="61999990000",
        rank="SGT_3",
        war_name="silva",
        military_organization="1º BCom",
        document="12345678901",
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture
def radio(db_session):
    """Equipment "Radio X": amount 5, one serial SN-1 in stock."""
    category = Category(name="Comunicações")
    db_session.add(category)
    db_session.flush()
    radio = Equipment(
        name="Radio X",
        category_id=category.id,
        amount=5,
        unit_price=Decimal("150.00"),
        condition=ConditionEnum.GOOD,
    )
    db_session.add(radio)
    db_session.flush()
    db_session.add(SerialNumber(number="SN-1", equipment_id=radio.id))
    db_session.commit()
    return radio
