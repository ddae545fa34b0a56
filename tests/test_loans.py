#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_loans
    ~~~~~~~~~~~~~~~~

    Loan lifecycle: stock and serial accounting on open and close.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

import pytest
from unittest.mock import patch
from decimal import Decimal
from cautela.core import loans
from cautela.core.exceptions import (
    CustomerNotFoundError,
    EquipmentNotFoundError,
    InsufficientStockError,
    LoanNotFoundError,
    LoanStatusError,
    SerialUnavailableError,
)
from cautela.core.models import (
    Equipment,
    Loan,
    LoanEquipment,
    LoanSerial,
    LoanStatusEnum,
    SerialNumber,
    SerialStatusEnum,
)
from cautela.core.permissions import Role
from cautela.schemas.loan import LoanCreate


def serial(db_session, number):
    return db_session.query(SerialNumber).filter_by(number=number).one()


def request(customer, *lines, **fields):
    return LoanCreate(
        customer_id=customer.id,
        equipments=[
            {"equipment_id": e, "quantity": q, "serial_numbers": s}
            for (e, q, s) in lines
        ],
        **fields,
    )


@pytest.fixture
def lender(make_user, claims_for):
    return claims_for(make_user(Role.COMMON))


def test_radio_scenario(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")

    loan = loans.create_loan(
        db_session, lender, request(customer, (radio.id, 1, [sn1.id])))

    db_session.refresh(radio)
    db_session.refresh(sn1)
    assert radio.amount == 4
    assert sn1.status == SerialStatusEnum.ON_LOAN
    assert loan.status == LoanStatusEnum.OPEN
    assert len(loan.equipments) == 1
    assert loan.equipments[0].total_price == radio.unit_price

    loans.update_loan_status(db_session, loan.id, LoanStatusEnum.CLOSED)

    db_session.refresh(radio)
    db_session.refresh(sn1)
    assert radio.amount == 5
    assert sn1.status == SerialStatusEnum.IN_STOCK
    assert loan.status == LoanStatusEnum.CLOSED


def test_quantity_two_decrements_by_two(db_session, radio, customer, lender):
    loan = loans.create_loan(db_session, lender, request(customer, (radio.id, 2, None)))

    db_session.refresh(radio)
    assert radio.amount == 3
    rows = db_session.query(LoanEquipment).filter_by(loan_id=loan.id).all()
    assert len(rows) == 1
    assert rows[0].quantity == 2
    assert rows[0].total_price == Decimal("300.00")


def test_insufficient_stock_changes_nothing(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")

    with pytest.raises(InsufficientStockError):
        loans.create_loan(
            db_session, lender, request(customer, (radio.id, 6, [sn1.id])))

    db_session.refresh(radio)
    db_session.refresh(sn1)
    assert radio.amount == 5
    assert sn1.status == SerialStatusEnum.IN_STOCK
    assert db_session.query(LoanEquipment).count() == 0


def test_quantity_is_summed_across_lines(db_session, radio, customer, lender):
    with pytest.raises(InsufficientStockError):
        loans.create_loan(
            db_session, lender,
            request(customer, (radio.id, 3, None), (radio.id, 3, None)))

    db_session.refresh(radio)
    assert radio.amount == 5


def test_serial_not_in_stock_is_rejected(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")
    sn1.status = SerialStatusEnum.MAINTENANCE
    db_session.commit()

    with pytest.raises(SerialUnavailableError):
        loans.create_loan(
            db_session, lender, request(customer, (radio.id, 1, [sn1.id])))

    db_session.refresh(radio)
    assert radio.amount == 5
    assert db_session.query(LoanSerial).count() == 0


def test_serial_of_other_equipment_is_rejected(db_session, radio, customer, lender):
    other = Equipment(
        name="Binóculo", category_id=radio.category_id, amount=2,
        unit_price=Decimal("80.00"))
    db_session.add(other)
    db_session.commit()
    sn1 = serial(db_session, "SN-1")

    with pytest.raises(SerialUnavailableError):
        loans.create_loan(
            db_session, lender, request(customer, (other.id, 1, [sn1.id])))

    db_session.refresh(other)
    db_session.refresh(sn1)
    assert other.amount == 2
    assert sn1.status == SerialStatusEnum.IN_STOCK


def test_duplicated_serial_is_rejected(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")

    with pytest.raises(SerialUnavailableError):
        loans.create_loan(
            db_session, lender, request(customer, (radio.id, 2, [sn1.id, sn1.id])))

    db_session.refresh(radio)
    assert radio.amount == 5


def test_unknown_equipment_and_customer(db_session, radio, customer, lender):
    with pytest.raises(EquipmentNotFoundError):
        loans.create_loan(db_session, lender, request(customer, (9999, 1, None)))

    with pytest.raises(CustomerNotFoundError):
        loans.create_loan(
            db_session, lender,
            LoanCreate(customer_id=9999, equipments=[{"equipment_id": radio.id, "quantity": 1}]))

    db_session.refresh(radio)
    assert radio.amount == 5


def test_second_close_is_a_noop(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")
    loan = loans.create_loan(
        db_session, lender, request(customer, (radio.id, 2, [sn1.id])))

    loans.update_loan_status(db_session, loan.id, LoanStatusEnum.CLOSED)
    loans.update_loan_status(db_session, loan.id, LoanStatusEnum.CLOSED)
    loans.close_loan(db_session, loan.id)

    db_session.refresh(radio)
    assert radio.amount == 5
    assert serial(db_session, "SN-1").status == SerialStatusEnum.IN_STOCK


def test_closed_loan_cannot_be_reopened(db_session, radio, customer, lender):
    loan = loans.create_loan(db_session, lender, request(customer, (radio.id, 1, None)))
    loans.update_loan_status(db_session, loan.id, "CLOSED")

    with pytest.raises(LoanStatusError):
        loans.update_loan_status(db_session, loan.id, "OPEN")

    db_session.refresh(radio)
    assert radio.amount == 5
    assert loan.status == LoanStatusEnum.CLOSED


def test_close_unknown_loan(db_session):
    with pytest.raises(LoanNotFoundError):
        loans.update_loan_status(db_session, 42, LoanStatusEnum.CLOSED)


def test_order_numbers_increase(db_session, radio, customer, lender):
    first = loans.create_loan(db_session, lender, request(customer, (radio.id, 1, None)))
    second = loans.create_loan(db_session, lender, request(customer, (radio.id, 1, None)))
    assert second.order_number == first.order_number + 1


def test_visibility_by_role(db_session, radio, customer, make_user, claims_for):
    alice = claims_for(make_user(Role.COMMON, email="alice@example.com"))
    bob = claims_for(make_user(Role.COMMON, email="bob@example.com"))
    admin = claims_for(make_user(Role.ADMIN))

    mine = loans.create_loan(db_session, alice, request(customer, (radio.id, 1, None)))
    loans.create_loan(db_session, bob, request(customer, (radio.id, 1, None)))

    items, total = loans.list_loans(db_session, alice)
    assert total == 1
    assert [loan.id for loan in items] == [mine.id]

    with pytest.raises(LoanNotFoundError):
        loans.get_loan(db_session, bob, mine.id)
    assert loans.get_loan(db_session, admin, mine.id).id == mine.id

    items, total = loans.list_loans(db_session, admin, page=1, limit=1)
    assert total == 2
    assert len(items) == 1


def test_stock_taken_after_validation_is_rejected(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")
    validate = loans._validate_items

    def validate_then_drain(session, items):
        equipments = validate(session, items)
        session.query(Equipment).filter_by(id=radio.id).update({Equipment.amount: 0})
        return equipments

    with patch("cautela.core.loans._validate_items", side_effect=validate_then_drain):
        with pytest.raises(InsufficientStockError):
            loans.create_loan(
                db_session, lender, request(customer, (radio.id, 1, [sn1.id])))

    db_session.refresh(radio)
    db_session.refresh(sn1)
    assert radio.amount == 5
    assert sn1.status == SerialStatusEnum.IN_STOCK
    assert db_session.query(Loan).count() == 0
    assert db_session.query(LoanEquipment).count() == 0
    assert db_session.query(LoanSerial).count() == 0


def test_serial_taken_after_validation_is_rejected(db_session, radio, customer, lender):
    sn1 = serial(db_session, "SN-1")
    validate = loans._validate_items

    def validate_then_lend(session, items):
        equipments = validate(session, items)
        session.query(SerialNumber).filter_by(id=sn1.id).update(
            {SerialNumber.status: SerialStatusEnum.ON_LOAN})
        return equipments

    with patch("cautela.core.loans._validate_items", side_effect=validate_then_lend):
        with pytest.raises(SerialUnavailableError):
            loans.create_loan(
                db_session, lender, request(customer, (radio.id, 1, [sn1.id])))

    db_session.refresh(radio)
    db_session.refresh(sn1)
    assert radio.amount == 5
    assert sn1.status == SerialStatusEnum.IN_STOCK
    assert db_session.query(Loan).count() == 0
    assert db_session.query(LoanEquipment).count() == 0
    assert db_session.query(LoanSerial).count() == 0
