#!/usr/bin/env python

"""
    Loan ("cautela") lifecycle for Cautela.

    Creating a loan takes stock out of the catalog and reserves the
    requested serial numbered units; closing it puts both back. Each
    operation is a single transaction: it either fully applies or
    leaves the store untouched.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from collections import defaultdict
from sqlalchemy.exc import SQLAlchemyError
from cautela.configs import DEFAULT_PAGE_SIZE
from cautela.core.auth import Claims
from cautela.core.models import (
    Customer,
    Equipment,
    Loan,
    LoanEquipment,
    LoanSerial,
    LoanStatusEnum,
    SerialNumber,
    SerialStatusEnum,
)
from cautela.core.permissions import Permission
from cautela.core.exceptions import (
    CautelaAPIError,
    CustomerNotFoundError,
    DatabaseInsertError,
    EquipmentNotFoundError,
    InsufficientStockError,
    LoanNotFoundError,
    LoanStatusError,
    SerialUnavailableError,
)

logger = logging.getLogger(__name__)


def _validate_items(session, items):
    """
    Checks every requested line before anything is written.

    Returns the Equipment of each line, in request order.

    Raises:
        EquipmentNotFoundError: a line references unknown equipment.
        InsufficientStockError: the quantity requested for an equipment,
            summed over all its lines, exceeds its current amount.
        SerialUnavailableError: an explicit serial is not IN_STOCK or
            belongs to another equipment.
    """
    equipments = []
    requested = defaultdict(int)
    for item in items:
        equipment = session.get(Equipment, item.equipment_id)
        if not equipment:
            raise EquipmentNotFoundError("Equipment not found")

        requested[equipment.id] += item.quantity
        if equipment.amount < requested[equipment.id]:
            raise InsufficientStockError(f"Insufficient stock for {equipment.name}")

        if item.serial_numbers:
            available = [
                s for s in equipment.available_serials
                if s.id in item.serial_numbers
            ]
            if len(available) != len(item.serial_numbers):
                raise SerialUnavailableError(
                    f"Requested serial numbers unavailable for {equipment.name}")
        equipments.append(equipment)
    return equipments


def _take_stock(session, equipment, quantity):
    """Decrements stock only while enough remains, in one statement."""
    taken = session.query(Equipment).filter(
        Equipment.id == equipment.id,
        Equipment.amount >= quantity
    ).update(
        {Equipment.amount: Equipment.amount - quantity},
        synchronize_session=False
    )
    if not taken:
        raise InsufficientStockError(f"Insufficient stock for {equipment.name}")


def _reserve_serial(session, equipment, serial_id):
    reserved = session.query(SerialNumber).filter(
        SerialNumber.id == serial_id,
        SerialNumber.equipment_id == equipment.id,
        SerialNumber.status == SerialStatusEnum.IN_STOCK
    ).update(
        {SerialNumber.status: SerialStatusEnum.ON_LOAN},
        synchronize_session=False
    )
    if not reserved:
        raise SerialUnavailableError(
            f"Requested serial numbers unavailable for {equipment.name}")


def create_loan(session, claims: Claims, data) -> Loan:
    """
    Opens a loan lent by `claims.user_id`.

    Args:
        session: database session.
        claims: the acting user.
        data: a `schemas.loan.LoanCreate`.

    Returns:
        The new Loan, status OPEN.

    Raises:
        CustomerNotFoundError, EquipmentNotFoundError,
        InsufficientStockError, SerialUnavailableError: rejected
            before (or, for concurrent requests, while) writing; nothing
            is changed.
        DatabaseInsertError: the store failed; nothing is changed.
    """
    if data.customer_id is not None and not session.get(Customer, data.customer_id):
        raise CustomerNotFoundError()
    equipments = _validate_items(session, data.equipments)

    try:
        loan = Loan(
            order_number=Loan.next_order_number(session),
            lender_id=claims.user_id,
            customer_id=data.customer_id,
            devolution_date=data.devolution_date,
            observation=data.observation,
            mission=data.mission,
            type=data.type,
            urgency=data.urgency,
        )
        session.add(loan)
        session.flush()

        for item, equipment in zip(data.equipments, equipments):
            session.add(LoanEquipment(
                loan_id=loan.id,
                equipment_id=equipment.id,
                quantity=item.quantity,
                total_price=equipment.unit_price * item.quantity,
            ))
            _take_stock(session, equipment, item.quantity)

            for serial_id in item.serial_numbers or []:
                session.add(LoanSerial(loan_id=loan.id, serial_number_id=serial_id))
                _reserve_serial(session, equipment, serial_id)

        session.commit()
    except CautelaAPIError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to create loan for user {claims.user_id}: {e}")
        raise DatabaseInsertError(f"Failed to create loan: {str(e)}.")

    logger.info(f"Loan #{loan.order_number} opened by user {claims.user_id}")
    return loan


def close_loan(session, loan_id: int) -> Loan:
    """
    Closes a loan, returning its quantities to stock and its serial
    numbers to IN_STOCK. Serial conditions are left as they are.
    Closing an already CLOSED loan changes nothing.
    """
    loan = session.get(Loan, loan_id)
    if not loan:
        raise LoanNotFoundError()
    if loan.status == LoanStatusEnum.CLOSED:
        return loan

    try:
        loan.status = LoanStatusEnum.CLOSED

        for loan_equipment in loan.equipments:
            restored = session.query(Equipment).filter(
                Equipment.id == loan_equipment.equipment_id
            ).update(
                {Equipment.amount: Equipment.amount + loan_equipment.quantity},
                synchronize_session=False
            )
            if not restored:
                raise EquipmentNotFoundError(
                    f"Equipment {loan_equipment.equipment_id} no longer exists")

        for loan_serial in loan.serial_numbers:
            session.query(SerialNumber).filter(
                SerialNumber.id == loan_serial.serial_number_id
            ).update(
                {SerialNumber.status: SerialStatusEnum.IN_STOCK},
                synchronize_session=False
            )

        session.commit()
    except CautelaAPIError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to close loan {loan_id}: {e}")
        raise DatabaseInsertError(f"Failed to close loan: {str(e)}.")

    logger.info(f"Loan #{loan.order_number} closed")
    return loan


def update_loan_status(session, loan_id: int, status) -> Loan:
    """
    Moves a loan to `status`. Only OPEN -> CLOSED has side effects;
    setting the current status again changes nothing and closed loans
    are never reopened.
    """
    loan = session.get(Loan, loan_id)
    if not loan:
        raise LoanNotFoundError()

    status = LoanStatusEnum(status)
    if status == loan.status:
        return loan
    if status == LoanStatusEnum.CLOSED:
        return close_loan(session, loan_id)
    raise LoanStatusError("Closed loans cannot be reopened")


def _visible_loans(session, claims: Claims):
    query = session.query(Loan)
    if not claims.has(Permission.ADMIN):
        query = query.filter(Loan.lender_id == claims.user_id)
    return query


def get_loan(session, claims: Claims, loan_id: int) -> Loan:
    """Admins see every loan, everyone else only the loans they lent."""
    loan = _visible_loans(session, claims).filter(Loan.id == loan_id).first()
    if not loan:
        raise LoanNotFoundError()
    return loan


def list_loans(session, claims: Claims, page: int = 1, limit: int = DEFAULT_PAGE_SIZE):
    """Returns (loans, total), newest first."""
    page = max(page, 1)
    limit = max(limit, 1)
    query = _visible_loans(session, claims)
    total = query.count()
    loans = query.order_by(Loan.created_at.desc(), Loan.id.desc()).offset(
        (page - 1) * limit).limit(limit).all()
    return loans, total
