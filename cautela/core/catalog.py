#!/usr/bin/env python

"""
    Equipment catalog for Cautela: categories, equipment and their
    serial numbered units.

    Deleting a category or an equipment is an explicit multi-step
    delete (loan links, serial numbers, equipment, category) run in one
    transaction; nothing relies on database level cascades.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from sqlalchemy.exc import SQLAlchemyError
from cautela.core.models import (
    Category,
    ConditionEnum,
    Equipment,
    LoanEquipment,
    LoanSerial,
    SerialNumber,
    SerialStatusEnum,
)
from cautela.core.exceptions import (
    CategoryNotFoundError,
    DatabaseInsertError,
    DuplicateError,
    EquipmentNotFoundError,
)

logger = logging.getLogger(__name__)


def _commit(session, action):
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise DatabaseInsertError(f"Failed to {action}: {str(e)}.")


def list_categories(session):
    return session.query(Category).order_by(Category.name.asc()).all()


def get_category(session, category_id):
    if category := session.get(Category, category_id):
        return category
    raise CategoryNotFoundError()


def create_category(session, data):
    if Category.exists(session, data.name):
        raise DuplicateError("A category with this name already exists")
    category = Category(name=data.name, description=data.description)
    session.add(category)
    _commit(session, "create category")
    return category


def update_category(session, category_id, data):
    category = get_category(session, category_id)
    if Category.exists(session, data.name, exclude_id=category_id):
        raise DuplicateError("A category with this name already exists")
    category.name = data.name
    category.description = data.description
    _commit(session, "update category")
    return category


def _purge_equipments(session, equipment_ids):
    """
    Deletes the given equipment along with their serial numbers and
    every loan link pointing at either. Does not commit.

    Returns the number of serial numbers deleted.
    """
    if not equipment_ids:
        return 0
    serial_ids = [sid for (sid,) in session.query(SerialNumber.id).filter(
        SerialNumber.equipment_id.in_(equipment_ids))]
    if serial_ids:
        session.query(LoanSerial).filter(
            LoanSerial.serial_number_id.in_(serial_ids)
        ).delete(synchronize_session="fetch")
        session.query(SerialNumber).filter(
            SerialNumber.id.in_(serial_ids)
        ).delete(synchronize_session="fetch")
    session.query(LoanEquipment).filter(
        LoanEquipment.equipment_id.in_(equipment_ids)
    ).delete(synchronize_session="fetch")
    session.query(Equipment).filter(
        Equipment.id.in_(equipment_ids)
    ).delete(synchronize_session="fetch")
    return len(serial_ids)


def delete_category(session, category_id):
    """
    Deletes a category together with all of its equipment and their
    serial numbers. This cannot be undone.

    Returns:
        dict with `deletedEquipments` and `deletedSerials` counts.
    """
    category = get_category(session, category_id)
    equipment_ids = [e.id for e in category.equipments]
    try:
        deleted_serials = _purge_equipments(session, equipment_ids)
        session.query(Category).filter(
            Category.id == category_id
        ).delete(synchronize_session="fetch")
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to delete category {category_id}: {e}")
        raise DatabaseInsertError(f"Failed to delete category: {str(e)}.")

    logger.warning(
        f"Category {category_id} deleted with {len(equipment_ids)} equipments "
        f"and {deleted_serials} serial numbers")
    return {
        "success": True,
        "deletedEquipments": len(equipment_ids),
        "deletedSerials": deleted_serials,
    }


def list_equipments(session):
    return session.query(Equipment).order_by(
        Equipment.created_at.desc(), Equipment.id.desc()).all()


def get_equipment(session, equipment_id):
    if equipment := session.get(Equipment, equipment_id):
        return equipment
    raise EquipmentNotFoundError()


def _apply_equipment(equipment, data):
    equipment.name = data.name
    equipment.description = data.description
    equipment.category_id = data.category_id
    equipment.amount = data.amount
    equipment.unit_price = data.unit_price
    equipment.condition = data.condition
    equipment.observation = data.observation


def create_equipment(session, data):
    if Equipment.exists(session, data.name):
        raise DuplicateError("An equipment with this name already exists")
    get_category(session, data.category_id)
    equipment = Equipment()
    _apply_equipment(equipment, data)
    session.add(equipment)
    _commit(session, "create equipment")
    return equipment


def update_equipment(session, equipment_id, data):
    equipment = get_equipment(session, equipment_id)
    if Equipment.exists(session, data.name, exclude_id=equipment_id):
        raise DuplicateError("An equipment with this name already exists")
    get_category(session, data.category_id)
    _apply_equipment(equipment, data)
    _commit(session, "update equipment")
    return equipment


def delete_equipment(session, equipment_id):
    get_equipment(session, equipment_id)
    try:
        deleted_serials = _purge_equipments(session, [equipment_id])
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to delete equipment {equipment_id}: {e}")
        raise DatabaseInsertError(f"Failed to delete equipment: {str(e)}.")
    logger.info(f"Equipment {equipment_id} deleted with {deleted_serials} serial numbers")
    return {"success": True, "deletedSerials": deleted_serials}


def list_serial_numbers(session):
    return session.query(SerialNumber).order_by(
        SerialNumber.created_at.desc(), SerialNumber.id.desc()).all()


def create_serial_number(session, data):
    if SerialNumber.exists(session, data.number):
        raise DuplicateError("Serial number already registered")
    get_equipment(session, data.equipment_id)

    status = data.status if data.status in SerialStatusEnum.__members__ else "IN_STOCK"
    condition = data.condition if data.condition in ConditionEnum.__members__ else "GOOD"
    serial = SerialNumber(
        number=data.number,
        equipment_id=data.equipment_id,
        status=SerialStatusEnum[status],
        condition=ConditionEnum[condition],
        observation=data.observation,
    )
    session.add(serial)
    _commit(session, "create serial number")
    return serial
