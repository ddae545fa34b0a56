import logging
from sqlalchemy.exc import SQLAlchemyError
from cautela.core.models import EquipmentAlteration, Loan
from cautela.core.customers import get_customer
from cautela.core.exceptions import (
    AlterationNotFoundError,
    DatabaseInsertError,
    LoanNotFoundError,
)

logger = logging.getLogger(__name__)


def list_alterations(session):
    return session.query(EquipmentAlteration).order_by(
        EquipmentAlteration.created_at.desc(), EquipmentAlteration.id.desc()).all()


def get_alteration(session, alteration_id):
    if alteration := session.get(EquipmentAlteration, alteration_id):
        return alteration
    raise AlterationNotFoundError()


def create_alteration(session, data):
    """Records an alteration; stock and serial statuses are not touched."""
    get_customer(session, data.customer_id)
    if data.loan_id is not None and not session.get(Loan, data.loan_id):
        raise LoanNotFoundError()
    try:
        alteration = EquipmentAlteration(**data.model_dump())
        session.add(alteration)
        session.commit()
        return alteration
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to create alteration: {e}")
        raise DatabaseInsertError(f"Failed to create alteration: {str(e)}.")


def update_alteration(session, alteration_id, data):
    alteration = get_alteration(session, alteration_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(alteration, field, value)
    try:
        session.commit()
        return alteration
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to update alteration {alteration_id}: {e}")
        raise DatabaseInsertError(f"Failed to update alteration: {str(e)}.")
