import logging
from sqlalchemy.exc import SQLAlchemyError
from cautela.core.models import Customer
from cautela.core.exceptions import CustomerNotFoundError, DatabaseInsertError

logger = logging.getLogger(__name__)


def list_customers(session):
    return session.query(Customer).order_by(Customer.name.asc()).all()


def get_customer(session, customer_id):
    if customer := session.get(Customer, customer_id):
        return customer
    raise CustomerNotFoundError()


def create_customer(session, data):
    try:
        customer = Customer(**data.model_dump())
        session.add(customer)
        session.commit()
        return customer
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to create customer: {e}")
        raise DatabaseInsertError(f"Failed to create customer: {str(e)}.")
