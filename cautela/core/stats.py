from sqlalchemy import func
from cautela.core.models import (
    Equipment,
    Loan,
    LoanStatusEnum,
    SerialNumber,
    SerialStatusEnum,
)


def dashboard_stats(session) -> dict:
    """Headline numbers for the dashboard, recomputed on every call."""
    total_value = session.query(
        func.coalesce(func.sum(Equipment.amount * Equipment.unit_price), 0)
    ).scalar()
    return {
        "totalEquipments": session.query(Equipment).count(),
        "equipmentsInLoan": session.query(SerialNumber).filter(
            SerialNumber.status == SerialStatusEnum.ON_LOAN).count(),
        "totalValue": float(total_value or 0),
        "pendingLoans": session.query(Loan).filter(
            Loan.status == LoanStatusEnum.OPEN).count(),
    }
