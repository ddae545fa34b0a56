#!/usr/bin/env python

"""
    API routes for Cautela: catalog, customers, loans, users,
    alterations, dashboard stats and document downloads.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import math
from typing import List, Optional
from fastapi import (
    APIRouter,
    Cookie,
    Depends,
    Request,
    Response,
    status,
)
from cautela.configs import DEFAULT_PAGE_SIZE, READY_EXCLUDED_CATEGORIES
from cautela.core import (
    alterations,
    auth,
    catalog,
    customers,
    documents,
    loans,
    stats,
    users,
)
from cautela.core.auth import Claims
from cautela.core.db import get_session
from cautela.core.exceptions import UnauthorizedError
from cautela.core.models import User
from cautela.core.permissions import Permission
from cautela.schemas.alteration import Alteration, AlterationCreate, AlterationUpdate
from cautela.schemas.category import Category, CategoryCreate, CategoryDeleted
from cautela.schemas.customer import Customer, CustomerCreate
from cautela.schemas.equipment import (
    Equipment,
    EquipmentCreate,
    SerialNumber,
    SerialNumberCreate,
)
from cautela.schemas.loan import Loan, LoanCreate, LoanDetail, LoanPage, LoanStatusUpdate
from cautela.schemas.user import PasswordReset, User as UserOut, UserCreate, UserUpdate

router = APIRouter()


def extract_session(request: Request, session: Optional[str] = Cookie(None)) -> Optional[str]:
    """The session cookie, or else the token of an `Authorization: Bearer` header."""
    if not session:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            session = auth_header.split(" ", 1)[1]
    return session


def get_claims(token: Optional[str] = Depends(extract_session)) -> Claims:
    if claims := auth.verify_session_token(token):
        return claims
    raise UnauthorizedError()


def requires(permission: Permission):
    """Dependency returning the caller's Claims if they hold `permission`."""
    def check(claims: Claims = Depends(get_claims)) -> Claims:
        if not claims.has(permission):
            raise UnauthorizedError("Insufficient permissions")
        return claims
    return check


def docx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=documents.DOCX_MEDIA_TYPE,
        headers=documents.attachment_headers(filename),
    )


# Equipment

@router.get("/equipments", response_model=List[Equipment])
def get_equipments(session=Depends(get_session)):
    return catalog.list_equipments(session)

@router.get("/equipments/{equipment_id}", response_model=Equipment)
def get_equipment(equipment_id: int, session=Depends(get_session)):
    return catalog.get_equipment(session, equipment_id)

@router.post("/equipments", response_model=Equipment, status_code=status.HTTP_201_CREATED)
def create_equipment(
        data: EquipmentCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_EQUIPMENTS))):
    return catalog.create_equipment(session, data)

@router.put("/equipments/{equipment_id}", response_model=Equipment)
def update_equipment(
        equipment_id: int, data: EquipmentCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_EQUIPMENTS))):
    return catalog.update_equipment(session, equipment_id, data)

@router.delete("/equipments/{equipment_id}")
def delete_equipment(
        equipment_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_EQUIPMENTS))):
    return catalog.delete_equipment(session, equipment_id)


# Categories

@router.get("/categories", response_model=List[Category])
def get_categories(session=Depends(get_session)):
    return catalog.list_categories(session)

@router.post("/categories", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
        data: CategoryCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_CATEGORIES))):
    return catalog.create_category(session, data)

@router.patch("/categories/{category_id}", response_model=Category)
def update_category(
        category_id: int, data: CategoryCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_CATEGORIES))):
    return catalog.update_category(session, category_id, data)

@router.delete("/categories/{category_id}", response_model=CategoryDeleted)
def delete_category(
        category_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_CATEGORIES))):
    """Deletes the category with all of its equipment and serial numbers."""
    return catalog.delete_category(session, category_id)


# Serial numbers

@router.get("/serial-numbers", response_model=List[SerialNumber])
def get_serial_numbers(session=Depends(get_session)):
    return catalog.list_serial_numbers(session)

@router.post("/serial-numbers", response_model=SerialNumber, status_code=status.HTTP_201_CREATED)
def create_serial_number(
        data: SerialNumberCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_EQUIPMENTS))):
    return catalog.create_serial_number(session, data)


# Customers

@router.get("/customers", response_model=List[Customer])
def get_customers(session=Depends(get_session)):
    return customers.list_customers(session)

@router.post("/customers", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(
        data: CustomerCreate, session=Depends(get_session),
        claims: Claims = Depends(get_claims)):
    return customers.create_customer(session, data)


# Loans

@router.get("/loans", response_model=LoanPage)
def get_loans(
        page: int = 1, limit: int = DEFAULT_PAGE_SIZE,
        session=Depends(get_session), claims: Claims = Depends(get_claims)):
    page, limit = max(page, 1), max(limit, 1)
    items, total = loans.list_loans(session, claims, page=page, limit=limit)
    return {
        "loans": items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }

@router.get("/loans/{loan_id}", response_model=LoanDetail)
def get_loan(loan_id: int, session=Depends(get_session), claims: Claims = Depends(get_claims)):
    return loans.get_loan(session, claims, loan_id)

@router.post("/loans", response_model=Loan, status_code=status.HTTP_201_CREATED)
def create_loan(
        data: LoanCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.CREATE_LOANS))):
    return loans.create_loan(session, claims, data)

@router.patch("/loans/{loan_id}", response_model=LoanDetail)
def update_loan(
        loan_id: int, data: LoanStatusUpdate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.ADMIN))):
    return loans.update_loan_status(session, loan_id, data.status)

@router.get("/loans/{loan_id}/download")
def download_loan(
        loan_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.ADMIN))):
    loan = loans.get_loan(session, claims, loan_id)
    content = documents.render(documents.LOAN_RECEIPT, documents.loan_context(loan))
    return docx_response(content, documents.loan_filename(loan))


# Users

@router.get("/users", response_model=List[UserOut])
def get_users(
        session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_USERS))):
    return users.list_users(session)

@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
        data: UserCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_USERS))):
    return users.create_user(session, data)

@router.get("/users/{user_id}", response_model=UserOut)
def get_user(
        user_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_USERS))):
    return users.get_user(session, user_id)

@router.patch("/users/{user_id}", response_model=UserOut)
def update_user(
        user_id: int, data: UserUpdate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_USERS))):
    return users.update_user(session, user_id, data)

@router.delete("/users/{user_id}")
def delete_user(
        user_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_USERS))):
    users.delete_user(session, claims, user_id)
    return {"success": True}

@router.patch("/users/{user_id}/reset-password", response_model=PasswordReset)
def reset_password(
        user_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_USERS))):
    user, new_password = users.reset_password(session, user_id)
    return {"success": True, "new_password": new_password, "user": user}


# Alterations

@router.get("/alterations", response_model=List[Alteration])
def get_alterations(session=Depends(get_session)):
    return alterations.list_alterations(session)

@router.post("/alterations", response_model=Alteration, status_code=status.HTTP_201_CREATED)
def create_alteration(
        data: AlterationCreate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_CATEGORIES))):
    return alterations.create_alteration(session, data)

@router.put("/alterations/{alteration_id}", response_model=Alteration)
def update_alteration(
        alteration_id: int, data: AlterationUpdate, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.MANAGE_CATEGORIES))):
    return alterations.update_alteration(session, alteration_id, data)

@router.get("/alterations/{alteration_id}/download")
def download_alteration(
        alteration_id: int, session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.ADMIN))):
    alteration = alterations.get_alteration(session, alteration_id)
    content = documents.render(
        documents.ALTERATION_FORM, documents.alteration_context(alteration))
    return docx_response(content, documents.alteration_filename(alteration))


# Dashboard and reports

@router.get("/stats")
def get_stats(session=Depends(get_session)):
    return stats.dashboard_stats(session)

@router.get("/ready/download")
def download_ready(
        session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.GENERATE_REPORTS))):
    """Stock snapshot signed by the caller, without the excluded categories."""
    context = documents.ready_context(
        session,
        exclude_categories=READY_EXCLUDED_CATEGORIES,
        actor=session.get(User, claims.user_id),
    )
    content = documents.render(documents.READY_SNAPSHOT, context)
    return docx_response(content, documents.report_filename())

@router.get("/reports/daily", name="daily_report")
def download_daily_report(
        session=Depends(get_session),
        claims: Claims = Depends(requires(Permission.GENERATE_REPORTS))):
    content = documents.render(
        documents.DAILY_REPORT, documents.daily_report_context(session))
    return docx_response(content, documents.report_filename())

@router.post("/reports/daily")
def request_daily_report(
        request: Request,
        claims: Claims = Depends(requires(Permission.GENERATE_REPORTS))):
    """Tells the client where to download today's report from."""
    documents.template_path(documents.DAILY_REPORT)
    return {
        "success": True,
        "filename": documents.report_filename(),
        "downloadUrl": str(request.url_for("daily_report")),
    }
