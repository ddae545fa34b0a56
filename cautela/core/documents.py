#!/usr/bin/env python

"""
    Document generation for Cautela.

    Word (.docx) templates are filled with docxtpl, i.e. Jinja2 tags
    inside the document (`{{ lender }}`, `{%tr for e in equipments %}`
    for repeating table rows). This module only prepares the data and
    hands it to the template; it never builds the document format
    itself.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import io
import os
import logging
import unicodedata
from datetime import datetime
from urllib.parse import quote
from docxtpl import DocxTemplate
from jinja2 import Environment, StrictUndefined
from cautela.configs import TEMPLATES_DIR
from cautela.core.models import Category, Equipment, SerialStatusEnum
from cautela.core.exceptions import (
    CustomerNotFoundError,
    RenderError,
    TemplateNotFoundError,
)
from cautela.core.utils import (
    capitalize,
    condition_label,
    format_cpf,
    format_currency,
    format_date,
    format_name,
    rank_abbreviation,
)

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

LOAN_RECEIPT = "loan-equipments-form"
ALTERATION_FORM = "disclaimer"
DAILY_REPORT = "loan-ready"
READY_SNAPSHOT = "loan-ready-summary"

TEMPLATES = {
    LOAN_RECEIPT: "loan-equipments-form.docx",
    ALTERATION_FORM: "disclaimer.docx",
    DAILY_REPORT: "loan-ready.docx",
    READY_SNAPSHOT: "loan-ready-summary.docx",
}

ON_LOAN_PLACEHOLDER = {
    "material": "-", "numero_de": "-", "cliente": "-",
    "destino": "-", "quantidade": "-", "data": "-",
}
EQUIPMENT_PLACEHOLDER = {
    "material": "-", "numero_de": "-", "categoria": "-",
    "condicao": "-", "quantidade": "-", "preco": "-",
}


def template_path(template_id: str) -> str:
    filename = TEMPLATES.get(template_id)
    path = os.path.join(TEMPLATES_DIR, filename) if filename else None
    if not path or not os.path.isfile(path):
        raise TemplateNotFoundError(f"Template '{template_id}' not found")
    return path


def render(template_id: str, data: dict) -> bytes:
    """
    Fills template `template_id` with `data` and returns the .docx bytes.

    Raises:
        TemplateNotFoundError: there is no such template file.
        RenderError: the template is malformed or uses a field that
            `data` does not provide.
    """
    path = template_path(template_id)
    try:
        doc = DocxTemplate(path)
        doc.render(data, jinja_env=Environment(undefined=StrictUndefined), autoescape=True)
        buffer = io.BytesIO()
        doc.save(buffer)
    except Exception as e:
        logger.error(f"Failed to render template '{template_id}': {e}")
        raise RenderError(f"Failed to generate document: {e}") from e
    logger.info(f"Rendered document from template '{template_id}'")
    return buffer.getvalue()


def attachment_headers(filename: str) -> dict:
    """Content-Disposition for a download, with an ASCII fallback name."""
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode()
    return {
        "Content-Disposition":
            f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
    }


def loan_context(loan) -> dict:
    customer = loan.customer
    lender = loan.lender

    equipments = []
    for loan_equipment in loan.equipments:
        equipment = loan_equipment.equipment
        serials = ", ".join(
            link.serial_number.number for link in loan.serial_numbers
            if link.serial_number.equipment_id == loan_equipment.equipment_id
        )
        equipments.append({
            "material": equipment.name,
            "numero_de": serials or "-",
            "tipo": equipment.description or "-",
            "condicao": condition_label(equipment.condition),
            "quantidade": str(loan_equipment.quantity),
            "preco": format_currency(loan_equipment.total_price),
        })

    return {
        "receiver": capitalize(customer.name) if customer else "-",
        "rank": (rank_abbreviation(customer.rank) if customer else "") or "-",
        "warName": (capitalize(customer.war_name) if customer else "") or "-",
        "lenderRank": rank_abbreviation(lender.rank) or "-",
        "lender": capitalize(lender.name) or "-",
        "date": format_date(loan.date),
        "devolutionDate": format_date(loan.devolution_date),
        "observation": loan.observation or "Sem observação",
        "equipments": equipments,
        "totalPrice": format_currency(loan.total_price),
        "militaryOrganization": (customer.military_organization if customer else "") or "-",
        "function": lender.function_name or "-",
        "nrcautela": loan.order_number,
    }


def loan_filename(loan) -> str:
    return f"loan-{loan.id}.docx"


def _alteration_customer(alteration):
    customer = alteration.customer or (alteration.loan.customer if alteration.loan else None)
    if not customer:
        raise CustomerNotFoundError()
    return customer


def alteration_context(alteration) -> dict:
    customer = _alteration_customer(alteration)
    return {
        "name": format_name(customer.name),
        "warName": format_name(customer.war_name) if customer.war_name else "-",
        "document": format_cpf(customer.document),
        "militaryOrganization": customer.military_organization or "-",
        "mission": alteration.mission,
        "location": alteration.location,
        "date": format_date(alteration.date),
        "equipmentName": alteration.equipment,
        "amount": alteration.amount,
        "serialNumber": ", ".join(alteration.serial_numbers or []),
        "desc": alteration.description,
        "rank": rank_abbreviation(customer.rank),
    }


def alteration_filename(alteration) -> str:
    customer = _alteration_customer(alteration)
    name = f"alteracao-{rank_abbreviation(customer.rank)}-{customer.war_name or customer.name}.docx"
    return "-".join(name.split())


def _stock_tables(session, exclude_categories=(), customer_field="name"):
    """
    Rows for the two stock report tables: units currently ON_LOAN with
    their open loan, and every equipment. Also returns the total value
    of the stock.
    """
    query = session.query(Equipment).join(Category)
    if exclude_categories:
        query = query.filter(Category.name.notin_(list(exclude_categories)))
    equipments = query.order_by(Equipment.name.asc()).all()

    on_loan = []
    for equipment in equipments:
        for serial in equipment.serial_numbers:
            if serial.status != SerialStatusEnum.ON_LOAN:
                continue
            loan = serial.open_loan
            customer = loan.customer if loan else None
            on_loan.append({
                "material": equipment.name,
                "numero_de": serial.number,
                "cliente": (getattr(customer, customer_field) if customer else None) or "-",
                "destino": (loan.mission if loan else None) or "-",
                "quantidade": "1",
                "data": format_date(loan.date) if loan else "-",
            })

    all_equipments = [{
        "material": equipment.name,
        "numero_de": ", ".join(s.number for s in equipment.serial_numbers) or "-",
        "categoria": equipment.category.name,
        "condicao": condition_label(equipment.condition),
        "quantidade": str(equipment.amount),
        "preco": format_currency(equipment.unit_price),
    } for equipment in equipments]

    total = sum((e.unit_price or 0) * e.amount for e in equipments)
    return (
        on_loan or [dict(ON_LOAN_PLACEHOLDER)],
        all_equipments or [dict(EQUIPMENT_PLACEHOLDER)],
        total,
    )


def daily_report_context(session) -> dict:
    on_loan, all_equipments, total = _stock_tables(session)
    return {
        "date": format_date(datetime.now()),
        "Requipments": on_loan,
        "Equipments": all_equipments,
        "dataProco": format_currency(total),
    }


def ready_context(session, exclude_categories=(), actor=None) -> dict:
    """The "ready" snapshot, signed by `actor` (a User)."""
    on_loan, all_equipments, total = _stock_tables(
        session, exclude_categories=exclude_categories, customer_field="war_name")
    return {
        "date": format_date(datetime.now()),
        "warName": (actor.war_name if actor else None) or "-",
        "rank": rank_abbreviation(actor.rank or "") if actor else "P/G não identificado",
        "Requipments": on_loan,
        "Equipments": all_equipments,
        "dataProco": format_currency(total),
    }


def report_filename() -> str:
    return f"situacao-equipamentos-{datetime.now().strftime('%d-%m-%Y')}.docx"
