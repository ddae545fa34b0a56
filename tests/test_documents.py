#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_documents
    ~~~~~~~~~~~~~~~~~~~~

    Document generation: template lookup, rendering and the data each
    document is filled with.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

import io
import pytest
from datetime import datetime
from docx import Document
from unittest.mock import patch
from cautela.core import documents, loans, alterations
from cautela.core.exceptions import RenderError, TemplateNotFoundError
from cautela.core.models import Category, Equipment, SerialNumber, SerialStatusEnum
from cautela.core.permissions import Role
from cautela.schemas.alteration import AlterationCreate
from cautela.schemas.loan import LoanCreate


def document_text(content):
    document = Document(io.BytesIO(content))
    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text for cell in row.cells))
    return "\n".join(lines)


@pytest.fixture
def templates_dir(tmp_path):
    with patch("cautela.core.documents.TEMPLATES_DIR", str(tmp_path)):
        yield tmp_path


@pytest.fixture
def loan(db_session, radio, customer, make_user, claims_for):
    lender = make_user(
        Role.ADMIN, name="pedro alves", rank="CAP", war_name="Alves", function_name="S4")
    sn1 = db_session.query(SerialNumber).filter_by(number="SN-1").one()
    return loans.create_loan(db_session, claims_for(lender), LoanCreate(
        customer_id=customer.id,
        equipments=[{"equipment_id": radio.id, "quantity": 2, "serial_numbers": [sn1.id]}],
        mission="Operação Ágata",
        devolution_date=datetime(2025, 6, 30),
    ))


def test_render_fills_template(templates_dir):
    template = Document()
    template.add_paragraph("Nome: {{ name }}")
    template.add_paragraph("Missão: {{ mission }}")
    template.save(templates_dir / "disclaimer.docx")

    content = documents.render(
        documents.ALTERATION_FORM, {"name": "Ana & Bia", "mission": "<Ágata>"})

    text = document_text(content)
    assert "Nome: Ana & Bia" in text
    assert "Missão: <Ágata>" in text


def test_render_repeats_table_rows(templates_dir):
    template = Document()
    table = template.add_table(rows=4, cols=2)
    table.rows[0].cells[0].text = "Material"
    table.rows[0].cells[1].text = "Qtd"
    table.rows[1].cells[0].text = "{%tr for e in equipments %}"
    table.rows[2].cells[0].text = "{{ e.material }}"
    table.rows[2].cells[1].text = "{{ e.quantidade }}"
    table.rows[3].cells[0].text = "{%tr endfor %}"
    template.save(templates_dir / "loan-equipments-form.docx")

    content = documents.render(documents.LOAN_RECEIPT, {"equipments": [
        {"material": "Radio X", "quantidade": "2"},
        {"material": "Lanterna", "quantidade": "5"},
    ]})

    rows = Document(io.BytesIO(content)).tables[0].rows
    assert [[c.text for c in row.cells] for row in rows] == [
        ["Material", "Qtd"], ["Radio X", "2"], ["Lanterna", "5"]]


def test_missing_field_raises_render_error(templates_dir):
    template = Document()
    template.add_paragraph("{{ receiver }} {{ nrcautela }}")
    template.save(templates_dir / "loan-equipments-form.docx")

    with pytest.raises(RenderError):
        documents.render(documents.LOAN_RECEIPT, {"receiver": "Silva"})


def test_missing_template(templates_dir):
    with pytest.raises(TemplateNotFoundError):
        documents.render(documents.DAILY_REPORT, {})
    with pytest.raises(TemplateNotFoundError):
        documents.template_path("no-such-template")


def test_attachment_headers():
    headers = documents.attachment_headers("alteracao-3º Sgt-Silva.docx")
    disposition = headers["Content-Disposition"]
    assert disposition.startswith('attachment; filename="alteracao-3o Sgt-Silva.docx"')
    assert "filename*=UTF-8''alteracao-3%C2%BA%20Sgt-Silva.docx" in disposition


def test_loan_context(loan):
    context = documents.loan_context(loan)

    assert context["receiver"] == "João Da Silva"
    assert context["rank"] == "3º Sgt"
    assert context["warName"] == "Silva"
    assert context["lender"] == "Pedro Alves"
    assert context["lenderRank"] == "Cap"
    assert context["function"] == "S4"
    assert context["devolutionDate"] == "30/06/2025"
    assert context["observation"] == "Sem observação"
    assert context["nrcautela"] == loan.order_number
    assert context["totalPrice"] == "R$ 300,00"
    assert context["equipments"] == [{
        "material": "Radio X",
        "numero_de": "SN-1",
        "tipo": "-",
        "condicao": "BOM",
        "quantidade": "2",
        "preco": "R$ 300,00",
    }]


def test_stock_contexts(db_session, loan, make_user):
    intendencia = Category(name="Intendência")
    db_session.add(intendencia)
    db_session.flush()
    db_session.add(Equipment(name="Barraca", category_id=intendencia.id, amount=3, unit_price=100))
    db_session.commit()

    daily = documents.daily_report_context(db_session)
    assert [e["material"] for e in daily["Equipments"]] == ["Barraca", "Radio X"]
    assert daily["Requipments"] == [{
        "material": "Radio X",
        "numero_de": "SN-1",
        "cliente": "joão da silva",
        "destino": "Operação Ágata",
        "quantidade": "1",
        "data": documents.format_date(loan.date),
    }]
    # 3 x 100 + 3 x 150
    assert daily["dataProco"] == "R$ 750,00"

    actor = make_user(Role.SUPER_ADMIN, rank="MAJ", war_name="Costa")
    ready = documents.ready_context(
        db_session, exclude_categories=["Intendência"], actor=actor)
    assert [e["material"] for e in ready["Equipments"]] == ["Radio X"]
    assert ready["Requipments"][0]["cliente"] == "silva"
    assert ready["rank"] == "Maj"
    assert ready["warName"] == "Costa"
    assert ready["dataProco"] == "R$ 450,00"


def test_empty_stock_uses_placeholder_rows(db_session):
    context = documents.daily_report_context(db_session)
    assert context["Requipments"] == [documents.ON_LOAN_PLACEHOLDER]
    assert context["Equipments"] == [documents.EQUIPMENT_PLACEHOLDER]
    assert context["dataProco"] == "R$ 0,00"


def test_shipped_templates_render(db_session, loan, customer, make_user):
    receipt = document_text(documents.render(
        documents.LOAN_RECEIPT, documents.loan_context(loan)))
    assert f"Nº {loan.order_number}" in receipt
    assert "Radio X | SN-1" in receipt

    alteration = alterations.create_alteration(db_session, AlterationCreate(
        description="Antena quebrada", mission="Operação Ágata", location="Tabatinga",
        date=datetime(2025, 5, 2), customer_id=customer.id, equipment="Radio X",
        serial_numbers=["SN-1"], amount="1"))
    disclaimer = document_text(documents.render(
        documents.ALTERATION_FORM, documents.alteration_context(alteration)))
    assert "123.456.789-01" in disclaimer
    assert "Antena quebrada" in disclaimer
    assert documents.alteration_filename(alteration) == "alteracao-3º-Sgt-silva.docx"

    report = document_text(documents.render(
        documents.DAILY_REPORT, documents.daily_report_context(db_session)))
    assert "Radio X | SN-1 | joão da silva" in report

    actor = make_user(Role.SUPER_ADMIN, rank="MAJ", war_name="Costa")
    summary = document_text(documents.render(
        documents.READY_SNAPSHOT, documents.ready_context(db_session, actor=actor)))
    assert "Maj Costa" in summary


def test_serials_on_loan_without_open_loan(db_session, radio):
    sn1 = db_session.query(SerialNumber).filter_by(number="SN-1").one()
    sn1.status = SerialStatusEnum.ON_LOAN
    db_session.commit()

    row = documents.daily_report_context(db_session)["Requipments"][0]
    assert row["numero_de"] == "SN-1"
    assert row["cliente"] == "-"
    assert row["data"] == "-"
