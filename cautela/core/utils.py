import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP


RANK_ABBREVIATIONS = {
    "CEL": "Cel",
    "TEN_CEL": "Ten Cel",
    "MAJ": "Maj",
    "CAP": "Cap",
    "TEN_1": "1º Ten",
    "TEN_2": "2º Ten",
    "STEN": "Sub Ten",
    "SGT_1": "1º Sgt",
    "SGT_2": "2º Sgt",
    "SGT_3": "3º Sgt",
    "CB": "Cb",
    "SD_EP": "Sd EP",
    "SD_EV": "Sd EV",
}

# Kept lowercase by format_name
NAME_PARTICLES = {"de", "da", "do", "das", "dos", "e"}

CONDITION_LABELS = {
    "NEW": "NOVO",
    "GOOD": "BOM",
    "FAIR": "REGULAR",
    "POOR": "RUIM",
}


def rank_abbreviation(rank) -> str:
    if not rank:
        return ""
    return RANK_ABBREVIATIONS.get(rank, rank)

def format_name(name) -> str:
    if not name:
        return "-"
    return " ".join(
        word if word in NAME_PARTICLES else word[:1].upper() + word[1:]
        for word in name.lower().split(" ")
    )

def capitalize(text) -> str:
    """Uppercases the first letter of every word."""
    if not text:
        return ""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))

def format_cpf(document) -> str:
    if not document:
        return "-"
    digits = re.sub(r"\D", "", document)
    if len(digits) != 11:
        return document
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"

def format_currency(value) -> str:
    """Brazilian real, e.g. `R$ 1234,50`."""
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"R$ {amount}".replace(".", ",")

def format_date(value) -> str:
    """dd/mm/yyyy, or `-` when there is no date."""
    if not value:
        return "-"
    if isinstance(value, (datetime, date)):
        return value.strftime("%d/%m/%Y")
    return str(value)

def condition_label(condition) -> str:
    value = getattr(condition, "value", condition)
    return CONDITION_LABELS.get(value, value or "-")
