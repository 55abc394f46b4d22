"""
Prüfung der Pflichtangaben vor der PDF-Erzeugung.
"""

from __future__ import annotations

from typing import Optional

from invoice_errors import ComplianceError
from invoice_models import InvoiceData


def _has_value(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def validate_invoice(invoice: InvoiceData) -> None:
    """
    Prüft die Rechnung auf die Mindestanforderungen nach deutschem Recht.

    Weitere Felder (Datum, IBAN, E-Mail) werden bewusst nicht geprüft.

    Raises:
        ComplianceError: Wenn weder Steuernummer noch USt-IdNr. angegeben
            sind oder die Rechnung keine Positionen enthält
    """
    tax_ids = invoice.tax_identifiers
    if not (_has_value(tax_ids.steuernummer) or _has_value(tax_ids.ust_id_nr)):
        raise ComplianceError(
            "Mindestens eine Steuer-Identifikation (Steuernummer oder USt-IdNr.) "
            "ist für eine ordnungsgemäße Rechnung erforderlich",
            reason=ComplianceError.MISSING_TAX_IDENTIFIER,
        )

    if not invoice.line_items:
        raise ComplianceError(
            "Die Rechnung muss mindestens eine Position enthalten",
            reason=ComplianceError.NO_LINE_ITEMS,
        )
