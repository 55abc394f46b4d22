"""
Fehlerklassen des Rechnungsgenerators.
"""

from __future__ import annotations


class InvoiceError(Exception):
    """Basisklasse für alle Fehler des Rechnungsgenerators."""


class ComplianceError(InvoiceError, ValueError):
    """Die Rechnung erfüllt die Pflichtangaben nach deutschem Recht nicht."""

    MISSING_TAX_IDENTIFIER = "missing_tax_identifier"
    NO_LINE_ITEMS = "no_line_items"

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class InvoiceParseError(InvoiceError, ValueError):
    """Das Eingabedokument kann nicht in Rechnungsdaten übersetzt werden."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
