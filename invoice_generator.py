"""
Professioneller PDF-Rechnungsgenerator nach deutschem Recht

Ablauf einer Erzeugung:
- Pflichtangaben prüfen (Steuer-Identifikation, Positionen)
- Summen je Steuersatz berechnen (Bruttopreise, Versand mit Hauptsteuersatz)
- Logo auflösen (Base64 oder Datei, Fehler nicht fatal)
- Seite über die Layout-Engine auf eine reportlab-Zeichenfläche zeichnen
- PDF serialisieren und optional speichern
"""

from __future__ import annotations

import json
import logging
import os
import re
from io import BytesIO
from pathlib import Path
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from invoice_errors import InvoiceParseError
from invoice_format import FormatConfig
from invoice_layout import EmbeddedImage, InvoiceLayout, LayoutConfig, StyleConfig
from invoice_logo import resolve_logo
from invoice_models import InvoiceData
from invoice_totals import compute_totals
from invoice_validation import validate_invoice

logger = logging.getLogger(__name__)


# =============================================================================
# reportlab-Zeichenfläche
# =============================================================================

class ReportlabSurface:
    """
    Zeichenfläche auf Basis eines reportlab-Canvas im Speicher.

    Jede Instanz gehört zu genau einer Rechnung und wird nach ``save()``
    nicht weiterverwendet.
    """

    def __init__(
        self,
        page_size: tuple[float, float],
        title: str = "",
        author: str = "",
    ):
        self.width, self.height = page_size
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=page_size)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)

    def draw_text(self, text: str, x: float, y: float, font: str, size: float,
                  color: colors.Color) -> None:
        c = self._canvas
        c.setFont(font, size)
        c.setFillColor(color)
        c.drawString(x, y, text)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  thickness: float, color: colors.Color) -> None:
        c = self._canvas
        c.setStrokeColor(color)
        c.setLineWidth(thickness)
        c.line(x1, y1, x2, y2)

    def draw_rect(self, x: float, y: float, width: float, height: float,
                  color: colors.Color) -> None:
        c = self._canvas
        c.setFillColor(color)
        c.rect(x, y, width, height, stroke=0, fill=1)

    def embed_image(self, data: bytes, fmt: str) -> EmbeddedImage:
        """Liest ein Bild ein; ungültige Daten lösen hier einen Fehler aus."""
        reader = ImageReader(BytesIO(data))
        width, height = reader.getSize()
        logger.debug("Logo eingebettet (%s, %sx%s)", fmt, width, height)
        return EmbeddedImage(reader, width, height)

    def draw_image(self, image: EmbeddedImage, x: float, y: float,
                   width: float, height: float) -> None:
        self._canvas.drawImage(image.handle, x, y, width=width, height=height, mask="auto")

    def text_width(self, text: str, font: str, size: float) -> float:
        return pdfmetrics.stringWidth(text, font, size)

    def save(self) -> bytes:
        """Schließt die Seite ab und liefert die PDF-Bytes."""
        self._canvas.showPage()
        self._canvas.save()
        return self._buffer.getvalue()


# =============================================================================
# Öffentliche Funktionen
# =============================================================================

def default_filename(invoice_number: str) -> str:
    """Standard-Dateiname, z.B. ``Rechnung_RE_2025_001.pdf``."""
    return f"Rechnung_{re.sub(r'[^a-zA-Z0-9]', '_', invoice_number)}.pdf"


def generate_invoice_buffer(
    invoice: InvoiceData,
    layout: Optional[LayoutConfig] = None,
    style: Optional[StyleConfig] = None,
    formatting: Optional[FormatConfig] = None,
) -> bytes:
    """
    Generiert die PDF-Rechnung im Speicher.

    Args:
        invoice: Die zu generierende Rechnung
        layout: Optionale Layout-Konfiguration
        style: Optionale Style-Konfiguration
        formatting: Optionale Formatierung (Standard: deutsch, Rechnungswährung)

    Returns:
        Die PDF-Datei als Bytes

    Raises:
        ComplianceError: Bei fehlenden Pflichtangaben
    """
    # Validierung vor jeder Ressourcenanlage
    validate_invoice(invoice)

    layout = layout or LayoutConfig()
    totals = compute_totals(invoice.line_items, invoice.shipping)
    logo = resolve_logo(invoice.logo)

    surface = ReportlabSurface(
        (layout.page_width, layout.page_height),
        title=f"{invoice.t('invoice')} {invoice.invoice_number}",
        author=invoice.sender.name,
    )
    InvoiceLayout(
        invoice, totals, surface,
        logo=logo, layout=layout, style=style, formatting=formatting,
    ).render()
    return surface.save()


def generate_invoice(
    invoice: InvoiceData,
    output_path: Optional[str | Path] = None,
    **options,
) -> Path:
    """
    Generiert die PDF-Rechnung und speichert sie.

    Die Datei wird erst geschrieben, wenn das PDF vollständig erzeugt ist,
    und atomar an ihren Platz verschoben.

    Args:
        invoice: Die zu generierende Rechnung
        output_path: Zielpfad (Standard: ``Rechnung_<Nummer>.pdf``)
        **options: Weitergereicht an ``generate_invoice_buffer``

    Returns:
        Pfad zur generierten PDF-Datei

    Raises:
        ComplianceError: Bei fehlenden Pflichtangaben
        OSError: Bei Schreibfehlern
    """
    path = Path(output_path) if output_path else Path(default_filename(invoice.invoice_number))
    pdf_bytes = generate_invoice_buffer(invoice, **options)

    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(pdf_bytes)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise

    logger.info("Rechnung gespeichert: %s (%d Bytes)", path, len(pdf_bytes))
    return path


def load_invoice_from_file(path: str | Path) -> InvoiceData:
    """
    Liest Rechnungsdaten aus einer JSON-Datei.

    Raises:
        OSError: Wenn die Datei fehlt oder nicht lesbar ist
        json.JSONDecodeError: Bei ungültigem JSON
        InvoiceParseError: Wenn Pflichtfelder fehlen oder Werte ungültig sind
    """
    content = Path(path).resolve().read_text(encoding="utf-8")
    data = json.loads(content)
    if not isinstance(data, dict):
        raise InvoiceParseError("Rechnungsdaten müssen ein JSON-Objekt sein")
    return InvoiceData.from_dict(data)
