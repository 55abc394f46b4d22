"""
Layout einer einseitigen Rechnung.

Die Layout-Engine kennt kein PDF-Format, sondern zeichnet über eine
PageSurface (Text, Linien, Rechtecke, Bilder und Textbreitenmessung).
Die Positionen werden von oben nach unten über einen Cursor (``_y``)
vergeben, der nur kleiner wird.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4

from invoice_format import FormatConfig, format_currency, format_date, format_quantity, format_rate
from invoice_logo import ResolvedLogo, fit_logo
from invoice_models import InvoiceData, InvoiceTotals, LineItem, translate_unit

logger = logging.getLogger(__name__)


# =============================================================================
# Konfiguration
# =============================================================================

@dataclass(frozen=True)
class LayoutConfig:
    """Konfiguration für das PDF-Layout (alle Maße in Punkt)."""

    # Seite
    page_width: float = A4[0]
    page_height: float = A4[1]
    margin: float = 50

    # Tabelle: Pos, Beschreibung, Menge, Einheit, Einzelpreis, USt., Gesamt.
    # None = Restbreite
    column_widths: tuple[Optional[float], ...] = (30, None, 40, 45, 70, 40, 80)
    column_align: tuple[str, ...] = ("center", "left", "right", "center", "right", "right", "right")
    cell_padding: float = 5
    header_height: float = 28
    header_text_offset: float = 18
    min_row_height: float = 22
    row_padding_y: float = 5.5
    row_text_offset: float = 15

    # Schriftgrößen
    font_size_title: float = 28
    font_size_recipient: float = 11
    font_size_normal: float = 9
    font_size_small: float = 8
    font_size_total: float = 11

    # Abstände
    line_height: float = 11
    title_offset: float = 20
    title_gap: float = 80
    sender_gap: float = 20
    address_line_height: float = 14
    section_gap: float = 40
    table_gap: float = 20
    totals_line_height: float = 14

    # Metadaten (rechts)
    meta_width: float = 180
    meta_offset: float = 60
    meta_line_height: float = 14

    # Fußzeile
    footer_y: float = 60
    footer_line_height: float = 10
    footer_column_width: float = 180
    footer_rule_offset: float = 15

    # Logo wird etwas höher gesetzt
    logo_raise: float = 15

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin


@dataclass(frozen=True)
class StyleConfig:
    """Konfiguration für Farben und Schriften."""

    text_color: colors.Color = colors.black
    secondary_color: colors.Color = colors.HexColor("#6b7280")
    background_color: colors.Color = colors.HexColor("#f9fafb")
    separator_color: colors.Color = colors.HexColor("#e5e7eb")
    rule_color: colors.Color = colors.black

    rule_width: float = 1.0
    separator_width: float = 0.5

    font_regular: str = "Helvetica"
    font_bold: str = "Helvetica-Bold"


# =============================================================================
# Zeichenfläche
# =============================================================================

@dataclass(frozen=True)
class EmbeddedImage:
    """Ein in die Zeichenfläche eingebettetes Bild."""
    handle: Any
    width: float
    height: float


class PageSurface(Protocol):
    """Zeichenprimitive einer Seite (Koordinaten von unten links)."""

    width: float
    height: float

    def draw_text(self, text: str, x: float, y: float, font: str, size: float,
                  color: colors.Color) -> None: ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  thickness: float, color: colors.Color) -> None: ...

    def draw_rect(self, x: float, y: float, width: float, height: float,
                  color: colors.Color) -> None: ...

    def embed_image(self, data: bytes, fmt: str) -> EmbeddedImage: ...

    def draw_image(self, image: EmbeddedImage, x: float, y: float,
                   width: float, height: float) -> None: ...

    def text_width(self, text: str, font: str, size: float) -> float: ...


# =============================================================================
# Hilfsfunktionen
# =============================================================================

def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """
    Bricht Text an Leerzeichen um, ohne Wörter zu trennen.

    Wörter werden gierig in eine Zeile gepackt, bis das nächste Wort die
    Breite überschreiten würde. Ein einzelnes überlanges Wort steht allein
    in seiner Zeile.

    Args:
        text: Der umzubrechende Text
        max_width: Verfügbare Breite
        measure: Liefert die Breite eines Strings

    Returns:
        Liste der Zeilen (mindestens eine)
    """
    words = text.split()
    if not words:
        return [""]

    lines = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def _parse_color(value: Optional[str], fallback: colors.Color) -> colors.Color:
    if not value:
        return fallback
    try:
        return colors.HexColor(value)
    except ValueError:
        logger.warning("Ungültige Akzentfarbe %r, verwende Standardfarbe", value)
        return fallback


# =============================================================================
# Layout-Engine
# =============================================================================

class InvoiceLayout:
    """
    Zeichnet eine Rechnung auf eine PageSurface.

    Beispiel:
        ```python
        totals = compute_totals(invoice.line_items, invoice.shipping)
        InvoiceLayout(invoice, totals, surface).render()
        ```
    """

    def __init__(
        self,
        invoice: InvoiceData,
        totals: InvoiceTotals,
        surface: PageSurface,
        logo: Optional[ResolvedLogo] = None,
        layout: Optional[LayoutConfig] = None,
        style: Optional[StyleConfig] = None,
        formatting: Optional[FormatConfig] = None,
    ):
        self.invoice = invoice
        self.totals = totals
        self.surface = surface
        self.logo = logo
        self.layout = layout or LayoutConfig()
        self.style = style or StyleConfig()
        self.formatting = formatting or FormatConfig(currency=invoice.currency)

        self._accent = _parse_color(invoice.accent_color, self.style.text_color)
        self._y: float = self.layout.page_height - self.layout.margin

        # Spaltengrenzen
        fixed = sum(w for w in self.layout.column_widths if w is not None)
        flexible = self.layout.content_width - fixed
        self._col_widths = [w if w is not None else flexible for w in self.layout.column_widths]
        self._col_x = [self.layout.margin]
        for width in self._col_widths[:-1]:
            self._col_x.append(self._col_x[-1] + width)
        self._table_right = self._col_x[-1] + self._col_widths[-1]

    @property
    def cursor(self) -> float:
        """Aktuelle Y-Position."""
        return self._y

    @property
    def description_width(self) -> float:
        """Nutzbare Textbreite der Beschreibungsspalte."""
        return self._col_widths[1] - 2 * self.layout.cell_padding

    def render(self) -> None:
        """Rendert die komplette Seite."""
        self._y = self.layout.page_height - self.layout.margin

        self._render_logo()
        self._render_title()
        self._render_sender_line()
        self._render_recipient()
        meta_bottom = self._render_meta()

        self._y = min(self._y, meta_bottom) - self.layout.section_gap
        self._render_items_table()
        self._render_totals()
        self._render_payment_terms()
        self._render_notes()
        self._render_footer()

        logger.debug("Layout fertig: %d Positionen", len(self.invoice.line_items))

    # -------------------------------------------------------------------------
    # Zeichenhilfen
    # -------------------------------------------------------------------------

    def _text(self, text: str, x: float, y: float, *, bold: bool = False,
              size: Optional[float] = None, color: Optional[colors.Color] = None) -> None:
        self.surface.draw_text(
            text, x, y,
            self.style.font_bold if bold else self.style.font_regular,
            size or self.layout.font_size_normal,
            color or self.style.text_color,
        )

    def _right_text(self, text: str, right_x: float, y: float, *, bold: bool = False,
                    size: Optional[float] = None, color: Optional[colors.Color] = None) -> None:
        size = size or self.layout.font_size_normal
        font = self.style.font_bold if bold else self.style.font_regular
        width = self.surface.text_width(text, font, size)
        self._text(text, right_x - width, y, bold=bold, size=size, color=color)

    def _cell_text(self, text: str, column: int, y: float, *, bold: bool = False,
                   color: Optional[colors.Color] = None) -> None:
        """Setzt Text gemäß Spaltenausrichtung in eine Tabellenzelle."""
        x = self._col_x[column]
        width = self._col_widths[column]
        padding = self.layout.cell_padding
        align = self.layout.column_align[column]

        if align == "right":
            self._right_text(text, x + width - padding, y, bold=bold, color=color)
        elif align == "center":
            font = self.style.font_bold if bold else self.style.font_regular
            text_w = self.surface.text_width(text, font, self.layout.font_size_normal)
            self._text(text, x + (width - text_w) / 2, y, bold=bold, color=color)
        else:
            self._text(text, x + padding, y, bold=bold, color=color)

    def _measure(self, size: Optional[float] = None, bold: bool = False) -> Callable[[str], float]:
        font = self.style.font_bold if bold else self.style.font_regular
        size = size or self.layout.font_size_normal
        return lambda text: self.surface.text_width(text, font, size)

    # -------------------------------------------------------------------------
    # Kopfbereich
    # -------------------------------------------------------------------------

    def _render_logo(self) -> None:
        """Rendert das Logo oben rechts (Fehler beim Einbetten sind nicht fatal)."""
        if self.logo is None:
            return
        try:
            image = self.surface.embed_image(self.logo.data, self.logo.format)
            width, height = fit_logo(image.width, image.height,
                                     self.logo.max_width, self.logo.max_height)
            self.surface.draw_image(
                image,
                self.layout.page_width - self.layout.margin - width,
                self._y - height + self.layout.logo_raise,
                width,
                height,
            )
        except Exception as e:
            logger.warning("Logo konnte nicht eingebettet werden: %s", e)

    def _render_title(self) -> None:
        self._text(
            self.invoice.t("invoice"),
            self.layout.margin,
            self._y - self.layout.title_offset,
            size=self.layout.font_size_title,
            color=self._accent,
        )
        self._y -= self.layout.title_gap

    def _render_sender_line(self) -> None:
        sender = self.invoice.sender
        line = f"{sender.name} · {sender.street} · {sender.postal_code} {sender.city}"
        self._text(line, self.layout.margin, self._y,
                   size=self.layout.font_size_small, color=self.style.secondary_color)
        self._y -= self.layout.sender_gap

    def _render_recipient(self) -> None:
        """Rendert den Empfängerblock (Name fett)."""
        recipient = self.invoice.recipient
        size = self.layout.font_size_recipient

        self._text(recipient.name, self.layout.margin, self._y, bold=True, size=size)
        self._y -= self.layout.address_line_height

        for line in recipient.to_lines():
            self._text(line, self.layout.margin, self._y, size=size)
            self._y -= self.layout.address_line_height

    def _render_meta(self) -> float:
        """
        Rendert die Rechnungsdaten rechts neben dem Empfänger.

        Returns:
            Y-Position unterhalb des Blocks
        """
        inv = self.invoice
        rows = [(inv.t("invoice_number"), inv.invoice_number)]
        if inv.order_number:
            rows.append((inv.t("order_number"), inv.order_number))
        rows.append((inv.t("invoice_date"), format_date(inv.issue_date)))
        # Lieferdatum wird unverändert übernommen (auch Zeiträume)
        rows.append((inv.t("delivery_date"), inv.delivery_date))
        if inv.due_date:
            rows.append((inv.t("due_date"), format_date(inv.due_date)))

        label_x = self.layout.page_width - self.layout.margin - self.layout.meta_width
        value_x = self.layout.page_width - self.layout.margin
        y = self.layout.page_height - self.layout.margin - self.layout.meta_offset

        for label, value in rows:
            self._text(label, label_x, y, color=self.style.secondary_color)
            self._right_text(value, value_x, y, bold=True)
            y -= self.layout.meta_line_height
        return y

    # -------------------------------------------------------------------------
    # Positionstabelle
    # -------------------------------------------------------------------------

    def measure_row(self, item: LineItem) -> tuple[list[str], float]:
        """
        Bricht die Beschreibung um und berechnet die Zeilenhöhe.

        Returns:
            Tupel (Beschreibungszeilen, Zeilenhöhe)
        """
        lines = wrap_text(item.description, self.description_width, self._measure())
        needed = len(lines) * self.layout.line_height + 2 * self.layout.row_padding_y
        return lines, max(self.layout.min_row_height, needed)

    def _render_items_table(self) -> None:
        """Rendert die Positionstabelle mit Kopfzeile."""
        self._render_table_header()

        items = self.invoice.line_items
        for index, item in enumerate(items):
            self._render_table_row(index, item)
            if index < len(items) - 1:
                self.surface.draw_line(
                    self.layout.margin, self._y, self._table_right, self._y,
                    self.style.separator_width, self.style.separator_color,
                )

        # Abschließende Linie
        self.surface.draw_line(
            self.layout.margin, self._y, self._table_right, self._y,
            self.style.rule_width, self.style.rule_color,
        )
        self._y -= self.layout.table_gap

    def _render_table_header(self) -> None:
        t = self.invoice.t
        height = self.layout.header_height

        self.surface.draw_rect(self.layout.margin, self._y - height,
                               self.layout.content_width, height,
                               self.style.background_color)

        labels = [t("position"), t("description"), t("quantity"), t("unit"),
                  t("unit_price"), t("vat"), t("total_gross")]
        header_y = self._y - self.layout.header_text_offset
        for column, label in enumerate(labels):
            self._cell_text(label, column, header_y, bold=True, color=self.style.secondary_color)

        self._y -= height
        self.surface.draw_line(
            self.layout.margin, self._y, self._table_right, self._y,
            self.style.rule_width, self.style.rule_color,
        )

    def _render_table_row(self, index: int, item: LineItem) -> None:
        """Rendert eine Position; ungerade Zeilen erhalten einen Hintergrund."""
        lines, height = self.measure_row(item)
        fmt = self.formatting

        if index % 2 == 1:
            self.surface.draw_rect(self.layout.margin, self._y - height,
                                   self.layout.content_width, height,
                                   self.style.background_color)

        cell_y = self._y - self.layout.row_text_offset
        # fehlende Position oder 0 -> laufende Nummer
        position = item.position or index + 1

        self._cell_text(str(position), 0, cell_y)
        for offset, line in enumerate(lines):
            self._cell_text(line, 1, cell_y - offset * self.layout.line_height)
        self._cell_text(format_quantity(item.quantity, fmt), 2, cell_y)
        self._cell_text(translate_unit(item.unit, self.invoice.language), 3, cell_y)
        self._cell_text(format_currency(item.unit_price, fmt), 4, cell_y)
        self._cell_text(format_rate(item.tax_rate, fmt), 5, cell_y)
        self._cell_text(format_currency(item.gross_amount, fmt), 6, cell_y)

        self._y -= height

    # -------------------------------------------------------------------------
    # Summen, Hinweise, Fußzeile
    # -------------------------------------------------------------------------

    def _render_totals(self) -> None:
        """Rendert Versand, Netto, Steuern je Satz und den Rechnungsbetrag."""
        t = self.invoice.t
        fmt = self.formatting
        totals = self.totals
        label_x = self._col_x[5] + self._col_widths[5] - self.layout.cell_padding
        value_x = self._col_x[6] + self._col_widths[6] - self.layout.cell_padding

        rows: list[tuple[str, float]] = []
        if totals.shipping.gross > 0:
            shipping = self.invoice.shipping
            description = shipping.description if shipping and shipping.description else t("shipping")
            rows.append((f"{description}:", totals.shipping.gross))
        rows.append((t("total_net"), totals.net_total))
        for rate, amount in totals.sorted_tax_amounts():
            rows.append((f"{format_rate(rate, fmt)} {t('tax_label')}:", amount))

        for label, amount in rows:
            self._right_text(label, label_x, self._y)
            self._right_text(format_currency(amount, fmt), value_x, self._y)
            self._y -= self.layout.totals_line_height

        self._y -= 6

        # Rechnungsbetrag mit Linie
        size = self.layout.font_size_total
        label = t("invoice_total")
        label_width = self.surface.text_width(label, self.style.font_bold, size)
        self.surface.draw_line(label_x - label_width, self._y + 4, value_x, self._y + 4,
                               self.style.rule_width, self.style.rule_color)
        self._right_text(label, label_x, self._y - 8, bold=True, size=size)
        self._right_text(format_currency(totals.gross_total, fmt), value_x, self._y - 8,
                         bold=True, size=size)
        self._y -= self.layout.section_gap

    def _render_paragraphs(self, text: str) -> None:
        """Rendert mehrzeiligen Text über die volle Inhaltsbreite."""
        measure = self._measure()
        for paragraph in text.strip().split("\n"):
            for line in wrap_text(paragraph, self.layout.content_width, measure):
                self._text(line, self.layout.margin, self._y)
                self._y -= self.layout.line_height

    def _render_payment_terms(self) -> None:
        terms = self.invoice.payment_terms
        if not terms or not terms.strip():
            return
        self._text(self.invoice.t("payment_terms"), self.layout.margin, self._y, bold=True)
        self._y -= self.layout.line_height + 2
        self._render_paragraphs(terms)
        self._y -= self.layout.line_height

    def _render_notes(self) -> None:
        """Rendert den Hinweisblock, falls Hinweise vorhanden sind."""
        notes = self.invoice.notes
        if not notes or not notes.strip():
            return
        self._text(self.invoice.t("notes"), self.layout.margin, self._y, bold=True,
                   size=self.layout.font_size_total, color=self.style.secondary_color)
        self._y -= 16
        self._render_paragraphs(notes)
        self._y -= self.layout.line_height

    def footer_columns(self) -> tuple[list[str], list[str], list[str]]:
        """Inhalte der drei Fußzeilenspalten: Adresse, Steuer, Bank."""
        inv = self.invoice
        sender = inv.sender
        address = [sender.name, sender.street, f"{sender.postal_code} {sender.city}"]
        if sender.country:
            address.append(sender.country)
        if sender.email:
            address.append(sender.email)

        tax: list[str] = []
        if inv.tax_identifiers.ust_id_nr:
            tax.append(f"{inv.t('vat_id')} {inv.tax_identifiers.ust_id_nr}")
        if inv.tax_identifiers.steuernummer:
            tax.append(f"{inv.t('tax_number')} {inv.tax_identifiers.steuernummer}")
        legal = inv.legal_info
        if legal is not None:
            if legal.legal_form:
                tax.append(legal.legal_form)
            register = " ".join(p for p in (legal.register_court, legal.register_number) if p)
            if register:
                tax.append(register)
            if legal.managing_director:
                tax.append(f"{inv.t('managing_director')} {legal.managing_director}")

        bank_details = inv.bank_details
        bank = [
            bank_details.bank_name,
            f"{inv.t('iban')} {bank_details.iban}",
            f"{inv.t('bic')} {bank_details.bic}",
        ]
        if bank_details.account_holder:
            bank.append(bank_details.account_holder)
        return address, tax, bank

    def _render_footer(self) -> None:
        """Rendert die dreispaltige Fußzeile mit Trennlinie."""
        layout = self.layout
        rule_y = layout.footer_y + layout.footer_rule_offset
        self.surface.draw_line(layout.margin, rule_y, layout.page_width - layout.margin, rule_y,
                               self.style.separator_width, self.style.separator_color)

        for column, lines in enumerate(self.footer_columns()):
            x = layout.margin + column * layout.footer_column_width
            self._footer_column(x, lines)

    def _footer_column(self, x: float, lines: Sequence[str]) -> None:
        y = self.layout.footer_y
        for line in lines:
            self._text(line, x, y, size=self.layout.font_size_small,
                       color=self.style.secondary_color)
            y -= self.layout.footer_line_height
