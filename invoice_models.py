"""
Datenmodelle für Rechnungen nach deutschem Recht.

Enthält:
- Sprachen und Übersetzungen (Deutsch / Englisch)
- Unveränderliche Dataclasses für Absender, Empfänger, Positionen usw.
- Die berechneten Rechnungssummen (InvoiceTotals)
- Einlesen aus dem JSON-Eingabeformat (camelCase-Schlüssel)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from invoice_errors import InvoiceParseError


# =============================================================================
# Sprachen & Übersetzungen
# =============================================================================

class Language(Enum):
    """Unterstützte Sprachen."""
    DE = "de"
    EN = "en"


TRANSLATIONS: dict[Language, dict[str, str]] = {
    Language.DE: {
        "invoice": "RECHNUNG",
        "invoice_number": "Rechnungsnummer:",
        "order_number": "Bestellnummer:",
        "invoice_date": "Rechnungsdatum:",
        "delivery_date": "Lieferdatum:",
        "due_date": "Fällig am:",
        "position": "Pos.",
        "description": "Beschreibung",
        "quantity": "Menge",
        "unit": "Einheit",
        "unit_price": "Einzelpreis",
        "vat": "USt.",
        "total_gross": "Gesamt (brutto)",
        "total_net": "Gesamt Netto:",
        "tax_label": "Umsatzsteuer",
        "invoice_total": "Rechnungsbetrag:",
        "shipping": "Versandkosten",
        "payment_terms": "Zahlungsbedingungen:",
        "notes": "HINWEISE",
        "vat_id": "USt.-IdNr.:",
        "tax_number": "Steuernummer:",
        "managing_director": "Geschäftsführer:",
        "iban": "IBAN:",
        "bic": "BIC:",
    },
    Language.EN: {
        "invoice": "INVOICE",
        "invoice_number": "Invoice Number:",
        "order_number": "Order Number:",
        "invoice_date": "Invoice Date:",
        "delivery_date": "Delivery Date:",
        "due_date": "Due Date:",
        "position": "Pos.",
        "description": "Description",
        "quantity": "Qty",
        "unit": "Unit",
        "unit_price": "Unit Price",
        "vat": "VAT",
        "total_gross": "Total (gross)",
        "total_net": "Total Net:",
        "tax_label": "VAT",
        "invoice_total": "Invoice Total:",
        "shipping": "Shipping",
        "payment_terms": "Payment Terms:",
        "notes": "NOTES",
        "vat_id": "VAT ID:",
        "tax_number": "Tax Number:",
        "managing_director": "Managing Director:",
        "iban": "IBAN:",
        "bic": "BIC:",
    },
}


UNIT_TRANSLATIONS: dict[str, dict[Language, str]] = {
    "Stück": {Language.DE: "Stück", Language.EN: "Piece"},
    "Stk.": {Language.DE: "Stk.", Language.EN: "Pcs."},
    "Stunden": {Language.DE: "Stunden", Language.EN: "Hours"},
    "Std.": {Language.DE: "Std.", Language.EN: "Hrs."},
    "Tage": {Language.DE: "Tage", Language.EN: "Days"},
    "Pauschal": {Language.DE: "Pauschal", Language.EN: "Flat"},
    "Monat": {Language.DE: "Monat", Language.EN: "Month"},
    "Jahr": {Language.DE: "Jahr", Language.EN: "Year"},
    "kg": {Language.DE: "kg", Language.EN: "kg"},
    "m": {Language.DE: "m", Language.EN: "m"},
    "m²": {Language.DE: "m²", Language.EN: "m²"},
    "Liter": {Language.DE: "Liter", Language.EN: "Liter"},
}


def translate_unit(unit: str, language: Language) -> str:
    """Übersetzt eine bekannte Mengeneinheit, unbekannte bleiben unverändert."""
    translation = UNIT_TRANSLATIONS.get(unit)
    return translation[language] if translation else unit


# =============================================================================
# Hilfsfunktionen zum Einlesen
# =============================================================================

def _expect_mapping(data: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise InvoiceParseError(f"'{path}' muss ein Objekt sein", field=path)
    return data


def _require(data: Mapping[str, Any], key: str, path: str) -> Any:
    """Liest ein Pflichtfeld oder wirft InvoiceParseError."""
    _expect_mapping(data, path)
    if key not in data or data[key] is None:
        raise InvoiceParseError(f"Pflichtfeld fehlt: {path}.{key}", field=f"{path}.{key}")
    return data[key]


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return str(value)


def _to_float(value: Any, path: str) -> float:
    """Konvertiert einen Wert in float, auch mit Dezimalkomma ("1,5")."""
    if isinstance(value, bool):
        raise InvoiceParseError(f"'{path}' ist keine Zahl: {value!r}", field=path)
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", ".").strip())
    except ValueError:
        raise InvoiceParseError(f"'{path}' ist keine Zahl: {value!r}", field=path) from None


def _optional_section(data: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    section = data.get(key)
    if section is None:
        return None
    if not isinstance(section, Mapping):
        raise InvoiceParseError(f"'{key}' muss ein Objekt sein", field=key)
    return section


def _to_int(value: Any, path: str) -> int:
    number = _to_float(value, path)
    if not number.is_integer():
        raise InvoiceParseError(f"'{path}' ist keine ganze Zahl: {value!r}", field=path)
    return int(number)


# =============================================================================
# Datenmodelle
# =============================================================================

@dataclass(frozen=True)
class SenderDetails:
    """Rechnungsaussteller."""
    name: str
    street: str
    postal_code: str
    city: str
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SenderDetails:
        _expect_mapping(data, "sender")
        return cls(
            name=str(_require(data, "name", "sender")),
            street=str(_require(data, "street", "sender")),
            postal_code=str(_require(data, "postalCode", "sender")),
            city=str(_require(data, "city", "sender")),
            country=_optional_str(data, "country"),
            phone=_optional_str(data, "phone"),
            email=_optional_str(data, "email"),
            website=_optional_str(data, "website"),
        )


@dataclass(frozen=True)
class RecipientDetails:
    """Rechnungsempfänger."""
    name: str
    street: str
    postal_code: str
    city: str
    address_line2: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RecipientDetails:
        _expect_mapping(data, "recipient")
        return cls(
            name=str(_require(data, "name", "recipient")),
            street=str(_require(data, "street", "recipient")),
            postal_code=str(_require(data, "postalCode", "recipient")),
            city=str(_require(data, "city", "recipient")),
            address_line2=_optional_str(data, "addressLine2"),
            country=_optional_str(data, "country"),
        )

    def to_lines(self) -> list[str]:
        """Konvertiert die Adresse (ohne Namen) in Zeilen für die Anzeige."""
        lines = []
        if self.address_line2:
            lines.append(self.address_line2)
        lines.append(self.street)
        lines.append(f"{self.postal_code} {self.city}")
        if self.country:
            lines.append(self.country)
        return lines


@dataclass(frozen=True)
class TaxIdentifiers:
    """Steuernummer und/oder USt-IdNr. des Ausstellers."""
    steuernummer: Optional[str] = None
    ust_id_nr: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TaxIdentifiers:
        _expect_mapping(data, "taxIdentifiers")
        return cls(
            steuernummer=_optional_str(data, "steuernummer"),
            ust_id_nr=_optional_str(data, "ustIdNr"),
        )


@dataclass(frozen=True)
class BankDetails:
    """Bankverbindung."""
    bank_name: str
    iban: str
    bic: str
    account_holder: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BankDetails:
        _expect_mapping(data, "bankDetails")
        return cls(
            bank_name=str(_require(data, "bankName", "bankDetails")),
            iban=str(_require(data, "iban", "bankDetails")),
            bic=str(_require(data, "bic", "bankDetails")),
            account_holder=_optional_str(data, "accountHolder"),
        )


@dataclass(frozen=True)
class LegalInfo:
    """Handelsregister- und Rechtsformangaben."""
    legal_form: Optional[str] = None
    register_number: Optional[str] = None
    register_court: Optional[str] = None
    managing_director: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LegalInfo:
        _expect_mapping(data, "legalInfo")
        return cls(
            legal_form=_optional_str(data, "legalForm"),
            register_number=_optional_str(data, "registerNumber"),
            register_court=_optional_str(data, "registerCourt"),
            managing_director=_optional_str(data, "managingDirector"),
        )


@dataclass(frozen=True)
class LineItem:
    """
    Einzelne Rechnungsposition.

    Menge × Einzelpreis ist der Bruttobetrag der Zeile (inkl. USt.).
    """
    description: str
    quantity: float
    unit: str
    unit_price: float
    tax_rate: float
    position: Optional[int] = None

    @property
    def gross_amount(self) -> float:
        """Bruttobetrag der Position."""
        return self.quantity * self.unit_price

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> LineItem:
        path = f"lineItems[{index}]"
        _expect_mapping(data, path)
        position = data.get("position")
        return cls(
            description=str(_require(data, "description", path)),
            quantity=_to_float(_require(data, "quantity", path), f"{path}.quantity"),
            unit=str(data.get("unit", "")),
            unit_price=_to_float(_require(data, "unitPrice", path), f"{path}.unitPrice"),
            tax_rate=_to_float(_require(data, "taxRate", path), f"{path}.taxRate"),
            position=_to_int(position, f"{path}.position") if position is not None else None,
        )


@dataclass(frozen=True)
class ShippingCost:
    """Versandkosten (Bruttobetrag)."""
    amount: float
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ShippingCost:
        _expect_mapping(data, "shipping")
        return cls(
            amount=_to_float(_require(data, "amount", "shipping"), "shipping.amount"),
            description=_optional_str(data, "description"),
        )


DEFAULT_LOGO_MAX_WIDTH = 150.0
DEFAULT_LOGO_MAX_HEIGHT = 60.0


@dataclass(frozen=True)
class LogoConfig:
    """Logo als Dateipfad oder Base64-String (Base64 hat Vorrang)."""
    logo_path: Optional[str] = None
    logo_base64: Optional[str] = None
    max_width: float = DEFAULT_LOGO_MAX_WIDTH
    max_height: float = DEFAULT_LOGO_MAX_HEIGHT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LogoConfig:
        _expect_mapping(data, "logo")
        max_width = data.get("maxWidth")
        max_height = data.get("maxHeight")
        return cls(
            logo_path=_optional_str(data, "logoPath"),
            logo_base64=_optional_str(data, "logoBase64"),
            # 0 oder fehlend -> Standardwert
            max_width=_to_float(max_width, "logo.maxWidth") if max_width else DEFAULT_LOGO_MAX_WIDTH,
            max_height=_to_float(max_height, "logo.maxHeight") if max_height else DEFAULT_LOGO_MAX_HEIGHT,
        )


@dataclass(frozen=True)
class InvoiceData:
    """Vollständige Rechnung als unveränderlicher Eingabedatensatz."""
    invoice_number: str
    issue_date: str
    delivery_date: str
    sender: SenderDetails
    recipient: RecipientDetails
    tax_identifiers: TaxIdentifiers
    bank_details: BankDetails
    line_items: tuple[LineItem, ...]
    order_number: Optional[str] = None
    due_date: Optional[str] = None
    payment_terms: Optional[str] = None
    legal_info: Optional[LegalInfo] = None
    logo: Optional[LogoConfig] = None
    currency: str = "EUR"
    notes: Optional[str] = None
    accent_color: Optional[str] = None
    shipping: Optional[ShippingCost] = None
    language: Language = Language.DE

    def t(self, key: str) -> str:
        """Übersetzt einen Schlüssel in die Rechnungssprache."""
        return TRANSLATIONS.get(self.language, TRANSLATIONS[Language.DE]).get(key, key)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InvoiceData:
        """
        Erstellt InvoiceData aus dem JSON-Eingabeformat.

        Args:
            data: Dictionary mit camelCase-Schlüsseln

        Returns:
            Die eingelesene Rechnung

        Raises:
            InvoiceParseError: Bei fehlenden Pflichtfeldern oder ungültigen Werten
        """
        if not isinstance(data, Mapping):
            raise InvoiceParseError("Rechnungsdaten müssen ein JSON-Objekt sein")

        raw_items = _require(data, "lineItems", "invoice")
        if not isinstance(raw_items, list):
            raise InvoiceParseError("'lineItems' muss eine Liste sein", field="lineItems")

        raw_language = data.get("language") or Language.DE.value
        try:
            language = Language(raw_language)
        except ValueError:
            raise InvoiceParseError(
                f"Unbekannte Sprache: {raw_language!r}", field="language"
            ) from None

        legal_info = _optional_section(data, "legalInfo")
        logo = _optional_section(data, "logo")
        shipping = _optional_section(data, "shipping")

        return cls(
            invoice_number=str(_require(data, "invoiceNumber", "invoice")),
            issue_date=str(_require(data, "issueDate", "invoice")),
            delivery_date=str(_require(data, "deliveryDate", "invoice")),
            sender=SenderDetails.from_dict(_require(data, "sender", "invoice")),
            recipient=RecipientDetails.from_dict(_require(data, "recipient", "invoice")),
            tax_identifiers=TaxIdentifiers.from_dict(_require(data, "taxIdentifiers", "invoice")),
            bank_details=BankDetails.from_dict(_require(data, "bankDetails", "invoice")),
            line_items=tuple(
                LineItem.from_dict(item, index) for index, item in enumerate(raw_items)
            ),
            order_number=_optional_str(data, "orderNumber"),
            due_date=_optional_str(data, "dueDate"),
            payment_terms=_optional_str(data, "paymentTerms"),
            legal_info=LegalInfo.from_dict(legal_info) if legal_info is not None else None,
            logo=LogoConfig.from_dict(logo) if logo is not None else None,
            currency=_optional_str(data, "currency") or "EUR",
            notes=_optional_str(data, "notes"),
            accent_color=_optional_str(data, "accentColor"),
            shipping=ShippingCost.from_dict(shipping) if shipping is not None else None,
            language=language,
        )


# =============================================================================
# Berechnete Summen
# =============================================================================

@dataclass(frozen=True)
class ShippingBreakdown:
    """Aufschlüsselung der Versandkosten."""
    gross: float = 0.0
    net: float = 0.0
    tax: float = 0.0
    tax_rate: float = 0.0


@dataclass(frozen=True)
class InvoiceTotals:
    """Ergebnis der Steuerberechnung (wird pro Aufruf neu berechnet)."""
    items_gross_total: float
    net_total: float
    gross_total: float
    tax_amounts: dict[float, float] = field(default_factory=dict)
    shipping: ShippingBreakdown = field(default_factory=ShippingBreakdown)

    @property
    def total_tax(self) -> float:
        """Summe aller Steuerbeträge."""
        return sum(self.tax_amounts.values())

    def sorted_tax_amounts(self) -> list[tuple[float, float]]:
        """Steuerbeträge aufsteigend nach Steuersatz."""
        return sorted(self.tax_amounts.items(), key=lambda entry: entry[0])
