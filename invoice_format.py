"""
Formatierung von Beträgen, Datumsangaben, Mengen und Steuersätzen.

Alle Funktionen sind rein; Gebietsschema und Währung kommen über eine
explizite FormatConfig statt aus globalen Einstellungen.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP


CURRENCY_SYMBOLS: dict[str, str] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
}

_GERMAN_DATE = re.compile(r"^\d{2}\.\d{2}\.\d{4}")


@dataclass(frozen=True)
class FormatConfig:
    """Gebietsschema und Währung für die Ausgabe."""
    locale: str = "de"
    currency: str = "EUR"

    @property
    def is_german(self) -> bool:
        return self.locale.lower().startswith("de")


def currency_symbol(currency: str) -> str:
    """Liefert das Symbol für einen ISO-Währungscode (sonst den Code selbst)."""
    return CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())


def _group_thousands(int_part: int, separator: str) -> str:
    return f"{int_part:,}".replace(",", separator)


def format_currency(amount: Decimal | float, config: FormatConfig = FormatConfig()) -> str:
    """
    Formatiert einen Betrag als Währungsstring.

    Gerundet wird ausschließlich hier (kaufmännisch auf 2 Stellen).

    Args:
        amount: Der zu formatierende Betrag
        config: Gebietsschema und Währung

    Returns:
        Formatierter Währungsstring, z.B. "1.234,56 €"
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))

    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    int_part = int(amount)
    dec_part = int((amount % 1) * 100)
    symbol = currency_symbol(config.currency)

    if config.is_german:
        # Deutsche Formatierung: 1.234,56 €
        return f"{sign}{_group_thousands(int_part, '.')},{dec_part:02d} {symbol}"
    # Englische Formatierung: €1,234.56
    return f"{sign}{symbol}{_group_thousands(int_part, ',')}.{dec_part:02d}"


def format_date(value: str) -> str:
    """
    Formatiert ein Datum als TT.MM.JJJJ.

    Bereits deutsch formatierte Angaben bleiben unverändert, ISO-Daten
    (mit oder ohne Uhrzeit) werden umgewandelt. Nicht erkennbare Werte
    werden unverändert ausgegeben.
    """
    if _GERMAN_DATE.match(value):
        return value
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%d.%m.%Y")


def format_number(value: float, config: FormatConfig = FormatConfig()) -> str:
    """
    Formatiert eine Zahl ohne überflüssige Nachkommastellen (19 statt 19.0).

    Alle Stellen der kürzesten Darstellung bleiben erhalten, ohne
    Exponentenschreibweise (1234567.5 statt 1.23457e+06).
    """
    text = format(Decimal(repr(float(value))).normalize(), "f")
    if config.is_german:
        text = text.replace(".", ",")
    return text


def format_quantity(qty: float, config: FormatConfig = FormatConfig()) -> str:
    # Ganze Zahlen ohne Dezimalstellen anzeigen
    if float(qty).is_integer():
        return str(int(qty))
    return format_number(qty, config)


def format_rate(rate: float, config: FormatConfig = FormatConfig()) -> str:
    """Steuersatz mit Prozentzeichen, z.B. "19%" oder "7,5%"."""
    return f"{format_number(rate, config)}%"
