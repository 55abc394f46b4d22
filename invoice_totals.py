"""
Berechnung der Rechnungssummen.

Alle Einzelpreise sind Bruttopreise. Netto- und Steueranteile werden pro
Steuersatz rückwärts aus dem Brutto herausgerechnet; Versandkosten werden
mit dem vorherrschenden Steuersatz der Positionen versteuert.

Es wird nicht zwischengerundet, gerundet wird erst bei der Ausgabe.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from invoice_models import InvoiceTotals, LineItem, ShippingBreakdown, ShippingCost

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 19.0


def split_gross(gross: float, tax_rate: float) -> tuple[float, float]:
    """
    Zerlegt einen Bruttobetrag in Netto und Steuer.

    Args:
        gross: Bruttobetrag
        tax_rate: Steuersatz in Prozent

    Returns:
        Tupel (netto, steuer)
    """
    net = gross / (1 + tax_rate / 100)
    return net, gross - net


def dominant_tax_rate(line_items: Sequence[LineItem]) -> float:
    """
    Ermittelt den Steuersatz mit der größten Bruttosumme.

    Bei Gleichstand gewinnt der Satz, der in der Positionsreihenfolge zuerst
    vorkommt. Ohne Positionen gilt der Regelsteuersatz von 19 %.
    """
    gross_by_rate: dict[float, float] = {}
    for item in line_items:
        gross_by_rate[item.tax_rate] = gross_by_rate.get(item.tax_rate, 0.0) + item.gross_amount

    dominant_rate = DEFAULT_TAX_RATE
    max_gross = 0.0
    for rate, gross in gross_by_rate.items():
        if gross > max_gross:
            max_gross = gross
            dominant_rate = rate
    return dominant_rate


def compute_totals(
    line_items: Sequence[LineItem],
    shipping: Optional[ShippingCost] = None,
) -> InvoiceTotals:
    """
    Berechnet Brutto-, Netto- und Steuersummen einer Rechnung.

    Args:
        line_items: Die Rechnungspositionen (Bruttopreise)
        shipping: Optionale Versandkosten (brutto)

    Returns:
        Neu berechnete InvoiceTotals
    """
    items_gross_total = 0.0
    tax_amounts: dict[float, float] = {}

    for item in line_items:
        line_gross = item.gross_amount
        items_gross_total += line_gross
        _, line_tax = split_gross(line_gross, item.tax_rate)
        tax_amounts[item.tax_rate] = tax_amounts.get(item.tax_rate, 0.0) + line_tax

    shipping_gross = shipping.amount if shipping is not None else 0.0
    shipping_rate = dominant_tax_rate(line_items) if shipping_gross > 0 else 0.0
    shipping_net, shipping_tax = split_gross(shipping_gross, shipping_rate)

    if shipping_gross > 0 and shipping_tax > 0:
        tax_amounts[shipping_rate] = tax_amounts.get(shipping_rate, 0.0) + shipping_tax

    gross_total = items_gross_total + shipping_gross
    net_total = gross_total - sum(tax_amounts.values())

    logger.debug(
        "Summen berechnet: brutto=%s netto=%s steuersätze=%s",
        gross_total, net_total, sorted(tax_amounts),
    )

    return InvoiceTotals(
        items_gross_total=items_gross_total,
        net_total=net_total,
        gross_total=gross_total,
        tax_amounts=tax_amounts,
        shipping=ShippingBreakdown(
            gross=shipping_gross,
            net=shipping_net,
            tax=shipping_tax,
            tax_rate=shipping_rate,
        ),
    )
