"""
Kommandozeile: Rechnung aus einer JSON-Datei als PDF erzeugen.

    rechnung [eingabe.json] [ausgabe.pdf]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from invoice_generator import generate_invoice, load_invoice_from_file

DEFAULT_INPUT = "invoice_input.json"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rechnung",
        description="Erzeugt eine PDF-Rechnung nach deutschem Recht aus einer JSON-Datei.",
    )
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT,
                        help=f"JSON-Eingabedatei (Standard: {DEFAULT_INPUT})")
    parser.add_argument("output", nargs="?", default=None,
                        help="Ausgabedatei (Standard: Rechnung_<Nummer>.pdf)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Ausführliche Protokollausgabe")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Einstiegspunkt der Kommandozeile. Gibt den Exit-Code zurück."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    print("Rechnungsgenerator (PDF)")
    print("========================\n")

    try:
        input_path = Path(args.input).resolve()
        print(f"Lade Rechnungsdaten aus: {input_path}")

        invoice = load_invoice_from_file(input_path)
        print(f"   Rechnungsnummer: {invoice.invoice_number}")
        print(f"   Empfänger: {invoice.recipient.name}")
        print(f"   Positionen: {len(invoice.line_items)}")

        print("\nErzeuge PDF...")
        output_path = generate_invoice(invoice, args.output)
    except Exception as e:
        print("\nFehler bei der Rechnungserstellung:", file=sys.stderr)
        print(f"   {e}", file=sys.stderr)
        return 1

    print(f"\nFertig! Rechnung gespeichert unter: {output_path.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
