"""
Rechnungsgenerator - Web App
Flask-basierte Schnittstelle zur Erstellung von PDF-Rechnungen
"""

import io
import logging
import os

from flask import Flask, jsonify, request, send_file

from invoice_errors import ComplianceError, InvoiceParseError
from invoice_generator import default_filename, generate_invoice_buffer
from invoice_models import InvoiceData

logger = logging.getLogger(__name__)

app = Flask(__name__)


@app.route("/health")
def health():
    """Einfacher Erreichbarkeitstest."""
    return jsonify({"status": "ok"})


@app.route("/generate", methods=["POST"])
def generate_invoice():
    """Generiert die PDF-Rechnung aus den JSON-Rechnungsdaten."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Anfrage muss ein JSON-Objekt enthalten"}), 400

    try:
        invoice = InvoiceData.from_dict(data)
        pdf_bytes = generate_invoice_buffer(invoice)
    except ComplianceError as e:
        return jsonify({"error": str(e), "reason": e.reason}), 422
    except InvoiceParseError as e:
        return jsonify({"error": str(e), "field": e.field}), 400

    logger.info("Rechnung %s erzeugt (%d Bytes)", invoice.invoice_number, len(pdf_bytes))
    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=default_filename(invoice.invoice_number),
    )


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=False)
