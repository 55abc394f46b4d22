from __future__ import annotations

import copy
from dataclasses import dataclass, field

import pytest

from invoice_layout import EmbeddedImage
from invoice_models import InvoiceData

# 1x1 PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@dataclass
class DrawnText:
    text: str
    x: float
    y: float
    font: str
    size: float


@dataclass
class RecordingSurface:
    """Zeichenfläche, die alle Aufrufe mitschreibt (Textbreite: 0,5 × Größe je Zeichen)."""

    width: float = 595.2755905511812
    height: float = 841.8897637795277
    image_size: tuple[float, float] = (300.0, 120.0)
    fail_embed: bool = False
    texts: list[DrawnText] = field(default_factory=list)
    lines: list[tuple] = field(default_factory=list)
    rects: list[tuple] = field(default_factory=list)
    images: list[tuple] = field(default_factory=list)

    def draw_text(self, text, x, y, font, size, color):
        self.texts.append(DrawnText(text, x, y, font, size))

    def draw_line(self, x1, y1, x2, y2, thickness, color):
        self.lines.append((x1, y1, x2, y2, thickness))

    def draw_rect(self, x, y, width, height, color):
        self.rects.append((x, y, width, height))

    def embed_image(self, data, fmt):
        if self.fail_embed:
            raise OSError("cannot identify image file")
        return EmbeddedImage(data, *self.image_size)

    def draw_image(self, image, x, y, width, height):
        self.images.append((x, y, width, height))

    def text_width(self, text, font, size):
        return len(text) * size * 0.5

    # --- Auswertung ---

    def strings(self) -> list[str]:
        return [t.text for t in self.texts]

    def find(self, text: str) -> DrawnText:
        for drawn in self.texts:
            if drawn.text == text:
                return drawn
        raise AssertionError(f"Text nicht gezeichnet: {text!r}")


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


# --- Rechnungsdaten ---


@pytest.fixture
def invoice_dict() -> dict:
    return {
        "invoiceNumber": "RE-2025/001",
        "orderNumber": "B-4711",
        "issueDate": "2025-03-14",
        "deliveryDate": "10.03.2025 - 12.03.2025",
        "sender": {
            "name": "Muster Technik GmbH",
            "street": "Hauptstraße 1",
            "postalCode": "10115",
            "city": "Berlin",
            "country": "Deutschland",
            "email": "rechnung@muster-technik.de",
        },
        "recipient": {
            "name": "Beispiel AG",
            "addressLine2": "z. Hd. Buchhaltung",
            "street": "Beispielweg 42",
            "postalCode": "80331",
            "city": "München",
        },
        "taxIdentifiers": {
            "steuernummer": "27/123/45678",
            "ustIdNr": "DE123456789",
        },
        "bankDetails": {
            "bankName": "Musterbank",
            "iban": "DE89 3704 0044 0532 0130 00",
            "bic": "COBADEFFXXX",
            "accountHolder": "Muster Technik GmbH",
        },
        "lineItems": [
            {
                "description": "Wartung Serveranlage",
                "quantity": 1,
                "unit": "Pauschal",
                "unitPrice": 119,
                "taxRate": 19,
            },
            {
                "description": "Fachbuch Netzwerktechnik",
                "quantity": 1,
                "unit": "Stück",
                "unitPrice": 107,
                "taxRate": 7,
            },
        ],
        "shipping": {"amount": 10},
        "notes": "Vielen Dank für Ihren Auftrag.",
    }


@pytest.fixture
def invoice(invoice_dict: dict) -> InvoiceData:
    return InvoiceData.from_dict(invoice_dict)


@pytest.fixture
def make_invoice(invoice_dict: dict):
    """Erzeugt eine Rechnung mit überschriebenen Feldern (camelCase)."""

    def _make(**overrides) -> InvoiceData:
        data = copy.deepcopy(invoice_dict)
        for key, value in overrides.items():
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        return InvoiceData.from_dict(data)

    return _make
