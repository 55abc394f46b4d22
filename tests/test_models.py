from __future__ import annotations

import pytest

from invoice_errors import InvoiceParseError
from invoice_models import InvoiceData, Language, LineItem, LogoConfig, translate_unit


class TestInvoiceDataFromDict:
    def test_full_document(self, invoice):
        assert invoice.invoice_number == "RE-2025/001"
        assert invoice.order_number == "B-4711"
        assert invoice.sender.postal_code == "10115"
        assert invoice.recipient.address_line2 == "z. Hd. Buchhaltung"
        assert invoice.tax_identifiers.ust_id_nr == "DE123456789"
        assert invoice.bank_details.account_holder == "Muster Technik GmbH"
        assert len(invoice.line_items) == 2
        assert invoice.line_items[1].tax_rate == 7
        assert invoice.shipping.amount == 10
        assert invoice.shipping.description is None

    def test_defaults(self, make_invoice):
        invoice = make_invoice(orderNumber=None, shipping=None, notes=None)
        assert invoice.currency == "EUR"
        assert invoice.language is Language.DE
        assert invoice.order_number is None
        assert invoice.shipping is None
        assert invoice.logo is None
        assert invoice.legal_info is None

    def test_english(self, make_invoice):
        invoice = make_invoice(language="en")
        assert invoice.language is Language.EN
        assert invoice.t("invoice") == "INVOICE"

    def test_unknown_language(self, make_invoice):
        with pytest.raises(InvoiceParseError) as exc:
            make_invoice(language="fr")
        assert exc.value.field == "language"

    def test_line_item_not_an_object(self, make_invoice):
        with pytest.raises(InvoiceParseError) as exc:
            make_invoice(lineItems=["kein objekt"])
        assert exc.value.field == "lineItems[0]"

    def test_tax_identifiers_not_an_object(self, make_invoice):
        with pytest.raises(InvoiceParseError) as exc:
            make_invoice(taxIdentifiers="DE123456789")
        assert exc.value.field == "taxIdentifiers"

    def test_sender_not_an_object(self, make_invoice):
        with pytest.raises(InvoiceParseError) as exc:
            make_invoice(sender=["Muster Technik GmbH"])
        assert exc.value.field == "sender"

    def test_missing_required_field(self, invoice_dict):
        del invoice_dict["sender"]["city"]
        with pytest.raises(InvoiceParseError) as exc:
            InvoiceData.from_dict(invoice_dict)
        assert exc.value.field == "sender.city"

    def test_missing_line_items(self, invoice_dict):
        del invoice_dict["lineItems"]
        with pytest.raises(InvoiceParseError, match="lineItems"):
            InvoiceData.from_dict(invoice_dict)

    def test_invalid_number(self, invoice_dict):
        invoice_dict["lineItems"][0]["unitPrice"] = "teuer"
        with pytest.raises(InvoiceParseError) as exc:
            InvoiceData.from_dict(invoice_dict)
        assert exc.value.field == "lineItems[0].unitPrice"

    def test_decimal_comma(self, invoice_dict):
        invoice_dict["lineItems"][0]["quantity"] = "1,5"
        invoice = InvoiceData.from_dict(invoice_dict)
        assert invoice.line_items[0].quantity == 1.5

    def test_legal_info(self, make_invoice):
        invoice = make_invoice(legalInfo={"registerCourt": "AG Berlin", "registerNumber": "HRB 12345"})
        assert invoice.legal_info.register_court == "AG Berlin"
        assert invoice.legal_info.legal_form is None

    def test_records_are_immutable(self, invoice):
        with pytest.raises(AttributeError):
            invoice.invoice_number = "X"


class TestLineItem:
    def test_gross_amount(self):
        assert LineItem("Beratung", 2.5, "Std.", 100, 19).gross_amount == 250

    def test_explicit_position(self):
        item = LineItem.from_dict({
            "position": 10, "description": "x", "quantity": 1, "unitPrice": 1, "taxRate": 0,
        })
        assert item.position == 10
        assert item.unit == ""

    def test_position_as_string(self):
        item = LineItem.from_dict({
            "position": "3", "description": "x", "quantity": 1, "unitPrice": 1, "taxRate": 0,
        })
        assert item.position == 3

    @pytest.mark.parametrize("position", ["eins", 1.5, True])
    def test_invalid_position(self, position):
        with pytest.raises(InvoiceParseError) as exc:
            LineItem.from_dict({
                "position": position, "description": "x", "quantity": 1, "unitPrice": 1, "taxRate": 0,
            }, 2)
        assert exc.value.field == "lineItems[2].position"


class TestLogoConfig:
    def test_zero_size_falls_back_to_default(self):
        logo = LogoConfig.from_dict({"logoPath": "logo.png", "maxWidth": 0})
        assert logo.max_width == 150
        assert logo.max_height == 60

    def test_custom_size(self):
        logo = LogoConfig.from_dict({"logoBase64": "abc", "maxWidth": 90, "maxHeight": 30})
        assert (logo.max_width, logo.max_height) == (90, 30)


class TestTranslateUnit:
    def test_known_unit(self):
        assert translate_unit("Stunden", Language.EN) == "Hours"
        assert translate_unit("Stunden", Language.DE) == "Stunden"

    def test_unknown_unit(self):
        assert translate_unit("Palette", Language.EN) == "Palette"
