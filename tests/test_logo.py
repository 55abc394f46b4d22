from __future__ import annotations

import base64
import logging

import pytest

from conftest import PNG_BASE64
from invoice_logo import fit_logo, resolve_logo
from invoice_models import LogoConfig


class TestResolveLogo:
    def test_no_config(self):
        assert resolve_logo(None) is None

    def test_empty_config(self):
        assert resolve_logo(LogoConfig()) is None

    def test_png_data_uri(self):
        logo = resolve_logo(LogoConfig(logo_base64=f"data:image/png;base64,{PNG_BASE64}"))
        assert logo.format == "png"
        assert logo.data == base64.b64decode(PNG_BASE64)
        assert (logo.max_width, logo.max_height) == (150, 60)

    def test_jpeg_data_uri(self):
        logo = resolve_logo(LogoConfig(logo_base64=f"data:image/jpeg;base64,{PNG_BASE64}"))
        assert logo.format == "jpg"
        assert logo.data == base64.b64decode(PNG_BASE64)

    def test_plain_base64_is_jpg(self):
        assert resolve_logo(LogoConfig(logo_base64=PNG_BASE64)).format == "jpg"

    def test_base64_wins_over_path(self, tmp_path):
        path = tmp_path / "logo.jpg"
        path.write_bytes(b"file")
        logo = resolve_logo(LogoConfig(
            logo_path=str(path),
            logo_base64=f"data:image/png;base64,{PNG_BASE64}",
        ))
        assert logo.format == "png"
        assert logo.data != b"file"

    def test_invalid_base64_is_not_fatal(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_logo(LogoConfig(logo_base64="abc")) is None
        assert "Logo" in caplog.text

    def test_png_file(self, tmp_path):
        path = tmp_path / "Logo.PNG"
        path.write_bytes(base64.b64decode(PNG_BASE64))
        logo = resolve_logo(LogoConfig(logo_path=str(path), max_width=80, max_height=40))
        assert logo.format == "png"
        assert logo.data.startswith(b"\x89PNG")
        assert (logo.max_width, logo.max_height) == (80, 40)

    def test_other_extension_is_jpg(self, tmp_path):
        path = tmp_path / "logo.jpeg"
        path.write_bytes(b"\xff\xd8\xff")
        assert resolve_logo(LogoConfig(logo_path=str(path))).format == "jpg"

    def test_missing_file_is_not_fatal(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            logo = resolve_logo(LogoConfig(logo_path=str(tmp_path / "fehlt.png")))
        assert logo is None
        assert "fehlt.png" in caplog.text


class TestFitLogo:
    def test_limited_by_width(self):
        assert fit_logo(300, 60, 150, 60) == pytest.approx((150, 30))

    def test_limited_by_height(self):
        assert fit_logo(100, 100, 150, 60) == pytest.approx((60, 60))

    def test_small_images_are_scaled_up(self):
        assert fit_logo(15, 6, 150, 60) == pytest.approx((150, 60))
