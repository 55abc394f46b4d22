"""
Auflösung des Rechnungslogos (Base64 oder Datei) in Rohdaten.

Ein fehlendes oder unlesbares Logo ist kein Fehler: es wird gewarnt und
die Rechnung ohne Logo erzeugt.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from invoice_models import LogoConfig

logger = logging.getLogger(__name__)

_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")


@dataclass(frozen=True)
class ResolvedLogo:
    """Dekodierte Logodaten."""
    data: bytes
    format: str  # "png" oder "jpg"
    max_width: float
    max_height: float


def resolve_logo(config: Optional[LogoConfig]) -> Optional[ResolvedLogo]:
    """
    Lädt die Logodaten aus der Konfiguration.

    Base64 wird vor dem Dateipfad geprüft.

    Args:
        config: Optionale Logo-Konfiguration

    Returns:
        ResolvedLogo oder None, wenn kein Logo verfügbar ist
    """
    if config is None:
        return None

    if config.logo_base64:
        raw = config.logo_base64
        fmt = "png" if "image/png" in raw else "jpg"
        try:
            data = base64.b64decode(_DATA_URI_PREFIX.sub("", raw.strip()))
        except (binascii.Error, ValueError) as e:
            logger.warning("Logo konnte nicht dekodiert werden: %s", e)
            return None
        return ResolvedLogo(data, fmt, config.max_width, config.max_height)

    if config.logo_path:
        path = Path(config.logo_path).resolve()
        fmt = "png" if path.suffix.lower() == ".png" else "jpg"
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning("Logo konnte nicht geladen werden (%s): %s", config.logo_path, e)
            return None
        return ResolvedLogo(data, fmt, config.max_width, config.max_height)

    return None


def fit_logo(
    image_width: float,
    image_height: float,
    max_width: float,
    max_height: float,
) -> tuple[float, float]:
    """Skaliert ein Bild seitenverhältnistreu in die Maximalgröße."""
    scale = min(max_width / image_width, max_height / image_height)
    return image_width * scale, image_height * scale
