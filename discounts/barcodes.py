"""
Rendu des codes-barres EAN-13 des cartes produit.

Chaque carte possède une cible de dessin identifiée par sa position dans la
liste (barcode-0, barcode-1, ...). Le dessin est "fire and forget" : un code
invalide est ignoré silencieusement, une erreur de rendu est journalisée
mais jamais propagée ni réessayée.
"""
import base64
import io
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from barcode import EAN13
from barcode.writer import SVGWriter

logger = logging.getLogger(__name__)

EAN_LENGTH = 13

# Paramètres de rendu fixes (unités python-barcode : mm / points)
BARCODE_OPTIONS = {
    'module_width': 0.4,
    'module_height': 15.0,
    'quiet_zone': 2.5,
    'font_size': 12,
    'text_distance': 4.0,
    'write_text': True,
    'background': '#ffffff',
    'foreground': '#000000',
}


class InvalidChecksumError(ValueError):
    """Le 13e chiffre ne correspond pas à la clé de contrôle EAN-13."""


def normalize_ean(code: str) -> str:
    """Supprime tout ce qui n'est pas un chiffre (espaces, tirets, lettres)."""
    return re.sub(r'\D', '', code or '')


def is_drawable(code: str) -> bool:
    return len(normalize_ean(code)) == EAN_LENGTH


def _render_svg(digits: str) -> bytes:
    barcode = EAN13(digits[:EAN_LENGTH - 1], writer=SVGWriter())
    if barcode.get_fullcode() != digits:
        raise InvalidChecksumError(
            f"clé de contrôle invalide pour {digits} (attendu {barcode.get_fullcode()})"
        )
    buffer = io.BytesIO()
    barcode.write(buffer, options=BARCODE_OPTIONS)
    return buffer.getvalue()


def draw_barcode(code: str) -> Optional[str]:
    """
    Dessine le code-barres d'un code EAN.

    Returns:
        Data URI SVG du code-barres, ou None si le code n'a pas exactement
        13 chiffres ou si le rendu a échoué
    """
    digits = normalize_ean(code)
    if len(digits) != EAN_LENGTH:
        return None

    try:
        svg = _render_svg(digits)
    except Exception as e:
        logger.error(f"Erreur génération code-barres {code!r}: {e}")
        return None

    return "data:image/svg+xml;base64," + base64.b64encode(svg).decode('ascii')


@dataclass
class BarcodeTarget:
    """Zone de dessin associée à la carte en position index."""
    index: int
    ean_code: str
    image: Optional[str] = None

    @property
    def element_id(self) -> str:
        return f"barcode-{self.index}"

    @property
    def drawn(self) -> bool:
        return self.image is not None


def draw_barcodes(targets: Iterable[BarcodeTarget]) -> int:
    """
    Passe de dessin sur toutes les cibles d'une grille déjà constituée.

    Returns:
        Nombre de codes-barres effectivement dessinés
    """
    drawn = 0
    for target in targets:
        target.image = draw_barcode(target.ean_code)
        if target.drawn:
            drawn += 1
    return drawn
