"""
Parsing du CSV exporté et conversion des lignes en produits.

Le tableur n'a pas de schéma garanti : la première ligne est un en-tête.
Si cet en-tête nomme les colonnes attendues, elles sont lues par nom ;
sinon on retombe sur les positions historiques (colonnes B, C, F, G, H).
"""
import csv
import io
import logging
from typing import Dict, List, Optional

from .products import Product
from .spreadsheet import SpreadsheetParseError

logger = logging.getLogger(__name__)

# Nombre minimal de champs pour qu'une ligne de données soit prise en compte
MIN_FIELDS = 7

# Positions historiques (0-indexées) : B=nom, C=remise, F=validité, G=EAN, H=image
POSITIONAL_COLUMNS = {
    'name': 1,
    'discount': 2,
    'valid_until': 5,
    'ean_code': 6,
    'image': 7,
}

HEADER_ALIASES = {
    'name': {'name', 'produkt', 'produktname', 'product', 'artikel', 'bezeichnung'},
    'discount': {'discount', 'rabatt', 'angebot', 'ersparnis', 'remise'},
    'valid_until': {'valid until', 'valid_until', 'gültig bis', 'gueltig bis', 'bis'},
    'ean_code': {'ean', 'ean code', 'ean-code', 'ean13', 'ean-13', 'barcode'},
    'image': {'image', 'bild', 'image url', 'bild url', 'bild-url', 'foto'},
}

REQUIRED_FIELDS = ('name', 'discount', 'ean_code')


def parse_csv(text: str) -> List[List[str]]:
    """
    Découpe le texte CSV en lignes de champs, sans interpréter l'en-tête.

    Les lignes vides (aucun champ, ou uniquement des champs vides) sont ignorées.

    Raises:
        SpreadsheetParseError: Si le CSV est mal formé (guillemets non fermés, etc.)
    """
    reader = csv.reader(io.StringIO(text), strict=True)
    rows = []
    try:
        for row in reader:
            if not any(field.strip() for field in row):
                continue
            rows.append(row)
    except csv.Error as e:
        raise SpreadsheetParseError(f"CSV parsing failed at line {reader.line_num}: {e}")
    return rows


def _normalize_header(value: str) -> str:
    return ' '.join(value.strip().lower().replace('_', ' ').split())


def resolve_columns(header: List[str]) -> Optional[Dict[str, int]]:
    """
    Associe chaque champ du produit à l'index de sa colonne d'après l'en-tête.

    Returns:
        Dict champ -> index, ou None si l'en-tête ne nomme pas au moins
        le nom, la remise et l'EAN
    """
    aliases = {
        field: {_normalize_header(alias) for alias in names}
        for field, names in HEADER_ALIASES.items()
    }
    columns = {}
    for index, title in enumerate(header):
        key = _normalize_header(title)
        for field, names in aliases.items():
            if field not in columns and key in names:
                columns[field] = index
                break

    if not all(field in columns for field in REQUIRED_FIELDS):
        return None
    return columns


def _cell(row: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ''
    return (row[index] or '').strip()


def rows_to_products(rows: List[List[str]]) -> List[Product]:
    """
    Convertit les lignes parsées en produits valides.

    - La ligne 0 (en-tête) ne produit jamais de produit
    - Une ligne de moins de 7 champs est ignorée silencieusement
    - Un produit sans nom, remise ou EAN est écarté
    """
    if not rows:
        return []

    named = resolve_columns(rows[0])
    columns = dict(POSITIONAL_COLUMNS)
    if named is not None:
        # Les champs non nommés par l'en-tête gardent leur position historique
        columns.update(named)
        logger.debug(f"Colonnes résolues par en-tête: {columns}")

    products = []
    skipped_short = 0
    skipped_incomplete = 0

    for row in rows[1:]:
        if len(row) < MIN_FIELDS:
            skipped_short += 1
            continue

        product = Product(
            name=_cell(row, columns.get('name')),
            discount=_cell(row, columns.get('discount')),
            valid_until=_cell(row, columns.get('valid_until')),
            ean_code=_cell(row, columns.get('ean_code')),
            image=_cell(row, columns.get('image')),
        )

        if not product.is_complete:
            skipped_incomplete += 1
            continue

        products.append(product)

    if skipped_short or skipped_incomplete:
        logger.info(
            f"{len(products)} produits retenus, "
            f"{skipped_short} lignes incomplètes, "
            f"{skipped_incomplete} produits sans nom/remise/EAN"
        )

    return products
