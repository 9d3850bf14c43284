"""
Pipeline d'acquisition des promotions.

Flow:
1. Récupération du CSV (direct, puis relais CORS)
2. Parsing CSV
3. Conversion des lignes en produits + validation
4. Repli sur les produits de démonstration si une étape échoue

Le pipeline ne lève jamais d'exception vers l'appelant : chaque échec est
converti en message de diagnostic et la liste de démonstration est renvoyée.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from django.utils import timezone

from .csv_parser import parse_csv, rows_to_products
from .products import DEMO_PRODUCTS, Product
from .spreadsheet import SpreadsheetClient, SpreadsheetError

logger = logging.getLogger(__name__)

SOURCE_LIVE = 'live'
SOURCE_DEMO = 'demo'

# Messages affichés à l'utilisateur, un par étape en échec
DIAGNOSTICS = {
    'restricted': "Using demo data - spreadsheet access restricted",
    'network': "Using demo data - spreadsheet not accessible",
    'parse': "Using demo data - spreadsheet parsing failed",
    'empty': "Using demo data - please check spreadsheet access",
    'unknown': "Using demo data - spreadsheet not accessible",
}


@dataclass(frozen=True)
class AcquisitionResult:
    products: Tuple[Product, ...]
    diagnostic: Optional[str]
    completed_at: datetime
    source: str = SOURCE_LIVE
    failure_kind: Optional[str] = field(default=None, compare=False)

    @property
    def is_demo(self) -> bool:
        return self.source == SOURCE_DEMO


def _demo_result(kind: str) -> AcquisitionResult:
    return AcquisitionResult(
        products=DEMO_PRODUCTS,
        diagnostic=DIAGNOSTICS.get(kind, DIAGNOSTICS['unknown']),
        completed_at=timezone.now(),
        source=SOURCE_DEMO,
        failure_kind=kind,
    )


def acquire_products(client: SpreadsheetClient = None) -> AcquisitionResult:
    """
    Récupère et valide la liste des produits en promotion.

    Args:
        client: Client du tableur (un client configuré depuis les settings
            est créé si None)

    Returns:
        AcquisitionResult avec les produits du tableur, ou les produits de
        démonstration et un diagnostic si une étape a échoué
    """
    if client is None:
        client = SpreadsheetClient()

    try:
        csv_text = client.fetch_csv_text()
        rows = parse_csv(csv_text)
        products = rows_to_products(rows)
    except SpreadsheetError as e:
        logger.warning(f"Repli sur les données de démonstration ({e.kind}): {e.message}")
        return _demo_result(e.kind)
    except Exception as e:
        logger.exception(f"Erreur inattendue pendant l'acquisition: {e}")
        return _demo_result('unknown')

    if not products:
        logger.warning(f"Aucun produit valide dans le tableur ({len(rows)} lignes), repli sur la démo")
        return _demo_result('empty')

    logger.info(f"{len(products)} produits récupérés depuis le tableur")
    return AcquisitionResult(
        products=tuple(products),
        diagnostic=None,
        completed_at=timezone.now(),
        source=SOURCE_LIVE,
    )
