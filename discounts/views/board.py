"""
Vues du tableau des promotions.

Trois modes d'affichage exclusifs, selon l'état du rafraîchissement :
- loading : squelette de 8 cartes, la page interroge l'API de statut
- failed : message et bouton "Try Again"
- ready : grille de cartes (ou message "aucune promotion"), avec un
  bandeau de diagnostic si les données de démonstration sont affichées
"""
import logging
from dataclasses import dataclass

from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST
from django_ratelimit.decorators import ratelimit

from ..barcodes import BarcodeTarget, draw_barcodes
from ..products import Product
from ..refresh import ensure_fresh_state, request_refresh
from ..state import FailedState, LoadingState, ReadyState

logger = logging.getLogger(__name__)

SKELETON_CARDS = 8


@dataclass
class ProductCard:
    index: int
    product: Product
    barcode: BarcodeTarget


def build_cards(state: ReadyState):
    """Fige la liste affichée : une carte et une cible de code-barres par position."""
    return [
        ProductCard(index=index, product=product, barcode=BarcodeTarget(index=index, ean_code=product.ean_code))
        for index, product in enumerate(state.products)
    ]


@require_GET
def discount_board(request):
    state = ensure_fresh_state()

    if isinstance(state, LoadingState):
        return render(request, 'discounts/loading.html', {
            'state': state,
            'skeletons': range(SKELETON_CARDS),
        })

    if isinstance(state, FailedState):
        return render(request, 'discounts/error.html', {
            'state': state,
            'error': state.message,
        })

    cards = build_cards(state)
    # Les cartes sont figées avant la passe de dessin : chaque cible existe
    drawn = draw_barcodes(card.barcode for card in cards)
    logger.debug(f"{drawn}/{len(cards)} codes-barres dessinés")

    return render(request, 'discounts/board.html', {
        'state': state,
        'cards': cards,
        'diagnostic': state.diagnostic,
        'last_updated': state.completed_at,
    })


@ratelimit(key='ip', rate='10/m', method='POST')
@require_POST
def refresh_board(request):
    """Bouton "Try Again" : relance un rafraîchissement complet."""
    if getattr(request, 'limited', False):
        logger.warning(f"Rate limit dépassé pour IP: {request.META.get('REMOTE_ADDR')}")
        return redirect('discount_board')

    state = request_refresh()
    logger.info(f"Rafraîchissement manuel {state.token[:8]} demandé")
    return redirect('discount_board')
