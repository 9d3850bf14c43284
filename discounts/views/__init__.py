"""
Package de vues pour l'application discounts.

Réexporte toutes les vues depuis leurs modules respectifs.
"""
from .board import discount_board, refresh_board
from .status import discount_status_api
from .health import health_check

__all__ = [
    # Tableau
    'discount_board',
    'refresh_board',
    # API
    'discount_status_api',
    # Health
    'health_check',
]
