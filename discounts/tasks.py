"""
Tâches Celery de l'application discounts.

Le rafraîchissement exécute le pipeline d'acquisition puis publie le
résultat dans l'état partagé, à condition qu'aucun rafraîchissement plus
récent n'ait été lancé entre-temps.
"""
import logging

from celery import shared_task

from .pipeline import acquire_products
from .state import RunStateStore

logger = logging.getLogger(__name__)


@shared_task(name='discounts.tasks.refresh_discounts')
def refresh_discounts(token: str):
    """
    Exécute le rafraîchissement identifié par token.

    Args:
        token: Jeton renvoyé par RunStateStore.begin()

    Returns:
        dict: Statut, nombre de produits, source et diagnostic
    """
    store = RunStateStore()

    try:
        result = acquire_products()
    except Exception as e:
        # acquire_products ne lève pas en temps normal : cas de bug ou d'environnement cassé
        logger.exception(f"Erreur globale dans refresh_discounts: {e}")
        store.fail(token, "Something went wrong while loading the discounts")
        return {'status': 'error', 'message': str(e)}

    published = store.complete(token, result)

    logger.info(
        f"Rafraîchissement terminé - "
        f"Produits: {len(result.products)}, "
        f"Source: {result.source}, "
        f"Échec: {result.failure_kind or 'aucun'}, "
        f"Publié: {published}"
    )

    return {
        'status': 'success' if published else 'superseded',
        'products': len(result.products),
        'source': result.source,
        'diagnostic': result.diagnostic,
        'failure': result.failure_kind,
    }


@shared_task(name='discounts.tasks.refresh_discounts_periodic')
def refresh_discounts_periodic():
    """Rafraîchissement planifié par Celery Beat."""
    from .refresh import request_refresh

    state = request_refresh()
    return {'status': 'scheduled', 'token': state.token}
