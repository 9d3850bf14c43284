"""
Déclenchement des rafraîchissements.

Un rafraîchissement est lancé au premier affichage, à chaque clic sur
"Try Again", par Celery Beat et par la commande refresh_discounts.
"""
import logging

from .state import LoadingState, RunStateStore
from .tasks import refresh_discounts

logger = logging.getLogger(__name__)


def request_refresh() -> LoadingState:
    """
    Démarre un rafraîchissement et l'envoie au worker Celery.

    Si le broker est indisponible, le rafraîchissement est exécuté
    immédiatement dans le processus courant pour que l'état quitte
    toujours "loading".

    Returns:
        L'état de chargement créé (son jeton identifie le rafraîchissement)
    """
    state = RunStateStore().begin()

    try:
        refresh_discounts.delay(state.token)
    except Exception as e:
        logger.error(f"Erreur lancement rafraîchissement background: {e}")
        refresh_discounts(state.token)

    return state


def ensure_fresh_state():
    """
    Retourne l'état courant, en lançant un rafraîchissement s'il n'y en a pas
    ou si le chargement en cours est abandonné.
    """
    store = RunStateStore()
    state = store.current()

    if state is None:
        logger.info("Aucun état en cache, premier rafraîchissement")
    elif isinstance(state, LoadingState) and state.is_stale():
        logger.warning(f"Chargement {state.token[:8]} abandonné, relance")
    else:
        return state

    loading = request_refresh()
    # En mode eager (ou sans broker) le résultat est déjà publié
    return store.current() or loading
