"""
État observable du rafraîchissement des promotions.

Un seul état est visible à la fois, remplacé en bloc à chaque transition :
- LoadingState : un rafraîchissement est en cours
- FailedState : le rafraîchissement n'a pas pu aller au bout
- ReadyState : une liste de produits (réelle ou de démonstration) est prête

L'état est stocké dans le cache Django (Redis en production) pour être
partagé entre les workers web et Celery. Chaque rafraîchissement porte un
jeton : seul le dernier rafraîchissement lancé peut publier son résultat.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple, Union

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .pipeline import AcquisitionResult
from .products import Product

logger = logging.getLogger(__name__)

KIND_LOADING = 'loading'
KIND_FAILED = 'failed'
KIND_READY = 'ready'


@dataclass(frozen=True)
class LoadingState:
    token: str
    started_at: datetime
    kind: str = KIND_LOADING

    def is_stale(self, now: datetime = None) -> bool:
        """Un chargement trop ancien est considéré comme abandonné."""
        now = now or timezone.now()
        return now - self.started_at > timedelta(seconds=settings.DISCOUNTS_LOADING_TIMEOUT)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'token': self.token,
            'started_at': self.started_at.isoformat(),
        }


@dataclass(frozen=True)
class FailedState:
    token: str
    message: str
    kind: str = KIND_FAILED

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'token': self.token,
            'message': self.message,
        }


@dataclass(frozen=True)
class ReadyState:
    token: str
    products: Tuple[Product, ...]
    completed_at: datetime
    diagnostic: Optional[str] = None
    source: str = 'live'
    kind: str = KIND_READY

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'token': self.token,
            'products': [product.to_dict() for product in self.products],
            'completed_at': self.completed_at.isoformat(),
            'diagnostic': self.diagnostic,
            'source': self.source,
        }


RunState = Union[LoadingState, FailedState, ReadyState]


def _parse_timestamp(value: str) -> datetime:
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValueError(f"horodatage invalide: {value!r}")
    return parsed


def state_from_dict(data: dict) -> Optional[RunState]:
    """Reconstruit un état depuis sa forme sérialisée (None si illisible)."""
    if not isinstance(data, dict):
        return None

    kind = data.get('kind')
    try:
        if kind == KIND_LOADING:
            return LoadingState(
                token=data['token'],
                started_at=_parse_timestamp(data['started_at']),
            )
        if kind == KIND_FAILED:
            return FailedState(token=data['token'], message=data['message'])
        if kind == KIND_READY:
            return ReadyState(
                token=data['token'],
                products=tuple(Product.from_dict(p) for p in data['products']),
                completed_at=_parse_timestamp(data['completed_at']),
                diagnostic=data.get('diagnostic'),
                source=data.get('source', 'live'),
            )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"État en cache illisible ({kind}): {e}")
        return None

    logger.warning(f"Type d'état inconnu en cache: {kind!r}")
    return None


class RunStateStore:
    """
    Accès à l'état du rafraîchissement dans le cache Django.

    Les transitions loading -> ready/failed ne sont publiées que si le jeton
    du rafraîchissement est toujours le jeton courant : un rafraîchissement
    plus récent remplace les précédents.
    """

    CACHE_KEY = 'discounts_run_state'

    def __init__(self, cache_backend=None, key: str = None):
        self.cache = cache_backend or cache
        self.key = key or self.CACHE_KEY

    def current(self) -> Optional[RunState]:
        return state_from_dict(self.cache.get(self.key))

    def begin(self) -> LoadingState:
        """Démarre un nouveau rafraîchissement et invalide les précédents."""
        state = LoadingState(token=uuid.uuid4().hex, started_at=timezone.now())
        # Le chargement n'expire pas de lui-même : is_stale() le rend obsolète
        self.cache.set(self.key, state.to_dict(), None)
        logger.info(f"Rafraîchissement {state.token[:8]} démarré")
        return state

    def is_current(self, token: str) -> bool:
        state = self.current()
        return state is not None and state.token == token

    def complete(self, token: str, result: AcquisitionResult) -> bool:
        """
        Publie le résultat du rafraîchissement identifié par token.

        Returns:
            False si un rafraîchissement plus récent a pris la main
        """
        state = ReadyState(
            token=token,
            products=tuple(result.products),
            completed_at=result.completed_at,
            diagnostic=result.diagnostic,
            source=result.source,
        )
        return self._publish(state, timeout=settings.DISCOUNTS_STATE_TTL or None)

    def fail(self, token: str, message: str) -> bool:
        return self._publish(FailedState(token=token, message=message), timeout=settings.DISCOUNTS_STATE_TTL or None)

    def clear(self) -> None:
        self.cache.delete(self.key)

    def _publish(self, state: RunState, timeout) -> bool:
        if not self.is_current(state.token):
            logger.info(f"Rafraîchissement {state.token[:8]} remplacé par un plus récent, résultat ignoré")
            return False
        self.cache.set(self.key, state.to_dict(), timeout)
        logger.info(f"Rafraîchissement {state.token[:8]} terminé: {state.kind}")
        return True
