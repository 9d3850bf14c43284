"""
Vue de health check.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.utils import timezone

from ..state import KIND_LOADING, KIND_READY, RunStateStore


@require_http_methods(["GET", "HEAD"])
def health_check(request):
    """
    État du tableau : type de l'état courant, source des produits publiés
    et chargement abandonné éventuel.
    """
    state = RunStateStore().current()

    payload = {
        "status": "healthy",
        "run_state": state.kind if state else "idle",
        "timestamp": timezone.now().isoformat(),
    }
    if state is not None and state.kind == KIND_READY:
        payload["source"] = state.source
        payload["products"] = len(state.products)
        payload["completed_at"] = state.completed_at.isoformat()
    if state is not None and state.kind == KIND_LOADING and state.is_stale():
        payload["status"] = "degraded"

    return JsonResponse(payload, status=200)
