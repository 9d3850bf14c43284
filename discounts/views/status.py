"""
API JSON pour le polling de l'état du rafraîchissement.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from ..state import RunStateStore


@require_GET
def discount_status_api(request):
    """
    Retourne:
    - kind: loading, failed, ready (ou idle si aucun rafraîchissement)
    - products, completed_at, diagnostic, source si prêt
    - message si échec
    """
    state = RunStateStore().current()

    if state is None:
        return JsonResponse({'kind': 'idle'})

    return JsonResponse(state.to_dict())
