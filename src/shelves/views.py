"""Views exposing the classified shelves."""

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .services import refresher


def _wants_refresh(request) -> bool:
    return request.GET.get("refresh", "").lower() in {"1", "true", "yes"}


@require_GET
def shelves_api(request):
    """Return the three shelves as JSON; ``?refresh=1`` rebuilds them."""
    shelf_refresher = refresher.default_refresher
    result = shelf_refresher.refresh() if _wants_refresh(request) else shelf_refresher.current()
    return JsonResponse(result.as_dict())
