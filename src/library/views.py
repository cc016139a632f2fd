"""JSON API over the raw music tables."""

import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from .services.backend import (
    BackendError,
    InvalidRowError,
    UnknownTableError,
    get_default_backend,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "recently_played"


@require_GET
def list_tables(request):
    """Return every browsable table name; an empty list when the database is down."""
    backend = get_default_backend()
    return JsonResponse({"tables": backend.list_tables()})


@csrf_exempt
@require_http_methods(["GET", "POST"])
def table_rows(request):
    """Read rows from a table (GET) or add a row to it (POST)."""
    if request.method == "POST":
        return _add_row(request)

    table = request.GET.get("table") or DEFAULT_TABLE
    backend = get_default_backend()
    if table not in backend.list_tables():
        return JsonResponse({"error": "Invalid table parameter"}, status=400)

    limit = request.GET.get("limit")
    data = backend.read_table(table, limit=limit)
    return JsonResponse({"data": data})


def _add_row(request):
    try:
        payload = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({"error": "Invalid JSON body"}, status=400)

    if not isinstance(payload, dict):
        return JsonResponse({"error": "Invalid JSON body"}, status=400)

    table = payload.get("table")
    data = payload.get("data")
    backend = get_default_backend()
    try:
        backend.insert_row(table, data)
    except UnknownTableError:
        return JsonResponse({"error": "Invalid table parameter"}, status=400)
    except InvalidRowError as exc:
        return JsonResponse({"error": str(exc)}, status=400)
    except BackendError as exc:
        logger.error("Error adding data: %s", exc)
        return JsonResponse({"error": "Failed to add data"}, status=500)

    return JsonResponse({"message": "Data added successfully"}, status=201)
