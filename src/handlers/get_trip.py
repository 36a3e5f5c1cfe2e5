"""GET /trips/{tripId}: 404 when missing, 403 when owned by someone else."""

from typing import Any

from core.clients import get_trip_service
from core.http import handle_request, path_param
from core.models.identity import RequestContext


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    def _get(request: RequestContext) -> tuple[int, dict[str, Any]]:
        trip = get_trip_service().get_trip(request, path_param(event, "tripId"))
        return 200, {"record": trip.model_dump(mode="json", by_alias=True)}

    return handle_request(event, _get, "get_trip")
