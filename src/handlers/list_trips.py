"""GET /trips: list the caller's trips (or public trips when anonymous)."""

from typing import Any

from core.clients import get_trip_service
from core.http import handle_request, query_params
from core.models.identity import RequestContext


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    def _list(request: RequestContext) -> tuple[int, dict[str, Any]]:
        result = get_trip_service().list_trips(request, query_params(event))
        return 200, result.model_dump(mode="json", by_alias=True)

    return handle_request(event, _list, "list_trips")
