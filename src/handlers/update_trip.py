"""PATCH /trips/{tripId}: change title, location or plan of an owned trip."""

from typing import Any

from core.clients import get_trip_service
from core.http import handle_request, json_body, path_param
from core.models.identity import RequestContext


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    def _update(request: RequestContext) -> tuple[int, dict[str, Any]]:
        trip = get_trip_service().update_trip(request, path_param(event, "tripId"), json_body(event))
        return 200, {"record": trip.model_dump(mode="json", by_alias=True)}

    return handle_request(event, _update, "update_trip")
