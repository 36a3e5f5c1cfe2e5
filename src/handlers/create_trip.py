"""POST /trips: store a plan produced by the planning workflow."""

from typing import Any

from core.clients import get_trip_service
from core.http import handle_request, json_body
from core.models.identity import RequestContext


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    def _create(request: RequestContext) -> tuple[int, dict[str, Any]]:
        trip = get_trip_service().create_trip(request, json_body(event))
        return 201, {"record": trip.model_dump(mode="json", by_alias=True)}

    return handle_request(event, _create, "create_trip")
