"""DELETE /trips/{tripId}: soft delete with an audit entry."""

from typing import Any

from core.clients import get_trip_service
from core.http import handle_request, path_param
from core.models.identity import RequestContext


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    def _delete(request: RequestContext) -> tuple[int, dict[str, Any]]:
        result = get_trip_service().delete_trip(request, path_param(event, "tripId"))
        return 200, {
            "message": "Trip deleted successfully",
            **result.model_dump(mode="json", by_alias=True),
        }

    return handle_request(event, _delete, "delete_trip")
