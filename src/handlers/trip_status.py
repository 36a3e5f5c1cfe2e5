"""GET /trips/status: service health and live trip count.

Always returns 200; a store failure is reported as a degraded status.
"""

from typing import Any

from core.clients import get_trip_service
from core.http import handle_request
from core.models.identity import RequestContext


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    def _status(request: RequestContext) -> tuple[int, dict[str, Any]]:
        status = get_trip_service().service_status()
        return 200, status.model_dump(mode="json", by_alias=True)

    return handle_request(event, _status, "trip_status")
