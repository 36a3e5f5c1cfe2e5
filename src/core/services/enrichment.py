"""Display enrichment for trip views (location images).

Enrichment is cosmetic: it never takes part in authorization and its
failures never fail the request.
"""

import logging
from abc import ABC, abstractmethod

from core.models.trip import TripView

logger = logging.getLogger(__name__)


class ImageEnricher(ABC):
    @abstractmethod
    def enrich(self, trips: list[TripView]) -> list[TripView]: ...


class NoImageEnricher(ImageEnricher):
    """Default enricher: returns views unchanged."""

    def enrich(self, trips: list[TripView]) -> list[TripView]:
        return trips


def enrich_safely(enricher: ImageEnricher, trips: list[TripView]) -> list[TripView]:
    if not trips:
        return trips
    try:
        return enricher.enrich(trips)
    except Exception:
        logger.exception("Image enrichment failed for %d trips, returning without images", len(trips))
        return trips
