"""
Business services for PlanIt trip history.

- trips.py: TripService, the list/get/create/update/delete orchestration
- access_policy.py: ownership rule shared by every read and mutation
- audit.py: best-effort audit recording
- enrichment.py: optional location image enrichment
- migration.py: programmatic Alembic upgrades
"""

__all__: list[str] = []
