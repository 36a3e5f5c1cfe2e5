"""
Core business logic package for PlanIt trip history.

Trip storage, access policy, audit logging and identity resolution live here.
Lambda handlers in src/handlers/ are thin wrappers that call into core/.
"""

__all__: list[str] = []
