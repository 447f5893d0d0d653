"""Per-user application inventory and name matching."""

from rosa.applications.service import ApplicationService

__all__ = ["ApplicationService"]
