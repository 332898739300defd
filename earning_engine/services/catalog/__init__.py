"""Plan catalog maintenance."""

from earning_engine.services.catalog.plan_catalog import (
    PlanCatalogService,
    SeedResult,
)


__all__ = ["PlanCatalogService", "SeedResult"]
