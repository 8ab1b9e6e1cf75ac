from __future__ import annotations

from typing import TYPE_CHECKING

from app.modules.construction.crew_scheduling import CrewSchedulingModule
from app.modules.construction.job_costing import JobCostingModule
from app.modules.construction.material_tracking import MaterialTrackingModule

if TYPE_CHECKING:
    from app.modules.registry import ModuleRegistry


def register_construction_modules(registry: ModuleRegistry) -> None:
    registry.register(JobCostingModule())
    registry.register(CrewSchedulingModule())
    registry.register(MaterialTrackingModule())


__all__ = [
    "CrewSchedulingModule",
    "JobCostingModule",
    "MaterialTrackingModule",
    "register_construction_modules",
]
