from __future__ import annotations

import asyncio
import logging

import pytest

from app.modules import BaseModule, ModuleContext
from app.modules.construction import CrewSchedulingModule, JobCostingModule, MaterialTrackingModule


@pytest.mark.parametrize(
    ("module", "route_count", "permission_count", "setting_count"),
    [
        (JobCostingModule(), 13, 7, 5),
        (CrewSchedulingModule(), 15, 6, 5),
        (MaterialTrackingModule(), 20, 8, 6),
    ],
)
def test_module_declarations(
    module: BaseModule,
    route_count: int,
    permission_count: int,
    setting_count: int,
) -> None:
    assert len(module.get_routes()) == route_count
    assert len(module.get_permissions()) == permission_count
    assert len(module.settings) == setting_count


@pytest.mark.parametrize("module", [JobCostingModule(), CrewSchedulingModule(), MaterialTrackingModule()])
def test_route_permissions_are_declared(module: BaseModule) -> None:
    declared = {permission.key for permission in module.get_permissions()}
    used = {permission for item in module.get_routes() for permission in item.permissions}

    assert used
    assert used <= declared
    assert all(key.startswith(f"{module.key}:") for key in declared)


@pytest.mark.parametrize("module", [JobCostingModule(), CrewSchedulingModule(), MaterialTrackingModule()])
def test_construction_modules_require_construction_classification(module: BaseModule) -> None:
    assert module.is_available_for_classification("238160")
    assert module.is_available_for_classification("23-62-20")
    assert not module.is_available_for_classification("541511")
    assert module.is_available_for_template("PROJECT_BASED")
    assert not module.is_available_for_template("SERVICE_BASED")


def test_dependencies() -> None:
    assert JobCostingModule.requires == []
    assert CrewSchedulingModule.requires == ["job_costing"]
    assert MaterialTrackingModule.requires == ["job_costing"]


def test_job_costing_default_config() -> None:
    assert JobCostingModule().get_default_config() == {
        "default_markup_percentage": 20,
        "default_labor_rate": 50,
        "overhead_percentage": 15,
        "auto_create_job": True,
        "job_number_prefix": "JOB-",
    }


def test_crew_scheduling_default_config() -> None:
    config = CrewSchedulingModule().get_default_config()

    assert config["default_work_hours_start"] == "07:00"
    assert config["work_days"] == ["monday", "tuesday", "wednesday", "thursday", "friday"]
    assert config["allow_double_booking"] is False


def test_navigation() -> None:
    nav = JobCostingModule().get_navigation()

    assert nav is not None
    assert nav.label == "Jobs"
    assert nav.path == "/jobs"
    assert nav.order == 10
    assert [child.label for child in nav.children][:2] == ["All Jobs", "Active Jobs"]
    assert CrewSchedulingModule().get_navigation().label == "Crews"  # type: ignore[union-attr]


def test_has_permission_reads_context() -> None:
    context = ModuleContext(
        tenant_id="tenant-1",
        user_id="user-1",
        user_role="MANAGER",
        permissions=["job_costing:create"],
    )
    module = JobCostingModule()

    assert module.has_permission(context, "job_costing:create")
    assert not module.has_permission(context, "job_costing:delete")


def test_to_read_describes_module() -> None:
    read = MaterialTrackingModule().to_read()

    assert read.key == "material_tracking"
    assert read.requires == ["job_costing"]
    assert read.classification_requirements is not None
    assert read.classification_requirements.sectors == ["23"]
    assert read.version == "1.0.0"


def test_lifecycle_hooks_log(caplog: pytest.LogCaptureFixture) -> None:
    context = ModuleContext(tenant_id="tenant-1", user_id="user-1", user_role="ADMIN")
    module = JobCostingModule()

    with caplog.at_level(logging.INFO, logger="app.modules"):
        asyncio.run(module.on_activate(context))
        asyncio.run(module.on_deactivate(context))

    hooks = [record for record in caplog.records if record.getMessage() == "module.hook"]
    assert [getattr(record, "status", None) for record in hooks] == ["activate", "deactivate"]
    assert all(getattr(record, "tenant_id", None) == "tenant-1" for record in hooks)
