from __future__ import annotations

from app.industry_config.schemas import CRMEntityType, IndustryTemplate
from app.modules.base import BaseModule, route
from app.modules.schemas import (
    ClassificationRequirements,
    EntityTabDefinition,
    ModuleContext,
    ModuleNavigation,
    ModuleNavItem,
    ModulePermission,
    ModuleSettingDefinition,
    SettingValidation,
)

_ALL_ROLES = ["OWNER", "ADMIN", "MANAGER", "MEMBER", "VIEWER"]
_MANAGERS = ["OWNER", "ADMIN", "MANAGER"]
_ADMINS = ["OWNER", "ADMIN"]


class JobCostingModule(BaseModule):
    """Labor, material and overhead costs per job, with budget vs actual analysis."""

    key = "job_costing"
    name = "Job Costing"
    description = "Track costs, labor, and materials per job with budget vs actual analysis"
    version = "1.0.0"
    author = "CRM SaaS"
    route_base = "/jobs"

    classification_requirements = ClassificationRequirements(
        sectors=["23"],
        templates=[IndustryTemplate.PROJECT_BASED],
    )

    routes = [
        route("GET", "/", "list_jobs"),
        route("GET", "/{id}", "get_job"),
        route("POST", "/", "create_job", "job_costing:create"),
        route("PUT", "/{id}", "update_job", "job_costing:update"),
        route("DELETE", "/{id}", "delete_job", "job_costing:delete"),
        route("GET", "/{id}/costs", "get_job_costs"),
        route("POST", "/{id}/costs", "add_job_cost", "job_costing:costs"),
        route("GET", "/{id}/labor", "get_job_labor"),
        route("POST", "/{id}/labor", "add_job_labor", "job_costing:labor"),
        route("GET", "/{id}/materials", "get_job_materials"),
        route("GET", "/{id}/profitability", "get_job_profitability"),
        route("GET", "/reports/summary", "get_costing_summary"),
        route("GET", "/reports/comparison", "get_budget_comparison"),
    ]

    navigation = ModuleNavigation(
        main_nav=ModuleNavItem(
            label="Jobs",
            icon="briefcase",
            path="/jobs",
            order=10,
            children=[
                ModuleNavItem(label="All Jobs", icon="list", path="/jobs"),
                ModuleNavItem(label="Active Jobs", icon="activity", path="/jobs?status=active"),
                ModuleNavItem(label="Job Costing", icon="dollar-sign", path="/jobs/costing"),
            ],
        ),
        settings_nav=ModuleNavItem(label="Job Costing Settings", icon="settings", path="/settings/job-costing"),
        entity_tabs=[EntityTabDefinition(entity_type=CRMEntityType.OPPORTUNITY, label="Job", path="job", order=1)],
    )

    permissions = [
        ModulePermission(key="job_costing:view", name="View Jobs", description="View job details and costs", default_roles=_ALL_ROLES),
        ModulePermission(key="job_costing:create", name="Create Jobs", description="Create new jobs", default_roles=_MANAGERS),
        ModulePermission(key="job_costing:update", name="Update Jobs", description="Edit job details", default_roles=_MANAGERS),
        ModulePermission(key="job_costing:delete", name="Delete Jobs", description="Delete jobs", default_roles=_ADMINS),
        ModulePermission(key="job_costing:costs", name="Manage Costs", description="Add and edit job costs", default_roles=_MANAGERS),
        ModulePermission(key="job_costing:labor", name="Manage Labor", description="Add and edit labor entries", default_roles=_MANAGERS),
        ModulePermission(key="job_costing:reports", name="View Reports", description="View job costing reports", default_roles=_MANAGERS),
    ]

    settings = [
        ModuleSettingDefinition(
            key="default_markup_percentage",
            label="Default Markup Percentage",
            description="Default markup to apply to job costs",
            type="number",
            default_value=20,
            validation=SettingValidation(min=0, max=100),
        ),
        ModuleSettingDefinition(
            key="default_labor_rate",
            label="Default Labor Rate ($/hr)",
            description="Default hourly rate for labor",
            type="number",
            default_value=50,
            validation=SettingValidation(min=0),
        ),
        ModuleSettingDefinition(
            key="overhead_percentage",
            label="Overhead Percentage",
            description="Overhead percentage to include in job costs",
            type="number",
            default_value=15,
            validation=SettingValidation(min=0, max=100),
        ),
        ModuleSettingDefinition(
            key="auto_create_job",
            label="Auto-Create Job from Opportunity",
            description="Automatically create a job when opportunity is won",
            type="boolean",
            default_value=True,
        ),
        ModuleSettingDefinition(
            key="job_number_prefix",
            label="Job Number Prefix",
            description="Prefix for auto-generated job numbers",
            type="text",
            default_value="JOB-",
        ),
    ]

    async def on_activate(self, context: ModuleContext) -> None:
        self._log_hook("activate", context)

    async def on_deactivate(self, context: ModuleContext) -> None:
        self._log_hook("deactivate", context)
