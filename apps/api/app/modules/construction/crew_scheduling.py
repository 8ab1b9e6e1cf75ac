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
    SettingOption,
    SettingValidation,
)

_ALL_ROLES = ["OWNER", "ADMIN", "MANAGER", "MEMBER", "VIEWER"]
_MANAGERS = ["OWNER", "ADMIN", "MANAGER"]
_ADMINS = ["OWNER", "ADMIN"]

_WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


class CrewSchedulingModule(BaseModule):
    key = "crew_scheduling"
    name = "Crew Scheduling"
    description = "Schedule and assign crews to jobs with calendar views and availability tracking"
    version = "1.0.0"
    author = "CRM SaaS"
    route_base = "/crews"

    classification_requirements = ClassificationRequirements(
        sectors=["23"],
        templates=[IndustryTemplate.PROJECT_BASED],
    )
    requires = ["job_costing"]

    routes = [
        route("GET", "/", "list_crews"),
        route("GET", "/{id}", "get_crew"),
        route("POST", "/", "create_crew", "crew_scheduling:create"),
        route("PUT", "/{id}", "update_crew", "crew_scheduling:update"),
        route("DELETE", "/{id}", "delete_crew", "crew_scheduling:delete"),
        route("GET", "/{id}/members", "get_crew_members"),
        route("POST", "/{id}/members", "add_crew_member", "crew_scheduling:members"),
        route("DELETE", "/{id}/members/{member_id}", "remove_crew_member", "crew_scheduling:members"),
        route("GET", "/{id}/schedule", "get_crew_schedule"),
        route("GET", "/{id}/availability", "get_crew_availability"),
        route("GET", "/assignments", "get_assignments"),
        route("POST", "/assignments", "create_assignment", "crew_scheduling:assign"),
        route("PUT", "/assignments/{id}", "update_assignment", "crew_scheduling:assign"),
        route("DELETE", "/assignments/{id}", "delete_assignment", "crew_scheduling:assign"),
        route("GET", "/calendar", "get_calendar_view"),
    ]

    navigation = ModuleNavigation(
        main_nav=ModuleNavItem(
            label="Crews",
            icon="users",
            path="/crews",
            order=20,
            children=[
                ModuleNavItem(label="All Crews", icon="list", path="/crews"),
                ModuleNavItem(label="Calendar", icon="calendar", path="/crews/calendar"),
                ModuleNavItem(label="Assignments", icon="clipboard", path="/crews/assignments"),
            ],
        ),
        settings_nav=ModuleNavItem(label="Crew Settings", icon="settings", path="/settings/crews"),
        entity_tabs=[EntityTabDefinition(entity_type=CRMEntityType.OPPORTUNITY, label="Crew", path="crew", order=2)],
    )

    permissions = [
        ModulePermission(key="crew_scheduling:view", name="View Crews", description="View crew details and schedules", default_roles=_ALL_ROLES),
        ModulePermission(key="crew_scheduling:create", name="Create Crews", description="Create new crews", default_roles=_MANAGERS),
        ModulePermission(key="crew_scheduling:update", name="Update Crews", description="Edit crew details", default_roles=_MANAGERS),
        ModulePermission(key="crew_scheduling:delete", name="Delete Crews", description="Delete crews", default_roles=_ADMINS),
        ModulePermission(key="crew_scheduling:members", name="Manage Members", description="Add and remove crew members", default_roles=_MANAGERS),
        ModulePermission(key="crew_scheduling:assign", name="Assign Crews", description="Assign crews to jobs", default_roles=_MANAGERS),
    ]

    settings = [
        ModuleSettingDefinition(
            key="default_work_hours_start",
            label="Default Work Start Time",
            description="Default start time for crew work day",
            type="text",
            default_value="07:00",
        ),
        ModuleSettingDefinition(
            key="default_work_hours_end",
            label="Default Work End Time",
            description="Default end time for crew work day",
            type="text",
            default_value="17:00",
        ),
        ModuleSettingDefinition(
            key="work_days",
            label="Work Days",
            description="Days crews typically work",
            type="multiselect",
            default_value=["monday", "tuesday", "wednesday", "thursday", "friday"],
            options=[SettingOption(value=day, label=day.capitalize()) for day in _WEEKDAYS],
        ),
        ModuleSettingDefinition(
            key="allow_double_booking",
            label="Allow Double Booking",
            description="Allow crews to be assigned to multiple jobs at the same time",
            type="boolean",
            default_value=False,
        ),
        ModuleSettingDefinition(
            key="travel_time_buffer",
            label="Travel Time Buffer (minutes)",
            description="Buffer time between assignments for travel",
            type="number",
            default_value=30,
            validation=SettingValidation(min=0, max=120),
        ),
    ]

    async def on_activate(self, context: ModuleContext) -> None:
        self._log_hook("activate", context)

    async def on_deactivate(self, context: ModuleContext) -> None:
        self._log_hook("deactivate", context)
