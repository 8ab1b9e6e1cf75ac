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
_STAFF = ["OWNER", "ADMIN", "MANAGER", "MEMBER"]
_MANAGERS = ["OWNER", "ADMIN", "MANAGER"]
_ADMINS = ["OWNER", "ADMIN"]


class MaterialTrackingModule(BaseModule):
    """Material catalog, orders, inventory and suppliers, tracked per job."""

    key = "material_tracking"
    name = "Material Tracking"
    description = "Track materials, orders, and inventory with supplier management"
    version = "1.0.0"
    author = "CRM SaaS"
    route_base = "/materials"

    classification_requirements = ClassificationRequirements(
        sectors=["23"],
        templates=[IndustryTemplate.PROJECT_BASED],
    )
    requires = ["job_costing"]

    routes = [
        route("GET", "/", "list_materials"),
        route("GET", "/{id}", "get_material"),
        route("POST", "/", "create_material", "material_tracking:create"),
        route("PUT", "/{id}", "update_material", "material_tracking:update"),
        route("DELETE", "/{id}", "delete_material", "material_tracking:delete"),
        route("GET", "/categories", "get_categories"),
        route("GET", "/orders", "list_orders"),
        route("GET", "/orders/{id}", "get_order"),
        route("POST", "/orders", "create_order", "material_tracking:order"),
        route("PUT", "/orders/{id}", "update_order", "material_tracking:order"),
        route("POST", "/orders/{id}/receive", "receive_order", "material_tracking:receive"),
        route("GET", "/job/{job_id}", "get_job_materials"),
        route("POST", "/job/{job_id}", "add_job_material", "material_tracking:assign"),
        route("GET", "/inventory", "get_inventory"),
        route("GET", "/inventory/low-stock", "get_low_stock"),
        route("GET", "/suppliers", "list_suppliers"),
        route("GET", "/suppliers/{id}", "get_supplier"),
        route("POST", "/suppliers", "create_supplier", "material_tracking:suppliers"),
        route("GET", "/reports/usage", "get_usage_report"),
        route("GET", "/reports/costs", "get_cost_report"),
    ]

    navigation = ModuleNavigation(
        main_nav=ModuleNavItem(
            label="Materials",
            icon="package",
            path="/materials",
            order=30,
            children=[
                ModuleNavItem(label="Catalog", icon="list", path="/materials"),
                ModuleNavItem(label="Orders", icon="shopping-cart", path="/materials/orders"),
                ModuleNavItem(label="Inventory", icon="archive", path="/materials/inventory"),
                ModuleNavItem(label="Suppliers", icon="truck", path="/materials/suppliers"),
            ],
        ),
        settings_nav=ModuleNavItem(label="Material Settings", icon="settings", path="/settings/materials"),
        entity_tabs=[
            EntityTabDefinition(entity_type=CRMEntityType.OPPORTUNITY, label="Materials", path="materials", order=3)
        ],
    )

    permissions = [
        ModulePermission(key="material_tracking:view", name="View Materials", description="View material catalog and inventory", default_roles=_ALL_ROLES),
        ModulePermission(key="material_tracking:create", name="Create Materials", description="Add new materials to catalog", default_roles=_MANAGERS),
        ModulePermission(key="material_tracking:update", name="Update Materials", description="Edit material details and pricing", default_roles=_MANAGERS),
        ModulePermission(key="material_tracking:delete", name="Delete Materials", description="Remove materials from catalog", default_roles=_ADMINS),
        ModulePermission(key="material_tracking:order", name="Create Orders", description="Create and manage material orders", default_roles=_MANAGERS),
        ModulePermission(key="material_tracking:receive", name="Receive Orders", description="Mark orders as received and update inventory", default_roles=_STAFF),
        ModulePermission(key="material_tracking:assign", name="Assign Materials", description="Assign materials to jobs", default_roles=_STAFF),
        ModulePermission(key="material_tracking:suppliers", name="Manage Suppliers", description="Add and edit suppliers", default_roles=_MANAGERS),
    ]

    settings = [
        ModuleSettingDefinition(
            key="default_markup",
            label="Default Material Markup (%)",
            description="Default markup percentage for materials",
            type="number",
            default_value=15,
            validation=SettingValidation(min=0, max=100),
        ),
        ModuleSettingDefinition(
            key="low_stock_threshold",
            label="Low Stock Threshold",
            description="Quantity threshold for low stock alerts",
            type="number",
            default_value=10,
            validation=SettingValidation(min=0),
        ),
        ModuleSettingDefinition(
            key="enable_low_stock_alerts",
            label="Enable Low Stock Alerts",
            description="Send notifications when materials are low",
            type="boolean",
            default_value=True,
        ),
        ModuleSettingDefinition(
            key="track_inventory",
            label="Track Inventory",
            description="Enable inventory tracking for materials",
            type="boolean",
            default_value=True,
        ),
        ModuleSettingDefinition(
            key="default_unit",
            label="Default Unit of Measure",
            description="Default unit for new materials",
            type="select",
            default_value="each",
            options=[
                SettingOption(value="each", label="Each"),
                SettingOption(value="box", label="Box"),
                SettingOption(value="bundle", label="Bundle"),
                SettingOption(value="roll", label="Roll"),
                SettingOption(value="sq_ft", label="Square Feet"),
                SettingOption(value="linear_ft", label="Linear Feet"),
                SettingOption(value="lb", label="Pound"),
                SettingOption(value="gallon", label="Gallon"),
            ],
        ),
        ModuleSettingDefinition(
            key="require_po_number",
            label="Require PO Number",
            description="Require purchase order number for orders",
            type="boolean",
            default_value=False,
        ),
    ]

    async def on_activate(self, context: ModuleContext) -> None:
        self._log_hook("activate", context)

    async def on_deactivate(self, context: ModuleContext) -> None:
        self._log_hook("deactivate", context)
