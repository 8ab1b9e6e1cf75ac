from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from app.industry_config.schemas import CRMEntityType, IndustryTemplate

if TYPE_CHECKING:
    from app.modules.base import BaseModule


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
SettingType = Literal["text", "number", "boolean", "select", "multiselect"]


class ModuleRoute(BaseModel):
    path: str
    method: HttpMethod
    handler: str
    middleware: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)


class ModuleNavItem(BaseModel):
    label: str
    icon: str | None = None
    path: str
    order: int | None = None
    children: list[ModuleNavItem] = Field(default_factory=list)


class EntityTabDefinition(BaseModel):
    entity_type: CRMEntityType
    label: str
    path: str
    order: int | None = None


class ModuleNavigation(BaseModel):
    main_nav: ModuleNavItem | None = None
    settings_nav: ModuleNavItem | None = None
    entity_tabs: list[EntityTabDefinition] = Field(default_factory=list)


class ModulePermission(BaseModel):
    key: str
    name: str
    description: str
    default_roles: list[str] = Field(default_factory=list)


class SettingOption(BaseModel):
    value: str
    label: str


class SettingValidation(BaseModel):
    required: bool | None = None
    min: float | None = None
    max: float | None = None


class ModuleSettingDefinition(BaseModel):
    key: str
    label: str
    description: str | None = None
    type: SettingType
    default_value: Any = None
    options: list[SettingOption] = Field(default_factory=list)
    validation: SettingValidation | None = None


class ClassificationRequirements(BaseModel):
    sectors: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    templates: list[IndustryTemplate] = Field(default_factory=list)


@dataclass(slots=True)
class ModuleContext:
    tenant_id: str
    user_id: str
    user_role: str
    module_config: dict[str, Any] = field(default_factory=dict)
    permissions: list[str] = field(default_factory=list)
    classification_code: str | None = None
    template: IndustryTemplate | None = None


@dataclass(slots=True)
class ActivationCheck:
    valid: bool
    reason: str | None = None


@dataclass(slots=True)
class ModuleRegistryEntry:
    module: BaseModule
    is_active: bool
    loaded_at: datetime


class ModuleActivationResult(BaseModel):
    success: bool
    module_key: str
    message: str | None = None
    errors: list[str] = Field(default_factory=list)


class ModuleRead(BaseModel):
    key: str
    name: str
    description: str
    version: str
    author: str | None = None
    route_base: str
    classification_requirements: ClassificationRequirements | None = None
    requires: list[str] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)
    navigation: ModuleNavigation | None = None
    permissions: list[ModulePermission] = Field(default_factory=list)
    settings: list[ModuleSettingDefinition] = Field(default_factory=list)
    routes: list[ModuleRoute] = Field(default_factory=list)


class ModuleActivationRequest(BaseModel):
    module_keys: list[str] = Field(min_length=1)
    classification_code: str | None = None
    template: IndustryTemplate | None = None
    module_config: dict[str, Any] = Field(default_factory=dict)


class ModuleDeactivationRequest(BaseModel):
    module_key: str = Field(min_length=1)
    module_config: dict[str, Any] = Field(default_factory=dict)


class TenantModulesRead(BaseModel):
    tenant_id: str
    module_keys: list[str]
