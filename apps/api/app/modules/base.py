from __future__ import annotations

import logging
from typing import Any, ClassVar

from app.industry_config import classification
from app.modules.schemas import (
    ActivationCheck,
    ClassificationRequirements,
    ModuleContext,
    ModuleNavigation,
    ModuleNavItem,
    ModulePermission,
    ModuleRead,
    ModuleRoute,
    ModuleSettingDefinition,
)

logger = logging.getLogger("app.modules")


def route(method: str, path: str, handler: str, *permissions: str) -> ModuleRoute:
    return ModuleRoute(method=method, path=path, handler=handler, permissions=list(permissions))


class BaseModule:
    """Declarative CRM module.

    Subclasses describe themselves through class attributes and may override
    the async lifecycle hooks. The registry awaits ``on_activate`` and
    ``on_deactivate`` and treats any exception they raise as a failed
    transition.
    """

    key: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    version: ClassVar[str] = "1.0.0"
    author: ClassVar[str | None] = None
    route_base: ClassVar[str]
    routes: ClassVar[list[ModuleRoute]] = []
    classification_requirements: ClassVar[ClassificationRequirements | None] = None
    requires: ClassVar[list[str]] = []
    conflicts: ClassVar[list[str]] = []
    navigation: ClassVar[ModuleNavigation | None] = None
    permissions: ClassVar[list[ModulePermission]] = []
    settings: ClassVar[list[ModuleSettingDefinition]] = []

    async def on_activate(self, context: ModuleContext) -> None:
        return None

    async def on_deactivate(self, context: ModuleContext) -> None:
        return None

    def can_activate(self, context: ModuleContext) -> ActivationCheck:
        if context.classification_code and not self.is_available_for_classification(context.classification_code):
            return ActivationCheck(
                valid=False,
                reason=f"Module {self.key} is not available for classification {context.classification_code}",
            )
        if context.template and not self.is_available_for_template(context.template):
            return ActivationCheck(
                valid=False,
                reason=f"Module {self.key} is not available for template {context.template}",
            )
        return ActivationCheck(valid=True)

    def is_available_for_classification(self, code: str) -> bool:
        requirements = self.classification_requirements
        if requirements is None:
            return True
        digits = classification.normalize(code)
        if requirements.sectors and classification.sector(digits) not in requirements.sectors:
            return False
        if requirements.industries and not any(digits.startswith(industry) for industry in requirements.industries):
            return False
        return True

    def is_available_for_template(self, template: str) -> bool:
        requirements = self.classification_requirements
        if requirements is None or not requirements.templates:
            return True
        return template in requirements.templates

    def get_default_config(self) -> dict[str, Any]:
        return {setting.key: setting.default_value for setting in self.settings if setting.default_value is not None}

    def get_permissions(self) -> list[ModulePermission]:
        return list(self.permissions)

    def has_permission(self, context: ModuleContext, permission_key: str) -> bool:
        return permission_key in context.permissions

    def get_routes(self) -> list[ModuleRoute]:
        return list(self.routes)

    def get_navigation(self) -> ModuleNavItem | None:
        return self.navigation.main_nav if self.navigation else None

    def to_read(self) -> ModuleRead:
        return ModuleRead(
            key=self.key,
            name=self.name,
            description=self.description,
            version=self.version,
            author=self.author,
            route_base=self.route_base,
            classification_requirements=self.classification_requirements,
            requires=list(self.requires),
            conflicts=list(self.conflicts),
            navigation=self.navigation,
            permissions=self.get_permissions(),
            settings=list(self.settings),
            routes=self.get_routes(),
        )

    def _log_hook(self, hook: str, context: ModuleContext) -> None:
        logger.info(
            "module.hook",
            extra={"module_key": self.key, "tenant_id": context.tenant_id, "status": hook},
        )
