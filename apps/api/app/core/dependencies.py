from __future__ import annotations

from fastapi import Request

from app.core.config import Settings, get_settings
from app.core.events import InProcessEventBus
from app.industry_config.registry import ConfigurationRegistry
from app.modules.construction import register_construction_modules
from app.modules.registry import ModuleRegistry


def build_configuration_registry(settings: Settings | None = None) -> ConfigurationRegistry:
    settings = settings or get_settings()
    return ConfigurationRegistry(
        classification_strict=settings.classification_strict,
        strict_templates=settings.strict_templates,
    )


def build_module_registry(
    settings: Settings | None = None,
    event_bus: InProcessEventBus | None = None,
) -> ModuleRegistry:
    settings = settings or get_settings()
    registry = ModuleRegistry(event_bus=event_bus, unregister_guard=settings.module_unregister_guard)
    if settings.register_builtin_modules:
        register_construction_modules(registry)
    return registry


def get_configuration_registry(request: Request) -> ConfigurationRegistry:
    return request.app.state.configuration_registry


def get_module_registry(request: Request) -> ModuleRegistry:
    return request.app.state.module_registry
