from app.modules.base import BaseModule
from app.modules.errors import DuplicateModuleError, ModuleInUseError, ModuleRegistryError
from app.modules.registry import MODULE_ACTIVATED, MODULE_DEACTIVATED, ModuleRegistry
from app.modules.schemas import (
    ActivationCheck,
    ClassificationRequirements,
    ModuleActivationResult,
    ModuleContext,
    ModuleRegistryEntry,
)

__all__ = [
    "BaseModule",
    "ModuleRegistry",
    "MODULE_ACTIVATED",
    "MODULE_DEACTIVATED",
    "ActivationCheck",
    "ClassificationRequirements",
    "ModuleActivationResult",
    "ModuleContext",
    "ModuleRegistryEntry",
    "ModuleRegistryError",
    "DuplicateModuleError",
    "ModuleInUseError",
]
