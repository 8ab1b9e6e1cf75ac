from __future__ import annotations

from collections.abc import Iterable


class ModuleRegistryError(Exception):
    pass


class DuplicateModuleError(ModuleRegistryError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Module {key} is already registered")


class ModuleInUseError(ModuleRegistryError):
    """Raised when unregistering a module that a tenant still has active."""

    def __init__(self, key: str, tenant_ids: Iterable[str]) -> None:
        self.key = key
        self.tenant_ids = sorted(tenant_ids)
        super().__init__(f"Module {key} is active for tenants: {', '.join(self.tenant_ids)}")
