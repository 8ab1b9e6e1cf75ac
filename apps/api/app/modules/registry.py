from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from app.context import get_correlation_id
from app.core.events import EventHandler, InProcessEventBus
from app.metrics import UNKNOWN_MODULE_LABEL, observe_module_activation, observe_module_deactivation
from app.modules.base import BaseModule
from app.modules.errors import DuplicateModuleError, ModuleInUseError
from app.modules.schemas import ModuleActivationResult, ModuleContext, ModuleRegistryEntry

logger = logging.getLogger("app.modules")
tracer = trace.get_tracer("app.modules.registry")

MODULE_ACTIVATED = "module:activated"
MODULE_DEACTIVATED = "module:deactivated"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModuleRegistry:
    """Registered modules plus the per-tenant set of active module keys.

    Activation and deactivation for one tenant are serialized by a per-tenant
    lock; different tenants proceed independently.
    """

    def __init__(self, event_bus: InProcessEventBus | None = None, *, unregister_guard: bool = True) -> None:
        self.event_bus = event_bus or InProcessEventBus()
        self.unregister_guard = unregister_guard
        self._modules: dict[str, ModuleRegistryEntry] = {}
        self._activated: dict[str, set[str]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def register(self, module: BaseModule) -> None:
        if module.key in self._modules:
            raise DuplicateModuleError(module.key)
        self._modules[module.key] = ModuleRegistryEntry(module=module, is_active=True, loaded_at=utcnow())
        logger.info("module.registered", extra={"module_key": module.key})

    def unregister(self, key: str) -> None:
        if key not in self._modules:
            return
        if self.unregister_guard:
            tenants = [tenant_id for tenant_id, keys in self._activated.items() if key in keys]
            if tenants:
                raise ModuleInUseError(key, tenants)
        del self._modules[key]
        logger.info("module.unregistered", extra={"module_key": key})

    def get_module(self, key: str) -> BaseModule | None:
        entry = self._modules.get(key)
        return entry.module if entry else None

    def get_entry(self, key: str) -> ModuleRegistryEntry | None:
        return self._modules.get(key)

    def get_all_modules(self) -> list[BaseModule]:
        return [entry.module for entry in self._modules.values()]

    def get_modules_for_classification(self, code: str) -> list[BaseModule]:
        return [module for module in self.get_all_modules() if module.is_available_for_classification(code)]

    def get_modules_for_template(self, template: str) -> list[BaseModule]:
        return [module for module in self.get_all_modules() if module.is_available_for_template(template)]

    def get_activated_modules(self, tenant_id: str) -> list[str]:
        return sorted(self._activated.get(tenant_id, ()))

    def is_module_activated(self, tenant_id: str, key: str) -> bool:
        return key in self._activated.get(tenant_id, ())

    def on(self, event_type: str, listener: EventHandler) -> None:
        self.event_bus.subscribe(event_type, listener)

    def off(self, event_type: str, listener: EventHandler) -> None:
        self.event_bus.unsubscribe(event_type, listener)

    def reset(self) -> None:
        self._modules.clear()
        self._activated.clear()
        self._locks.clear()
        self._lock_users.clear()
        self.event_bus.clear()

    @asynccontextmanager
    async def _tenant_lock(self, tenant_id: str) -> AsyncIterator[None]:
        # Locks live only while a call for the tenant is running or waiting.
        lock = self._locks.setdefault(tenant_id, asyncio.Lock())
        self._lock_users[tenant_id] = self._lock_users.get(tenant_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users.get(tenant_id, 1) - 1
            if remaining:
                self._lock_users[tenant_id] = remaining
            else:
                self._lock_users.pop(tenant_id, None)
                self._locks.pop(tenant_id, None)

    def _metric_label(self, key: str) -> str:
        return key if key in self._modules else UNKNOWN_MODULE_LABEL

    def _emit(self, event_type: str, module_key: str, context: ModuleContext, tenant_id: str) -> None:
        payload: dict[str, Any] = {
            "module_key": module_key,
            "tenant_id": tenant_id,
            "user_id": context.user_id,
            "data": {},
            "timestamp": utcnow(),
        }
        self.event_bus.publish(event_type, payload)

    async def activate_for_tenant(
        self,
        tenant_id: str,
        module_keys: list[str],
        context: ModuleContext,
    ) -> list[ModuleActivationResult]:
        async with self._tenant_lock(tenant_id):
            with tracer.start_as_current_span("modules.activate_for_tenant") as span:
                span.set_attribute("tenant_id", tenant_id)
                span.set_attribute("module_keys", list(module_keys))
                span.set_attribute("correlation_id", get_correlation_id() or "")
                results = []
                for key in module_keys:
                    result = await self._activate_one(tenant_id, key, module_keys, context)
                    observe_module_activation(self._metric_label(key), result.success)
                    results.append(result)
                return results

    async def _activate_one(
        self,
        tenant_id: str,
        key: str,
        batch: list[str],
        context: ModuleContext,
    ) -> ModuleActivationResult:
        active = self._activated.get(tenant_id, set())
        entry = self._modules.get(key)
        if entry is None:
            return self._failed(tenant_id, key, f"Module {key} not found")

        module = entry.module
        if key in active:
            return ModuleActivationResult(success=True, module_key=key, message=f"Module {key} is already activated")

        check = module.can_activate(context)
        if not check.valid:
            return self._failed(tenant_id, key, check.reason or f"Module {key} cannot be activated")

        missing = [dep for dep in module.requires if dep not in active and dep not in batch]
        if missing:
            return self._failed(
                tenant_id,
                key,
                f"Missing dependencies: {', '.join(missing)}",
                [f"Required module {dep} is not activated" for dep in missing],
            )

        conflicts = [other for other in module.conflicts if other in active]
        if conflicts:
            return self._failed(
                tenant_id,
                key,
                f"Conflicts with: {', '.join(conflicts)}",
                [f"Conflicts with activated module {other}" for other in conflicts],
            )

        try:
            await module.on_activate(context)
        except Exception as exc:
            logger.exception(
                "module.activation_failed",
                extra={"module_key": key, "tenant_id": tenant_id, "error": str(exc)},
            )
            return ModuleActivationResult(
                success=False,
                module_key=key,
                message=f"Failed to activate module {key}",
                errors=[str(exc) or exc.__class__.__name__],
            )

        self._activated.setdefault(tenant_id, set()).add(key)
        self._emit(MODULE_ACTIVATED, key, context, tenant_id)
        logger.info("module.activated", extra={"module_key": key, "tenant_id": tenant_id})
        return ModuleActivationResult(success=True, module_key=key, message=f"Module {key} activated successfully")

    def _failed(
        self,
        tenant_id: str,
        key: str,
        message: str,
        errors: list[str] | None = None,
    ) -> ModuleActivationResult:
        logger.info(
            "module.activation_rejected",
            extra={"module_key": key, "tenant_id": tenant_id, "error": message},
        )
        return ModuleActivationResult(success=False, module_key=key, message=message, errors=errors or [])

    async def deactivate_for_tenant(
        self,
        tenant_id: str,
        key: str,
        context: ModuleContext,
    ) -> ModuleActivationResult:
        async with self._tenant_lock(tenant_id):
            result = await self._deactivate(tenant_id, key, context)
            observe_module_deactivation(self._metric_label(key), result.success)
            return result

    async def _deactivate(self, tenant_id: str, key: str, context: ModuleContext) -> ModuleActivationResult:
        active = self._activated.get(tenant_id)
        if not active or key not in active:
            return ModuleActivationResult(
                success=False,
                module_key=key,
                message=f"Module {key} is not activated for this tenant",
            )

        entry = self._modules.get(key)
        if entry is None:
            return ModuleActivationResult(success=False, module_key=key, message=f"Module {key} not found")

        dependents = sorted(
            other.key for other in self.get_all_modules() if key in other.requires and other.key in active
        )
        if dependents:
            return ModuleActivationResult(
                success=False,
                module_key=key,
                message="Cannot deactivate: other modules depend on this",
                errors=[f"Module {other} depends on {key}" for other in dependents],
            )

        with tracer.start_as_current_span("modules.deactivate_for_tenant") as span:
            span.set_attribute("tenant_id", tenant_id)
            span.set_attribute("module_key", key)
            span.set_attribute("correlation_id", get_correlation_id() or "")
            try:
                await entry.module.on_deactivate(context)
            except Exception as exc:
                logger.exception(
                    "module.deactivation_failed",
                    extra={"module_key": key, "tenant_id": tenant_id, "error": str(exc)},
                )
                return ModuleActivationResult(
                    success=False,
                    module_key=key,
                    message=f"Failed to deactivate module {key}",
                    errors=[str(exc) or exc.__class__.__name__],
                )

        active.discard(key)
        if not active:
            del self._activated[tenant_id]
        self._emit(MODULE_DEACTIVATED, key, context, tenant_id)
        logger.info("module.deactivated", extra={"module_key": key, "tenant_id": tenant_id})
        return ModuleActivationResult(success=True, module_key=key, message=f"Module {key} deactivated successfully")
