from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.core.dependencies import get_module_registry
from app.industry_config.schemas import IndustryTemplate
from app.modules.registry import ModuleRegistry
from app.modules.schemas import (
    ModuleActivationRequest,
    ModuleActivationResult,
    ModuleContext,
    ModuleDeactivationRequest,
    ModuleRead,
    TenantModulesRead,
)


router = APIRouter(prefix="/modules", tags=["modules"])


def _parse_str_list(raw: str | None) -> list[str]:
    if raw is None:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(slots=True)
class ModuleActor:
    user_id: str
    user_role: str
    permissions: list[str]

    def context_for(
        self,
        tenant_id: str,
        *,
        module_config: dict[str, Any] | None = None,
        classification_code: str | None = None,
        template: IndustryTemplate | None = None,
    ) -> ModuleContext:
        return ModuleContext(
            tenant_id=tenant_id,
            user_id=self.user_id,
            user_role=self.user_role,
            module_config=dict(module_config or {}),
            permissions=list(self.permissions),
            classification_code=classification_code,
            template=template,
        )


def get_module_actor(
    user_id_header: str | None = Header(default=None, alias="x-user-id"),
    user_role_header: str | None = Header(default=None, alias="x-user-role"),
    permissions_header: str | None = Header(default=None, alias="x-permissions"),
) -> ModuleActor:
    return ModuleActor(
        user_id=user_id_header or "anonymous",
        user_role=user_role_header or "MEMBER",
        permissions=_parse_str_list(permissions_header),
    )


@router.get("", response_model=list[ModuleRead])
def list_modules(
    classification_code: str | None = Query(default=None),
    template: IndustryTemplate | None = Query(default=None),
    registry: ModuleRegistry = Depends(get_module_registry),
) -> list[ModuleRead]:
    if classification_code:
        modules = registry.get_modules_for_classification(classification_code)
    else:
        modules = registry.get_all_modules()
    if template:
        eligible = {module.key for module in registry.get_modules_for_template(template)}
        modules = [module for module in modules if module.key in eligible]
    return [module.to_read() for module in modules]


@router.get("/tenants/{tenant_id}", response_model=TenantModulesRead)
def get_tenant_modules(
    tenant_id: str,
    registry: ModuleRegistry = Depends(get_module_registry),
) -> TenantModulesRead:
    return TenantModulesRead(tenant_id=tenant_id, module_keys=registry.get_activated_modules(tenant_id))


@router.post("/tenants/{tenant_id}/activate", response_model=list[ModuleActivationResult])
async def activate_modules(
    tenant_id: str,
    payload: ModuleActivationRequest,
    actor: ModuleActor = Depends(get_module_actor),
    registry: ModuleRegistry = Depends(get_module_registry),
) -> JSONResponse:
    context = actor.context_for(
        tenant_id,
        module_config=payload.module_config,
        classification_code=payload.classification_code,
        template=payload.template,
    )
    results = await registry.activate_for_tenant(tenant_id, payload.module_keys, context)
    succeeded = sum(1 for result in results if result.success)
    if succeeded == len(results):
        status_code = status.HTTP_200_OK
    elif succeeded:
        status_code = status.HTTP_207_MULTI_STATUS
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(
        status_code=status_code,
        content=[result.model_dump(mode="json") for result in results],
    )


@router.post("/tenants/{tenant_id}/deactivate", response_model=ModuleActivationResult)
async def deactivate_module(
    tenant_id: str,
    payload: ModuleDeactivationRequest,
    actor: ModuleActor = Depends(get_module_actor),
    registry: ModuleRegistry = Depends(get_module_registry),
) -> JSONResponse:
    context = actor.context_for(tenant_id, module_config=payload.module_config)
    result = await registry.deactivate_for_tenant(tenant_id, payload.module_key, context)
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST,
        content=result.model_dump(mode="json"),
    )


@router.get("/{key}", response_model=ModuleRead)
def get_module(
    key: str,
    registry: ModuleRegistry = Depends(get_module_registry),
) -> ModuleRead:
    module = registry.get_module(key)
    if module is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Module {key} not found")
    return module.to_read()
