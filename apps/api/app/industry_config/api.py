from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.dependencies import get_configuration_registry
from app.industry_config.errors import ConfigurationError, InvalidClassificationError, UnknownTemplateError
from app.industry_config.registry import ConfigurationRegistry
from app.industry_config.schemas import (
    ActivityTypeConfiguration,
    ClassificationRead,
    ConfigurationPreview,
    CustomFieldConfiguration,
    IndustryModuleConfiguration,
    IndustryTemplate,
    InitializeTenantRead,
    InitializeTenantRequest,
    MergedConfiguration,
    PipelineConfiguration,
    SectorSummary,
    TemplateSummary,
)


router = APIRouter(prefix="/config", tags=["config"])


def _to_http(exc: ConfigurationError) -> HTTPException:
    if isinstance(exc, UnknownTemplateError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/templates", response_model=list[TemplateSummary])
def list_templates(
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> list[TemplateSummary]:
    return registry.get_available_templates()


@router.get("/templates/{template}", response_model=MergedConfiguration)
def get_template_configuration(
    template: IndustryTemplate,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> MergedConfiguration:
    return registry.get_template_configuration(template)


@router.get("/templates/{template}/pipelines", response_model=list[PipelineConfiguration])
def get_template_pipelines(
    template: IndustryTemplate,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> list[PipelineConfiguration]:
    return registry.get_default_pipelines(template)


@router.get("/templates/{template}/fields", response_model=list[CustomFieldConfiguration])
def get_template_fields(
    template: IndustryTemplate,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> list[CustomFieldConfiguration]:
    return registry.get_default_custom_fields(template)


@router.get("/templates/{template}/activity-types", response_model=list[ActivityTypeConfiguration])
def get_template_activity_types(
    template: IndustryTemplate,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> list[ActivityTypeConfiguration]:
    return registry.get_default_activity_types(template)


@router.get("/templates/{template}/modules", response_model=list[IndustryModuleConfiguration])
def get_template_modules(
    template: IndustryTemplate,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> list[IndustryModuleConfiguration]:
    return registry.get_default_modules(template)


@router.get("/sectors", response_model=list[SectorSummary])
def list_sectors(
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> list[SectorSummary]:
    return registry.get_all_sectors()


@router.get("/preview", response_model=ConfigurationPreview)
def preview_configuration(
    template: IndustryTemplate = Query(),
    classification_code: str | None = Query(default=None),
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> ConfigurationPreview:
    return registry.preview_configuration(template, classification_code)


@router.get("/classifications/{code}", response_model=ClassificationRead)
def describe_classification(
    code: str,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> ClassificationRead:
    try:
        return registry.describe_classification(code)
    except InvalidClassificationError as exc:
        raise _to_http(exc) from exc


@router.get("/resolve", response_model=MergedConfiguration)
def resolve_configuration(
    classification_code: str | None = Query(default=None),
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> MergedConfiguration:
    try:
        return registry.get_configuration(classification_code)
    except ConfigurationError as exc:
        raise _to_http(exc) from exc


@router.post("/initialize", response_model=InitializeTenantRead)
def initialize_tenant(
    payload: InitializeTenantRequest,
    registry: ConfigurationRegistry = Depends(get_configuration_registry),
) -> InitializeTenantRead:
    try:
        if payload.classification_code:
            configuration = registry.get_configuration(payload.classification_code)
        else:
            configuration = registry.get_template_configuration(payload.industry_template)
    except ConfigurationError as exc:
        raise _to_http(exc) from exc

    enabled = [module.module_key for module in configuration.modules if module.is_enabled]
    if payload.modules is not None:
        requested = set(payload.modules)
        enabled = [key for key in enabled if key in requested]

    return InitializeTenantRead(
        template=configuration.template,
        classification_code=configuration.classification_code,
        pipeline_count=len(configuration.pipelines),
        field_count=len(configuration.custom_fields),
        activity_type_count=len(configuration.activity_types),
        enabled_module_count=len(enabled),
        enabled_modules=enabled,
    )
