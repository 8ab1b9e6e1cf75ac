from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class IndustryTemplate(StrEnum):
    PROJECT_BASED = "PROJECT_BASED"
    SALES_FOCUSED = "SALES_FOCUSED"
    SERVICE_BASED = "SERVICE_BASED"
    INVENTORY_BASED = "INVENTORY_BASED"
    ASSET_BASED = "ASSET_BASED"
    MEMBERSHIP_BASED = "MEMBERSHIP_BASED"
    HOSPITALITY_BASED = "HOSPITALITY_BASED"
    CASE_BASED = "CASE_BASED"


class PipelineType(StrEnum):
    SALES = "SALES"
    SERVICE = "SERVICE"
    PROJECT = "PROJECT"
    SUPPORT = "SUPPORT"
    ONBOARDING = "ONBOARDING"
    RENEWAL = "RENEWAL"
    CUSTOM = "CUSTOM"


class CustomFieldType(StrEnum):
    TEXT = "TEXT"
    TEXTAREA = "TEXTAREA"
    NUMBER = "NUMBER"
    DECIMAL = "DECIMAL"
    CURRENCY = "CURRENCY"
    DATE = "DATE"
    DATETIME = "DATETIME"
    BOOLEAN = "BOOLEAN"
    SELECT = "SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    URL = "URL"
    ADDRESS = "ADDRESS"
    FILE = "FILE"
    IMAGE = "IMAGE"
    USER_REFERENCE = "USER_REFERENCE"
    ENTITY_REFERENCE = "ENTITY_REFERENCE"
    FORMULA = "FORMULA"
    ROLLUP = "ROLLUP"


class CRMEntityType(StrEnum):
    CONTACT = "CONTACT"
    ACCOUNT = "ACCOUNT"
    OPPORTUNITY = "OPPORTUNITY"
    ACTIVITY = "ACTIVITY"
    PROJECT = "PROJECT"
    INVOICE = "INVOICE"
    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"


class ActivityCategory(StrEnum):
    CALL = "CALL"
    EMAIL = "EMAIL"
    MEETING = "MEETING"
    SITE_VISIT = "SITE_VISIT"
    INSPECTION = "INSPECTION"
    ESTIMATE = "ESTIMATE"
    PRESENTATION = "PRESENTATION"
    FOLLOW_UP = "FOLLOW_UP"
    TASK = "TASK"
    NOTE = "NOTE"
    DOCUMENT = "DOCUMENT"
    CUSTOM = "CUSTOM"


class DocumentTemplateType(StrEnum):
    PROPOSAL = "PROPOSAL"
    ESTIMATE = "ESTIMATE"
    INVOICE = "INVOICE"
    CONTRACT = "CONTRACT"
    REPORT = "REPORT"
    EMAIL = "EMAIL"
    LETTER = "LETTER"
    CUSTOM = "CUSTOM"


class IntegrationType(StrEnum):
    ACCOUNTING = "ACCOUNTING"
    CALENDAR = "CALENDAR"
    EMAIL = "EMAIL"
    PAYMENT = "PAYMENT"
    STORAGE = "STORAGE"
    MARKETING = "MARKETING"
    COMMUNICATION = "COMMUNICATION"
    CUSTOM = "CUSTOM"


class ClassificationLevel(StrEnum):
    SECTOR = "sector"
    SUBSECTOR = "subsector"
    INDUSTRY_GROUP = "industry-group"
    NAICS_INDUSTRY = "naics-industry"
    NATIONAL_INDUSTRY = "national-industry"


SourceKind = Literal["universal", "template", "sector", "subsector", "industry"]


class PipelineStageConfiguration(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    sort_order: int
    color: str | None = None
    probability: int | None = Field(default=None, ge=0, le=100)
    is_initial: bool = False
    is_final: bool = False
    is_won: bool = False
    is_lost: bool = False
    auto_actions: dict[str, Any] | None = None
    required_fields: list[str] = Field(default_factory=list)


class PipelineConfiguration(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    pipeline_type: PipelineType = PipelineType.SALES
    is_default: bool = False
    stages: list[PipelineStageConfiguration] = Field(default_factory=list)


class CustomFieldOptionConfiguration(BaseModel):
    value: str = Field(min_length=1)
    label: str = Field(min_length=1)
    color: str | None = None
    icon: str | None = None
    sort_order: int = 0
    is_default: bool = False


class FieldValidation(BaseModel):
    min: float | None = None
    max: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    pattern_message: str | None = None
    required: bool | None = None


class CustomFieldConfiguration(BaseModel):
    field_key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    description: str | None = None
    field_type: CustomFieldType
    entity_type: CRMEntityType
    is_required: bool = False
    is_searchable: bool = False
    is_filterable: bool = False
    default_value: str | None = None
    placeholder: str | None = None
    help_text: str | None = None
    validation: FieldValidation | None = None
    sort_order: int = 0
    group_name: str | None = None
    options: list[CustomFieldOptionConfiguration] = Field(default_factory=list)


class ActivityTypeConfiguration(BaseModel):
    activity_key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    category: ActivityCategory
    duration_default: int | None = None
    is_schedulable: bool = True
    is_loggable: bool = True
    requires_location: bool = False
    required_custom_fields: list[str] = Field(default_factory=list)


class TemplateVariable(BaseModel):
    key: str = Field(min_length=1)
    label: str
    type: Literal["text", "number", "date", "currency", "list"] = "text"
    source: Literal["contact", "account", "opportunity", "user", "tenant", "custom"] = "custom"


class DocumentTemplateConfiguration(BaseModel):
    template_key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    template_type: DocumentTemplateType = DocumentTemplateType.CUSTOM
    template_content: str = ""
    template_format: str = "html"
    available_variables: list[TemplateVariable] = Field(default_factory=list)
    category: str | None = None
    is_default: bool = False


class IntegrationConfiguration(BaseModel):
    integration_key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    integration_type: IntegrationType = IntegrationType.CUSTOM
    provider: str | None = None
    config_schema: dict[str, Any] = Field(default_factory=dict)
    default_config: dict[str, Any] | None = None
    required_scopes: list[str] = Field(default_factory=list)
    is_optional: bool = True
    is_premium: bool = False


class IndustryModuleConfiguration(BaseModel):
    module_key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    is_enabled: bool = True
    is_required: bool = False
    config_schema: dict[str, Any] | None = None
    default_config: dict[str, Any] | None = None
    route_base: str | None = None


class TemplateDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    template: IndustryTemplate
    name: str
    description: str
    sectors: tuple[str, ...]
    focus: str
    default_pipelines: tuple[PipelineConfiguration, ...]
    default_modules: tuple[str, ...]
    default_fields: tuple[CustomFieldConfiguration, ...]
    default_activity_types: tuple[ActivityTypeConfiguration, ...]


class ConfigurationSource(BaseModel):
    kind: SourceKind
    code: str | None = None
    priority: int


class PartialConfiguration(BaseModel):
    """Possibly-incomplete configuration; collection elements stay plain dicts until merged."""

    pipelines: list[dict[str, Any]] = Field(default_factory=list)
    custom_fields: list[dict[str, Any]] = Field(default_factory=list)
    activity_types: list[dict[str, Any]] = Field(default_factory=list)
    document_templates: list[dict[str, Any]] = Field(default_factory=list)
    integrations: list[dict[str, Any]] = Field(default_factory=list)
    modules: list[dict[str, Any]] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_models(
        cls,
        *,
        pipelines: Sequence[PipelineConfiguration] = (),
        custom_fields: Sequence[CustomFieldConfiguration] = (),
        activity_types: Sequence[ActivityTypeConfiguration] = (),
        document_templates: Sequence[DocumentTemplateConfiguration] = (),
        integrations: Sequence[IntegrationConfiguration] = (),
        modules: Sequence[IndustryModuleConfiguration] = (),
        settings: dict[str, Any] | None = None,
    ) -> PartialConfiguration:
        return cls(
            pipelines=[item.model_dump(mode="python") for item in pipelines],
            custom_fields=[item.model_dump(mode="python") for item in custom_fields],
            activity_types=[item.model_dump(mode="python") for item in activity_types],
            document_templates=[item.model_dump(mode="python") for item in document_templates],
            integrations=[item.model_dump(mode="python") for item in integrations],
            modules=[item.model_dump(mode="python") for item in modules],
            settings=dict(settings or {}),
        )


class LoadedConfiguration(BaseModel):
    source: ConfigurationSource
    config: PartialConfiguration


class MergedConfiguration(BaseModel):
    tenant_id: str | None = None
    template: IndustryTemplate = IndustryTemplate.SALES_FOCUSED
    classification_code: str | None = None
    classification_hierarchy: list[str] = Field(default_factory=list)
    pipelines: list[PipelineConfiguration] = Field(default_factory=list)
    custom_fields: list[CustomFieldConfiguration] = Field(default_factory=list)
    activity_types: list[ActivityTypeConfiguration] = Field(default_factory=list)
    document_templates: list[DocumentTemplateConfiguration] = Field(default_factory=list)
    integrations: list[IntegrationConfiguration] = Field(default_factory=list)
    modules: list[IndustryModuleConfiguration] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)


class PipelinePreview(BaseModel):
    name: str
    pipeline_type: PipelineType
    stage_count: int


class FieldPreview(BaseModel):
    key: str
    label: str
    field_type: CustomFieldType


class KeyNamePreview(BaseModel):
    key: str
    name: str


class ConfigurationPreview(BaseModel):
    pipelines: list[PipelinePreview]
    fields: list[FieldPreview]
    modules: list[KeyNamePreview]
    activity_types: list[KeyNamePreview]


class TemplateSummary(BaseModel):
    template: IndustryTemplate
    name: str
    description: str
    sectors: list[str]


class SectorSummary(BaseModel):
    code: str
    name: str
    template: IndustryTemplate


class ClassificationRead(BaseModel):
    code: str
    level: ClassificationLevel
    hierarchy: list[str]
    sector: str
    sector_name: str
    template: IndustryTemplate
    formatted: str


class InitializeTenantRequest(BaseModel):
    industry_template: IndustryTemplate
    classification_code: str | None = None
    modules: list[str] | None = None


class InitializeTenantRead(BaseModel):
    template: IndustryTemplate
    classification_code: str | None
    pipeline_count: int
    field_count: int
    activity_type_count: int
    enabled_module_count: int
    enabled_modules: list[str]
