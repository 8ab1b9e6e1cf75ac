from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from app.industry_config import classification
from app.industry_config.errors import UnknownTemplateError
from app.industry_config.merger import build_for_classification, build_preview, template_partial
from app.industry_config.schemas import (
    ActivityTypeConfiguration,
    ClassificationRead,
    ConfigurationPreview,
    CustomFieldConfiguration,
    IndustryModuleConfiguration,
    IndustryTemplate,
    MergedConfiguration,
    PartialConfiguration,
    PipelineConfiguration,
    SectorSummary,
    TemplateDefinition,
    TemplateSummary,
)
from app.industry_config.templates import (
    TEMPLATE_DEFINITIONS,
    get_template_definition,
    template_for_sector,
    template_modules,
)
from app.metrics import observe_config_resolution

logger = logging.getLogger("app.industry_config")


def _as_partial(config: PartialConfiguration | Mapping[str, Any]) -> PartialConfiguration:
    if isinstance(config, PartialConfiguration):
        return config
    return PartialConfiguration.model_validate(dict(config))


class ConfigurationRegistry:
    """Holds classification-keyed overrides and resolves merged tenant configurations.

    Sector overrides and industry overrides live in separate maps. When both
    hold the same code, the industry override wins.
    """

    def __init__(self, *, classification_strict: bool = False, strict_templates: bool = False) -> None:
        self.classification_strict = classification_strict
        self.strict_templates = strict_templates
        self._sector_configs: dict[str, PartialConfiguration] = {}
        self._industry_configs: dict[str, PartialConfiguration] = {}

    def register_sector_config(self, code: str, config: PartialConfiguration | Mapping[str, Any]) -> None:
        self._sector_configs[code] = _as_partial(config)
        logger.info("config.override_registered", extra={"classification_code": code, "source": "sector"})

    def register_industry_config(self, code: str, config: PartialConfiguration | Mapping[str, Any]) -> None:
        self._industry_configs[code] = _as_partial(config)
        logger.info("config.override_registered", extra={"classification_code": code, "source": "industry"})

    def clear_overrides(self) -> None:
        self._sector_configs.clear()
        self._industry_configs.clear()

    def get_configuration(self, code: str | None) -> MergedConfiguration:
        if code is not None and self.classification_strict:
            classification.require_valid(code)
        overrides = {**self._sector_configs, **self._industry_configs}
        started = time.perf_counter()
        configuration = build_for_classification(code, overrides)
        observe_config_resolution(configuration.template.value, "classification", time.perf_counter() - started)
        return configuration

    def _definition(self, template: str) -> TemplateDefinition | None:
        definition = get_template_definition(template)
        if definition is None and self.strict_templates:
            raise UnknownTemplateError(template)
        return definition

    def get_template_configuration(self, template: IndustryTemplate) -> MergedConfiguration:
        definition = self._definition(template)
        if definition is None:
            return MergedConfiguration()
        partial = template_partial(definition.template)
        observe_config_resolution(definition.template.value, "template", 0.0)
        return MergedConfiguration(
            template=definition.template,
            classification_hierarchy=[],
            pipelines=partial.pipelines,
            custom_fields=partial.custom_fields,
            activity_types=partial.activity_types,
            modules=partial.modules,
            settings={},
        )

    def preview_configuration(self, template: IndustryTemplate, code: str | None = None) -> ConfigurationPreview:
        self._definition(template)
        return build_preview(template, code)

    def get_available_templates(self) -> list[TemplateSummary]:
        return [
            TemplateSummary(
                template=definition.template,
                name=definition.name,
                description=definition.description,
                sectors=list(definition.sectors),
            )
            for definition in TEMPLATE_DEFINITIONS.values()
        ]

    def get_all_sectors(self) -> list[SectorSummary]:
        return [
            SectorSummary(code=code, name=classification.sector_name(code), template=template_for_sector(code))
            for code in classification.all_sector_codes()
        ]

    def get_sector_name(self, code: str) -> str:
        return classification.sector_name(code)

    def is_valid_classification(self, code: str) -> bool:
        return classification.is_valid(code)

    def get_classification_hierarchy(self, code: str) -> list[str]:
        return classification.hierarchy(code)

    def get_template_for_sector(self, code: str) -> IndustryTemplate:
        return template_for_sector(code)

    def describe_classification(self, code: str) -> ClassificationRead:
        return classification.describe(code)

    def get_default_pipelines(self, template: str) -> list[PipelineConfiguration]:
        definition = self._definition(template)
        return [item.model_copy(deep=True) for item in definition.default_pipelines] if definition else []

    def get_default_custom_fields(self, template: str) -> list[CustomFieldConfiguration]:
        definition = self._definition(template)
        return [item.model_copy(deep=True) for item in definition.default_fields] if definition else []

    def get_default_activity_types(self, template: str) -> list[ActivityTypeConfiguration]:
        definition = self._definition(template)
        return [item.model_copy(deep=True) for item in definition.default_activity_types] if definition else []

    def get_default_modules(self, template: str) -> list[IndustryModuleConfiguration]:
        definition = self._definition(template)
        return template_modules(definition) if definition else []
