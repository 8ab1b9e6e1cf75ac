from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from opentelemetry import trace

from app.context import get_correlation_id
from app.industry_config import classification
from app.industry_config.schemas import (
    ConfigurationPreview,
    ConfigurationSource,
    FieldPreview,
    IndustryTemplate,
    KeyNamePreview,
    LoadedConfiguration,
    MergedConfiguration,
    PartialConfiguration,
    PipelinePreview,
)
from app.industry_config.templates import (
    DEFAULT_TEMPLATE,
    TEMPLATE_DEFINITIONS,
    get_template_definition,
    module_display_name,
    template_for_sector,
    template_modules,
)

logger = logging.getLogger("app.industry_config")
tracer = trace.get_tracer("app.industry_config.merger")

TEMPLATE_PRIORITY = 10
HIERARCHY_BASE_PRIORITY = 20
HIERARCHY_PRIORITY_STEP = 10

COLLECTION_KEYS: dict[str, str] = {
    "pipelines": "name",
    "custom_fields": "field_key",
    "activity_types": "activity_key",
    "document_templates": "template_key",
    "integrations": "integration_key",
    "modules": "module_key",
}

# Nested lists whose elements carry an identity, per collection element schema.
# Lists anywhere else, settings included, are replaced wholesale.
NESTED_LIST_KEYS: dict[str, dict[str, str]] = {
    "pipelines": {"stages": "name"},
    "custom_fields": {"options": "value"},
    "document_templates": {"available_variables": "key"},
}


def deep_merge(
    base: Mapping[str, Any],
    incoming: Mapping[str, Any],
    list_keys: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Recursively merge ``incoming`` over ``base`` without mutating either.

    ``list_keys`` names the lists at this level that merge by an identity
    field; it does not propagate into nested mappings.
    """
    list_keys = list_keys or {}
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in incoming.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        elif key in list_keys and isinstance(current, list) and isinstance(value, list):
            merged[key] = merge_by_key(current, value, list_keys[key])
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_by_key(
    existing: Iterable[Mapping[str, Any]],
    incoming: Iterable[Mapping[str, Any]],
    key_field: str,
    nested_keys: Mapping[str, str] | None = None,
) -> list[dict[str, Any]]:
    result = [copy.deepcopy(dict(item)) for item in existing]
    for item in incoming:
        key = item.get(key_field)
        index = None
        if key is not None:
            index = next((i for i, current in enumerate(result) if current.get(key_field) == key), None)
        if index is None:
            result.append(copy.deepcopy(dict(item)))
        else:
            result[index] = deep_merge(result[index], item, nested_keys)
    return result


def _empty_accumulator() -> dict[str, Any]:
    accumulator: dict[str, Any] = {name: [] for name in COLLECTION_KEYS}
    accumulator.update(
        template=DEFAULT_TEMPLATE,
        classification_code=None,
        classification_hierarchy=[],
        settings={},
    )
    return accumulator


def merge_one(accumulator: Mapping[str, Any], partial: PartialConfiguration) -> dict[str, Any]:
    merged = dict(accumulator)
    for collection, key_field in COLLECTION_KEYS.items():
        merged[collection] = merge_by_key(
            accumulator.get(collection, []),
            getattr(partial, collection),
            key_field,
            NESTED_LIST_KEYS.get(collection),
        )
    merged["settings"] = deep_merge(accumulator.get("settings", {}), partial.settings)
    return merged


def _fold(loaded: Iterable[LoadedConfiguration]) -> dict[str, Any]:
    # sorted() is stable: equal priorities keep their input order.
    ordered = sorted(loaded, key=lambda item: item.source.priority)
    accumulator = _empty_accumulator()
    for item in ordered:
        accumulator = merge_one(accumulator, item.config)
    return accumulator


def _warn_on_multiple_initial_stages(configuration: MergedConfiguration) -> None:
    for pipeline in configuration.pipelines:
        initial = [stage.name for stage in pipeline.stages if stage.is_initial]
        if len(initial) > 1:
            logger.warning(
                "config.multiple_initial_stages",
                extra={
                    "pipeline": pipeline.name,
                    "classification_code": configuration.classification_code,
                    "template": configuration.template.value,
                },
            )


def merge_configurations(loaded: Iterable[LoadedConfiguration]) -> MergedConfiguration:
    """Fold partial configurations in ascending priority; later sources win on conflict."""
    configuration = MergedConfiguration.model_validate(_fold(loaded))
    _warn_on_multiple_initial_stages(configuration)
    return configuration


def template_partial(template: IndustryTemplate) -> PartialConfiguration:
    definition = TEMPLATE_DEFINITIONS[template]
    return PartialConfiguration.from_models(
        pipelines=definition.default_pipelines,
        custom_fields=definition.default_fields,
        activity_types=definition.default_activity_types,
        modules=template_modules(definition),
    )


def build_for_classification(
    code: str | None,
    overrides: Mapping[str, PartialConfiguration],
) -> MergedConfiguration:
    with tracer.start_as_current_span("config.build_for_classification") as span:
        span.set_attribute("classification_code", code or "")
        span.set_attribute("correlation_id", get_correlation_id() or "")

        template = DEFAULT_TEMPLATE
        if code:
            template = template_for_sector(classification.sector(code))
        prefixes = classification.hierarchy(code) if code else []

        loaded = [
            LoadedConfiguration(
                source=ConfigurationSource(kind="template", priority=TEMPLATE_PRIORITY),
                config=template_partial(template),
            )
        ]
        for index, prefix in enumerate(prefixes):
            override = overrides.get(prefix)
            if override is None:
                continue
            kind = "sector" if index == 0 else "subsector" if index == 1 else "industry"
            loaded.append(
                LoadedConfiguration(
                    source=ConfigurationSource(
                        kind=kind,
                        code=prefix,
                        priority=HIERARCHY_BASE_PRIORITY + HIERARCHY_PRIORITY_STEP * index,
                    ),
                    config=override,
                )
            )

        accumulator = _fold(loaded)
        accumulator.update(
            template=template,
            classification_code=code,
            classification_hierarchy=prefixes,
        )
        configuration = MergedConfiguration.model_validate(accumulator)
        _warn_on_multiple_initial_stages(configuration)

        span.set_attribute("template", template.value)
        span.set_attribute("source_count", len(loaded))
        logger.info(
            "config.resolved",
            extra={
                "classification_code": code,
                "template": template.value,
                "source_count": len(loaded),
            },
        )
        return configuration


def build_preview(template: IndustryTemplate | str, code: str | None = None) -> ConfigurationPreview:
    # Previews reflect template defaults only; the code never changes the result.
    definition = get_template_definition(template)
    if definition is None:
        return ConfigurationPreview(pipelines=[], fields=[], modules=[], activity_types=[])
    return ConfigurationPreview(
        pipelines=[
            PipelinePreview(name=pipeline.name, pipeline_type=pipeline.pipeline_type, stage_count=len(pipeline.stages))
            for pipeline in definition.default_pipelines
        ],
        fields=[
            FieldPreview(key=field.field_key, label=field.label, field_type=field.field_type)
            for field in definition.default_fields
        ],
        modules=[KeyNamePreview(key=key, name=module_display_name(key)) for key in definition.default_modules],
        activity_types=[
            KeyNamePreview(key=activity.activity_key, name=activity.name)
            for activity in definition.default_activity_types
        ],
    )
