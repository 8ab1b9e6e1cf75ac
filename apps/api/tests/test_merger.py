from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from app.industry_config.merger import (
    build_for_classification,
    build_preview,
    deep_merge,
    merge_by_key,
    merge_configurations,
    template_partial,
)
from app.industry_config.schemas import (
    ConfigurationSource,
    IndustryTemplate,
    LoadedConfiguration,
    PartialConfiguration,
)


def _loaded(priority: int, **config: object) -> LoadedConfiguration:
    return LoadedConfiguration(
        source=ConfigurationSource(kind="sector", code="23", priority=priority),
        config=PartialConfiguration.model_validate(config),
    )


def test_deep_merge_recurses_into_mappings_without_mutating_inputs() -> None:
    base = {"billing": {"currency": "USD", "terms": 30}}
    incoming = {"billing": {"terms": 45}, "region": "west"}

    merged = deep_merge(base, incoming)

    assert merged == {"billing": {"currency": "USD", "terms": 45}, "region": "west"}
    assert base == {"billing": {"currency": "USD", "terms": 30}}


def test_deep_merge_replaces_plain_lists_wholesale() -> None:
    assert deep_merge({"tags": ["a", "b"]}, {"tags": ["c"]}) == {"tags": ["c"]}


def test_deep_merge_merges_named_lists_by_key() -> None:
    base = {"stages": [{"name": "Lead", "sort_order": 1}, {"name": "Won", "sort_order": 2}]}

    merged = deep_merge(base, {"stages": [{"name": "Lead", "probability": 25}]}, {"stages": "name"})

    assert merged["stages"] == [
        {"name": "Lead", "sort_order": 1, "probability": 25},
        {"name": "Won", "sort_order": 2},
    ]


def test_deep_merge_replaces_lists_not_named_at_that_level() -> None:
    base = {"options": ["a", "b"], "stages": [{"name": "x"}, {"name": "y"}]}

    merged = deep_merge(base, {"options": ["c"], "stages": [{"name": "z"}]})

    assert merged == {"options": ["c"], "stages": [{"name": "z"}]}


def test_merge_configurations_replaces_settings_lists() -> None:
    merged = merge_configurations(
        [
            _loaded(20, settings={"options": ["a", "b"], "display": {"stages": [{"name": "x"}, {"name": "y"}]}}),
            _loaded(30, settings={"options": ["c"], "display": {"stages": [{"name": "z"}]}}),
        ]
    )

    assert merged.settings == {"options": ["c"], "display": {"stages": [{"name": "z"}]}}


def test_merge_by_key_updates_in_place_and_appends_new_elements() -> None:
    existing = [{"name": "A", "x": 1}, {"name": "B", "x": 1}]
    incoming = [{"name": "B", "x": 2}, {"name": "C"}, {"x": 3}]

    merged = merge_by_key(existing, incoming, "name")

    assert merged == [{"name": "A", "x": 1}, {"name": "B", "x": 2}, {"name": "C"}, {"x": 3}]
    assert existing[1] == {"name": "B", "x": 1}


def test_merge_configurations_of_nothing_is_empty() -> None:
    merged = merge_configurations([])

    assert merged.template == IndustryTemplate.SALES_FOCUSED
    assert merged.pipelines == []
    assert merged.modules == []
    assert merged.settings == {}


def test_merge_configurations_applies_sources_in_priority_order() -> None:
    merged = merge_configurations(
        [
            _loaded(30, settings={"currency": "EUR"}),
            _loaded(20, settings={"currency": "USD", "terms": 30}),
        ]
    )

    assert merged.settings == {"currency": "EUR", "terms": 30}


def test_merge_configurations_keeps_input_order_for_equal_priorities() -> None:
    merged = merge_configurations(
        [
            _loaded(20, settings={"currency": "USD"}),
            _loaded(20, settings={"currency": "EUR"}),
        ]
    )

    assert merged.settings == {"currency": "EUR"}


def test_build_without_classification_uses_sales_template() -> None:
    merged = build_for_classification(None, {})

    assert merged.template == IndustryTemplate.SALES_FOCUSED
    assert merged.classification_code is None
    assert merged.classification_hierarchy == []
    assert [pipeline.name for pipeline in merged.pipelines] == ["Sales Pipeline"]
    assert [module.module_key for module in merged.modules] == [
        "territory_management",
        "commission_tracking",
        "account_hierarchies",
    ]
    assert merged.document_templates == []
    assert merged.integrations == []


def test_build_for_classification_selects_template_by_sector() -> None:
    merged = build_for_classification("238160", {})

    assert merged.template == IndustryTemplate.PROJECT_BASED
    assert merged.classification_code == "238160"
    assert merged.classification_hierarchy == ["23", "238", "2381", "23816", "238160"]
    assert len(merged.pipelines[0].stages) == 9


def test_override_merges_stage_into_template_pipeline() -> None:
    overrides = {
        "23": PartialConfiguration(
            pipelines=[{"name": "Project Sales Pipeline", "stages": [{"name": "Lead", "probability": 25}]}]
        )
    }

    merged = build_for_classification("238160", overrides)

    stages = merged.pipelines[0].stages
    assert len(stages) == 9
    assert stages[0].name == "Lead"
    assert stages[0].probability == 25
    assert stages[0].sort_order == 1
    assert stages[0].is_initial


def test_more_specific_override_wins() -> None:
    overrides = {
        "23": PartialConfiguration(settings={"markup": 10, "crew_size": 4}),
        "238": PartialConfiguration(settings={"markup": 15}),
        "2381": PartialConfiguration(settings={"markup": 20}),
    }

    merged = build_for_classification("238160", overrides)

    assert merged.settings == {"markup": 20, "crew_size": 4}


def test_overrides_outside_the_hierarchy_are_ignored() -> None:
    overrides = {"54": PartialConfiguration(settings={"markup": 99})}

    merged = build_for_classification("238160", overrides)

    assert merged.settings == {}


def test_override_appends_new_fields_and_options() -> None:
    overrides = {
        "23": PartialConfiguration(
            custom_fields=[
                {"field_key": "project_type", "options": [{"value": "residential", "label": "Residential"}]},
                {
                    "field_key": "permit_number",
                    "label": "Permit Number",
                    "field_type": "TEXT",
                    "entity_type": "OPPORTUNITY",
                    "sort_order": 5,
                },
            ]
        )
    }

    merged = build_for_classification("238160", overrides)

    keys = [field.field_key for field in merged.custom_fields]
    assert keys == ["project_type", "estimated_start_date", "estimated_duration", "budget", "permit_number"]
    assert [option.value for option in merged.custom_fields[0].options] == ["residential"]


def test_incomplete_new_element_fails_validation() -> None:
    overrides = {"23": PartialConfiguration(pipelines=[{"name": "Warranty", "stages": [{"name": "Open"}]}])}

    with pytest.raises(ValidationError):
        build_for_classification("238160", overrides)


def test_multiple_initial_stages_log_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    overrides = {
        "23": PartialConfiguration(
            pipelines=[
                {
                    "name": "Project Sales Pipeline",
                    "stages": [{"name": "Intake", "sort_order": 0, "is_initial": True}],
                }
            ]
        )
    }

    with caplog.at_level(logging.WARNING, logger="app.industry_config"):
        merged = build_for_classification("238160", overrides)

    assert len(merged.pipelines[0].stages) == 10
    warnings = [record for record in caplog.records if record.getMessage() == "config.multiple_initial_stages"]
    assert len(warnings) == 1
    assert getattr(warnings[0], "pipeline", None) == "Project Sales Pipeline"


def test_resolution_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="app.industry_config"):
        build_for_classification("722511", {})

    records = [record for record in caplog.records if record.getMessage() == "config.resolved"]
    assert records
    assert getattr(records[-1], "template", None) == "HOSPITALITY_BASED"
    assert getattr(records[-1], "source_count", None) == 1


def test_preview_ignores_classification_code() -> None:
    preview = build_preview(IndustryTemplate.PROJECT_BASED)

    assert preview == build_preview(IndustryTemplate.PROJECT_BASED, "238160")
    assert preview.pipelines[0].stage_count == 9
    assert preview.modules[0].key == "job_costing"
    assert preview.modules[0].name == "Job Costing"
    assert [item.key for item in preview.activity_types] == ["site_visit", "estimate", "progress_meeting"]


def test_applying_the_same_source_twice_equals_applying_it_once() -> None:
    override = PartialConfiguration(
        pipelines=[{"name": "Project Sales Pipeline", "stages": [{"name": "Lead", "probability": 25}]}],
        custom_fields=[{"field_key": "project_type", "options": [{"value": "residential", "label": "Residential"}]}],
        modules=[{"module_key": "permits", "name": "Permits"}],
        settings={"markup": 15, "billing": {"terms": 30}, "tags": ["commercial"]},
    )

    template = LoadedConfiguration(
        source=ConfigurationSource(kind="template", priority=10),
        config=template_partial(IndustryTemplate.PROJECT_BASED),
    )

    source = _loaded(20, **override.model_dump())

    once = merge_configurations([template, source])
    twice = merge_configurations([template, source, source])

    assert twice == once


def test_merged_collections_have_unique_keys() -> None:
    merged = merge_configurations(
        [
            _loaded(
                20,
                modules=[
                    {"module_key": "permits", "name": "Permits"},
                    {"module_key": "permits", "name": "Permit Tracking", "is_required": True},
                    {"module_key": "bids", "name": "Bids"},
                ],
            ),
            _loaded(30, modules=[{"module_key": "bids", "name": "Bid Management"}]),
        ]
    )

    assert [(module.module_key, module.name) for module in merged.modules] == [
        ("permits", "Permit Tracking"),
        ("bids", "Bid Management"),
    ]
    assert merged.modules[0].is_required


def test_merge_by_key_collapses_duplicate_incoming_keys_and_keeps_keyless_elements() -> None:
    merged = merge_by_key(
        [{"name": "A", "x": 1}],
        [{"name": "A", "x": 2}, {"name": "A", "y": 3}, {"note": "keyless"}],
        "name",
    )

    assert merged == [{"name": "A", "x": 2, "y": 3}, {"note": "keyless"}]
    keys = [item["name"] for item in merged if "name" in item]
    assert len(keys) == len(set(keys))
