from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.industry_config.classification import SECTOR_NAMES
from app.industry_config.schemas import IndustryTemplate, PipelineType
from app.industry_config.templates import (
    SECTOR_TEMPLATES,
    TEMPLATE_DEFINITIONS,
    get_template_definition,
    module_display_name,
    template_for_sector,
    template_modules,
)


def test_every_template_is_defined() -> None:
    assert set(TEMPLATE_DEFINITIONS) == set(IndustryTemplate)
    for template, definition in TEMPLATE_DEFINITIONS.items():
        assert definition.template == template
        assert definition.default_pipelines
        assert definition.default_modules
        assert definition.default_fields
        assert len(definition.default_activity_types) == 3


def test_project_based_template_content() -> None:
    definition = TEMPLATE_DEFINITIONS[IndustryTemplate.PROJECT_BASED]

    assert definition.name == "Project-Based CRM"
    assert definition.sectors == ("23", "51", "54")
    pipeline = definition.default_pipelines[0]
    assert pipeline.name == "Project Sales Pipeline"
    assert pipeline.pipeline_type == PipelineType.SALES
    assert [stage.name for stage in pipeline.stages] == [
        "Lead",
        "Qualified",
        "Estimate Prepared",
        "Proposal Sent",
        "Negotiation",
        "Contract Signed",
        "In Production",
        "Completed",
        "Lost",
    ]
    completed = pipeline.stages[7]
    assert completed.is_final and completed.is_won and completed.probability == 100
    lost = pipeline.stages[8]
    assert lost.is_final and lost.is_lost and lost.probability == 0
    assert definition.default_modules == ("job_costing", "resource_scheduling", "time_tracking", "estimates")
    assert [field.field_key for field in definition.default_fields] == [
        "project_type",
        "estimated_start_date",
        "estimated_duration",
        "budget",
    ]


def test_each_default_pipeline_has_a_single_initial_stage() -> None:
    for definition in TEMPLATE_DEFINITIONS.values():
        for pipeline in definition.default_pipelines:
            assert pipeline.is_default
            assert sum(1 for stage in pipeline.stages if stage.is_initial) == 1
            orders = [stage.sort_order for stage in pipeline.stages]
            assert orders == sorted(orders)


def test_template_sectors_agree_with_sector_table() -> None:
    for template, definition in TEMPLATE_DEFINITIONS.items():
        for sector in definition.sectors:
            assert SECTOR_TEMPLATES[sector] == template
    assert set(SECTOR_TEMPLATES) == set(SECTOR_NAMES)


def test_template_for_sector_falls_back_to_sales_focused() -> None:
    assert template_for_sector("23") == IndustryTemplate.PROJECT_BASED
    assert template_for_sector("72") == IndustryTemplate.HOSPITALITY_BASED
    assert template_for_sector("92") == IndustryTemplate.CASE_BASED
    assert template_for_sector("99") == IndustryTemplate.SALES_FOCUSED
    assert template_for_sector("") == IndustryTemplate.SALES_FOCUSED


def test_get_template_definition_handles_unknown_identifiers() -> None:
    assert get_template_definition("SERVICE_BASED") is TEMPLATE_DEFINITIONS[IndustryTemplate.SERVICE_BASED]
    assert get_template_definition("NOT_A_TEMPLATE") is None


def test_module_display_name() -> None:
    assert module_display_name("job_costing") == "Job Costing"
    assert module_display_name("table_room_management") == "Table Room Management"
    assert module_display_name("events") == "Events"


def test_template_modules_are_enabled_and_optional() -> None:
    modules = template_modules(TEMPLATE_DEFINITIONS[IndustryTemplate.SALES_FOCUSED])

    assert [module.module_key for module in modules] == [
        "territory_management",
        "commission_tracking",
        "account_hierarchies",
    ]
    assert modules[0].name == "Territory Management"
    assert all(module.is_enabled and not module.is_required for module in modules)


def test_template_definitions_are_immutable() -> None:
    definition = TEMPLATE_DEFINITIONS[IndustryTemplate.CASE_BASED]
    with pytest.raises(ValidationError):
        definition.name = "Changed"
