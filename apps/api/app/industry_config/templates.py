from __future__ import annotations

from app.industry_config.schemas import (
    ActivityCategory,
    ActivityTypeConfiguration,
    CRMEntityType,
    CustomFieldConfiguration,
    CustomFieldType,
    IndustryModuleConfiguration,
    IndustryTemplate,
    PipelineConfiguration,
    PipelineStageConfiguration,
    PipelineType,
    TemplateDefinition,
)


def _stage(
    name: str,
    sort_order: int,
    probability: int,
    *,
    initial: bool = False,
    final: bool = False,
    won: bool = False,
    lost: bool = False,
) -> PipelineStageConfiguration:
    return PipelineStageConfiguration(
        name=name,
        sort_order=sort_order,
        probability=probability,
        is_initial=initial,
        is_final=final,
        is_won=won,
        is_lost=lost,
    )


def _won(name: str, sort_order: int, probability: int = 100) -> PipelineStageConfiguration:
    return _stage(name, sort_order, probability, final=True, won=True)


def _lost(name: str, sort_order: int) -> PipelineStageConfiguration:
    return _stage(name, sort_order, 0, final=True, lost=True)


def _field(
    field_key: str,
    label: str,
    field_type: CustomFieldType,
    entity_type: CRMEntityType,
    sort_order: int,
    *,
    required: bool = False,
    searchable: bool = False,
    filterable: bool = False,
) -> CustomFieldConfiguration:
    return CustomFieldConfiguration(
        field_key=field_key,
        label=label,
        field_type=field_type,
        entity_type=entity_type,
        is_required=required,
        is_searchable=searchable,
        is_filterable=filterable,
        sort_order=sort_order,
    )


def _activity(
    activity_key: str,
    name: str,
    category: ActivityCategory,
    duration_default: int,
    *,
    schedulable: bool = True,
    location: bool = False,
) -> ActivityTypeConfiguration:
    return ActivityTypeConfiguration(
        activity_key=activity_key,
        name=name,
        category=category,
        duration_default=duration_default,
        is_schedulable=schedulable,
        is_loggable=True,
        requires_location=location,
    )


def _pipeline(name: str, pipeline_type: PipelineType, *stages: PipelineStageConfiguration) -> PipelineConfiguration:
    return PipelineConfiguration(name=name, pipeline_type=pipeline_type, is_default=True, stages=list(stages))


_OPP = CRMEntityType.OPPORTUNITY
_ACCOUNT = CRMEntityType.ACCOUNT
_CONTACT = CRMEntityType.CONTACT
_T = CustomFieldType
_A = ActivityCategory


TEMPLATE_DEFINITIONS: dict[IndustryTemplate, TemplateDefinition] = {
    IndustryTemplate.PROJECT_BASED: TemplateDefinition(
        template=IndustryTemplate.PROJECT_BASED,
        name="Project-Based CRM",
        description="For businesses that manage projects with timelines, resources, and deliverables",
        sectors=("23", "51", "54"),
        focus="Jobs, estimates, timelines, resources, deliverables",
        default_pipelines=(
            _pipeline(
                "Project Sales Pipeline",
                PipelineType.SALES,
                _stage("Lead", 1, 10, initial=True),
                _stage("Qualified", 2, 20),
                _stage("Estimate Prepared", 3, 40),
                _stage("Proposal Sent", 4, 50),
                _stage("Negotiation", 5, 70),
                _stage("Contract Signed", 6, 90),
                _stage("In Production", 7, 95),
                _won("Completed", 8),
                _lost("Lost", 9),
            ),
        ),
        default_modules=("job_costing", "resource_scheduling", "time_tracking", "estimates"),
        default_fields=(
            _field("project_type", "Project Type", _T.SELECT, _OPP, 1, searchable=True, filterable=True),
            _field("estimated_start_date", "Estimated Start Date", _T.DATE, _OPP, 2, filterable=True),
            _field("estimated_duration", "Estimated Duration (Days)", _T.NUMBER, _OPP, 3),
            _field("budget", "Budget", _T.CURRENCY, _OPP, 4, filterable=True),
        ),
        default_activity_types=(
            _activity("site_visit", "Site Visit", _A.SITE_VISIT, 60, location=True),
            _activity("estimate", "Prepare Estimate", _A.ESTIMATE, 120),
            _activity("progress_meeting", "Progress Meeting", _A.MEETING, 60),
        ),
    ),
    IndustryTemplate.SALES_FOCUSED: TemplateDefinition(
        template=IndustryTemplate.SALES_FOCUSED,
        name="Sales-Focused CRM",
        description="For businesses with account-based sales, territories, and long sales cycles",
        sectors=("42", "52", "53"),
        focus="Accounts, territories, long sales cycles, commissions",
        default_pipelines=(
            _pipeline(
                "Sales Pipeline",
                PipelineType.SALES,
                _stage("Lead", 1, 5, initial=True),
                _stage("Qualified", 2, 15),
                _stage("Discovery", 3, 25),
                _stage("Proposal", 4, 50),
                _stage("Negotiation", 5, 75),
                _won("Closed Won", 6),
                _lost("Closed Lost", 7),
            ),
        ),
        default_modules=("territory_management", "commission_tracking", "account_hierarchies"),
        default_fields=(
            _field("territory", "Territory", _T.SELECT, _ACCOUNT, 1, searchable=True, filterable=True),
            _field("account_tier", "Account Tier", _T.SELECT, _ACCOUNT, 2, searchable=True, filterable=True),
            _field("decision_makers", "Decision Makers", _T.MULTI_SELECT, _OPP, 3),
            _field("contract_value", "Contract Value", _T.CURRENCY, _OPP, 4, filterable=True),
        ),
        default_activity_types=(
            _activity("discovery_call", "Discovery Call", _A.CALL, 30),
            _activity("presentation", "Presentation", _A.PRESENTATION, 60),
            _activity("contract_review", "Contract Review", _A.MEETING, 45),
        ),
    ),
    IndustryTemplate.SERVICE_BASED: TemplateDefinition(
        template=IndustryTemplate.SERVICE_BASED,
        name="Service-Based CRM",
        description="For businesses that provide appointments, dispatch, and recurring services",
        sectors=("62", "81", "56"),
        focus="Appointments, dispatch, service history, recurring visits",
        default_pipelines=(
            _pipeline(
                "Service Pipeline",
                PipelineType.SERVICE,
                _stage("Request", 1, 20, initial=True),
                _stage("Scheduled", 2, 50),
                _stage("In Progress", 3, 80),
                _won("Completed", 4),
                _stage("Follow-up", 5, 100),
                _lost("Cancelled", 6),
            ),
        ),
        default_modules=("appointment_scheduling", "dispatch_routing", "service_history"),
        default_fields=(
            _field("service_type", "Service Type", _T.SELECT, _OPP, 1, required=True, searchable=True, filterable=True),
            _field("service_location", "Service Location", _T.ADDRESS, _OPP, 2, required=True),
            _field("duration", "Duration (Minutes)", _T.NUMBER, _OPP, 3),
            _field("recurring_schedule", "Recurring Schedule", _T.SELECT, _OPP, 4, filterable=True),
        ),
        default_activity_types=(
            _activity("appointment", "Appointment", _A.MEETING, 60, location=True),
            _activity("service_call", "Service Call", _A.SITE_VISIT, 60, location=True),
            _activity("follow_up", "Follow-up", _A.FOLLOW_UP, 15),
        ),
    ),
    IndustryTemplate.INVENTORY_BASED: TemplateDefinition(
        template=IndustryTemplate.INVENTORY_BASED,
        name="Inventory-Based CRM",
        description="For businesses that manage products, orders, and fulfillment",
        sectors=("31", "32", "33", "44", "45", "11"),
        focus="Products, orders, inventory, fulfillment",
        default_pipelines=(
            _pipeline(
                "Order Pipeline",
                PipelineType.SALES,
                _stage("Quote", 1, 20, initial=True),
                _stage("Order Placed", 2, 60),
                _stage("Processing", 3, 80),
                _stage("Fulfillment", 4, 90),
                _stage("Shipped", 5, 95),
                _won("Delivered", 6),
                _lost("Cancelled", 7),
            ),
        ),
        default_modules=("inventory_management", "order_fulfillment", "supplier_management"),
        default_fields=(
            _field("order_number", "Order Number", _T.TEXT, _OPP, 1, searchable=True),
            _field("ship_to_address", "Ship To Address", _T.ADDRESS, _OPP, 2),
            _field("shipping_method", "Shipping Method", _T.SELECT, _OPP, 3, filterable=True),
            _field("tracking_number", "Tracking Number", _T.TEXT, _OPP, 4, searchable=True),
        ),
        default_activity_types=(
            _activity("order_entry", "Order Entry", _A.TASK, 15, schedulable=False),
            _activity("inventory_check", "Inventory Check", _A.TASK, 30),
            _activity("supplier_call", "Supplier Call", _A.CALL, 20),
        ),
    ),
    IndustryTemplate.ASSET_BASED: TemplateDefinition(
        template=IndustryTemplate.ASSET_BASED,
        name="Asset-Based CRM",
        description="For businesses that manage fleets, equipment, and maintenance",
        sectors=("48", "49", "21", "22"),
        focus="Fleet, equipment, maintenance, compliance",
        default_pipelines=(
            _pipeline(
                "Asset Lifecycle",
                PipelineType.PROJECT,
                _stage("Acquisition", 1, 20, initial=True),
                _stage("Deployment", 2, 50),
                _stage("Active", 3, 100),
                _stage("Maintenance", 4, 80),
                _won("Decommission", 5),
            ),
        ),
        default_modules=("fleet_management", "maintenance_scheduling", "compliance_tracking"),
        default_fields=(
            _field("asset_id", "Asset ID", _T.TEXT, _OPP, 1, required=True, searchable=True),
            _field("asset_location", "Asset Location", _T.ADDRESS, _OPP, 2, filterable=True),
            _field("maintenance_due", "Maintenance Due", _T.DATE, _OPP, 3, filterable=True),
            _field("compliance_status", "Compliance Status", _T.SELECT, _OPP, 4, filterable=True),
        ),
        default_activity_types=(
            _activity("inspection", "Inspection", _A.INSPECTION, 60, location=True),
            _activity("maintenance", "Maintenance", _A.TASK, 120, location=True),
            _activity("compliance_audit", "Compliance Audit", _A.INSPECTION, 180),
        ),
    ),
    IndustryTemplate.MEMBERSHIP_BASED: TemplateDefinition(
        template=IndustryTemplate.MEMBERSHIP_BASED,
        name="Membership-Based CRM",
        description="For businesses that manage members, enrollment, and programs",
        sectors=("61", "71"),
        focus="Members, enrollment, progress, events",
        default_pipelines=(
            _pipeline(
                "Enrollment Pipeline",
                PipelineType.ONBOARDING,
                _stage("Prospect", 1, 10, initial=True),
                _stage("Applied", 2, 30),
                _stage("Enrolled", 3, 80),
                _stage("Active", 4, 100),
                _stage("Renewal", 5, 70),
                _won("Alumni", 6),
                _lost("Withdrawn", 7),
            ),
        ),
        default_modules=("enrollment", "member_portal", "progress_tracking", "events"),
        default_fields=(
            _field("member_id", "Member ID", _T.TEXT, _CONTACT, 1, searchable=True),
            _field("enrollment_date", "Enrollment Date", _T.DATE, _CONTACT, 2, filterable=True),
            _field("membership_tier", "Membership Tier", _T.SELECT, _CONTACT, 3, searchable=True, filterable=True),
            _field("expiration_date", "Expiration Date", _T.DATE, _CONTACT, 4, filterable=True),
        ),
        default_activity_types=(
            _activity("registration", "Registration", _A.TASK, 30, schedulable=False),
            _activity("class_session", "Class/Session", _A.MEETING, 60, location=True),
            _activity("event", "Event", _A.MEETING, 120, location=True),
        ),
    ),
    IndustryTemplate.HOSPITALITY_BASED: TemplateDefinition(
        template=IndustryTemplate.HOSPITALITY_BASED,
        name="Hospitality-Based CRM",
        description="For businesses that manage reservations, capacity, and guest experience",
        sectors=("72",),
        focus="Reservations, capacity, guest experience",
        default_pipelines=(
            _pipeline(
                "Reservation Pipeline",
                PipelineType.SERVICE,
                _stage("Inquiry", 1, 20, initial=True),
                _stage("Reserved", 2, 70),
                _stage("Confirmed", 3, 90),
                _stage("Checked In", 4, 100),
                _won("Completed", 5),
                _lost("Cancelled", 6),
                _lost("No Show", 7),
            ),
        ),
        default_modules=("reservations", "table_room_management", "guest_profiles"),
        default_fields=(
            _field("party_size", "Party Size", _T.NUMBER, _OPP, 1, required=True, filterable=True),
            _field("reservation_datetime", "Reservation Date/Time", _T.DATETIME, _OPP, 2, required=True, filterable=True),
            _field("room_table", "Room/Table", _T.SELECT, _OPP, 3, filterable=True),
            _field("special_requests", "Special Requests", _T.TEXTAREA, _OPP, 4),
            _field("vip_status", "VIP Status", _T.BOOLEAN, _CONTACT, 5, filterable=True),
        ),
        default_activity_types=(
            _activity("reservation", "Reservation", _A.TASK, 15),
            _activity("check_in", "Check In", _A.TASK, 10, schedulable=False, location=True),
            _activity("guest_feedback", "Guest Feedback", _A.NOTE, 5, schedulable=False),
        ),
    ),
    IndustryTemplate.CASE_BASED: TemplateDefinition(
        template=IndustryTemplate.CASE_BASED,
        name="Case-Based CRM",
        description="For businesses that manage cases, requests, and compliance",
        sectors=("92", "55"),
        focus="Cases, requests, compliance, documentation",
        default_pipelines=(
            _pipeline(
                "Case Pipeline",
                PipelineType.SUPPORT,
                _stage("Submitted", 1, 10, initial=True),
                _stage("Under Review", 2, 30),
                _stage("In Progress", 3, 60),
                _stage("Pending Approval", 4, 80),
                _won("Resolved", 5),
                _won("Closed", 6),
                _lost("Rejected", 7),
            ),
        ),
        default_modules=("case_management", "request_tracking", "compliance_audit"),
        default_fields=(
            _field("case_number", "Case Number", _T.TEXT, _OPP, 1, required=True, searchable=True),
            _field("case_category", "Category", _T.SELECT, _OPP, 2, required=True, searchable=True, filterable=True),
            _field("priority", "Priority", _T.SELECT, _OPP, 3, required=True, filterable=True),
            _field("assigned_to", "Assigned To", _T.USER_REFERENCE, _OPP, 4, filterable=True),
            _field("resolution", "Resolution", _T.TEXTAREA, _OPP, 5),
        ),
        default_activity_types=(
            _activity("case_update", "Case Update", _A.NOTE, 15, schedulable=False),
            _activity("review_meeting", "Review Meeting", _A.MEETING, 60),
            _activity("approval", "Approval", _A.TASK, 30, schedulable=False),
        ),
    ),
}

DEFAULT_TEMPLATE = IndustryTemplate.SALES_FOCUSED

SECTOR_TEMPLATES: dict[str, IndustryTemplate] = {
    "11": IndustryTemplate.INVENTORY_BASED,
    "21": IndustryTemplate.ASSET_BASED,
    "22": IndustryTemplate.ASSET_BASED,
    "23": IndustryTemplate.PROJECT_BASED,
    "31": IndustryTemplate.INVENTORY_BASED,
    "32": IndustryTemplate.INVENTORY_BASED,
    "33": IndustryTemplate.INVENTORY_BASED,
    "42": IndustryTemplate.SALES_FOCUSED,
    "44": IndustryTemplate.INVENTORY_BASED,
    "45": IndustryTemplate.INVENTORY_BASED,
    "48": IndustryTemplate.ASSET_BASED,
    "49": IndustryTemplate.ASSET_BASED,
    "51": IndustryTemplate.PROJECT_BASED,
    "52": IndustryTemplate.SALES_FOCUSED,
    "53": IndustryTemplate.SALES_FOCUSED,
    "54": IndustryTemplate.PROJECT_BASED,
    "55": IndustryTemplate.CASE_BASED,
    "56": IndustryTemplate.SERVICE_BASED,
    "61": IndustryTemplate.MEMBERSHIP_BASED,
    "62": IndustryTemplate.SERVICE_BASED,
    "71": IndustryTemplate.MEMBERSHIP_BASED,
    "72": IndustryTemplate.HOSPITALITY_BASED,
    "81": IndustryTemplate.SERVICE_BASED,
    "92": IndustryTemplate.CASE_BASED,
}


def template_for_sector(sector_code: str) -> IndustryTemplate:
    return SECTOR_TEMPLATES.get(sector_code, DEFAULT_TEMPLATE)


def get_template_definition(template: str) -> TemplateDefinition | None:
    try:
        key = IndustryTemplate(template)
    except ValueError:
        return None
    return TEMPLATE_DEFINITIONS.get(key)


def module_display_name(module_key: str) -> str:
    """``job_costing`` -> ``Job Costing``."""
    return " ".join(part[:1].upper() + part[1:] for part in module_key.split("_") if part)


def template_modules(definition: TemplateDefinition) -> list[IndustryModuleConfiguration]:
    return [
        IndustryModuleConfiguration(
            module_key=module_key,
            name=module_display_name(module_key),
            is_enabled=True,
            is_required=False,
        )
        for module_key in definition.default_modules
    ]
