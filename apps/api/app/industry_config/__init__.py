from app.industry_config.errors import ConfigurationError, InvalidClassificationError, UnknownTemplateError
from app.industry_config.registry import ConfigurationRegistry
from app.industry_config.schemas import (
    ConfigurationPreview,
    IndustryTemplate,
    LoadedConfiguration,
    MergedConfiguration,
    PartialConfiguration,
)
from app.industry_config.templates import SECTOR_TEMPLATES, TEMPLATE_DEFINITIONS

__all__ = [
    "ConfigurationRegistry",
    "ConfigurationError",
    "InvalidClassificationError",
    "UnknownTemplateError",
    "ConfigurationPreview",
    "IndustryTemplate",
    "LoadedConfiguration",
    "MergedConfiguration",
    "PartialConfiguration",
    "SECTOR_TEMPLATES",
    "TEMPLATE_DEFINITIONS",
]
