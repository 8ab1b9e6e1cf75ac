from __future__ import annotations


class ConfigurationError(Exception):
    """Base error for industry configuration resolution."""


class InvalidClassificationError(ConfigurationError):
    """Raised when a classification code is not 2-6 digits after normalization."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Invalid classification code '{code}': expected 2-6 digits")


class UnknownTemplateError(ConfigurationError):
    def __init__(self, template: str) -> None:
        self.template = template
        super().__init__(f"Unknown industry template '{template}'")
