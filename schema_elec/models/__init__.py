"""Data models for the wiring schema generator."""

from .point import (
    Point,
    SignalType,
    SIGNAL_TYPE_TOKENS,
    ALLOCATABLE_SIGNAL_TYPES,
    parse_signal_type,
)

from .card import (
    CardCategory,
    CardCapacity,
    CardSpec,
    CardInstance,
)

from .project import (
    ProjectParams,
    DATE_FORMAT,
    today_string,
)

from .generation import (
    GenerationWarning,
    UnknownModuleWarning,
    MissingTemplatePageWarning,
    OverviewSlotsExhaustedWarning,
    GenerationResult,
)

__all__ = [
    # Point
    "Point",
    "SignalType",
    "SIGNAL_TYPE_TOKENS",
    "ALLOCATABLE_SIGNAL_TYPES",
    "parse_signal_type",
    # Card
    "CardCategory",
    "CardCapacity",
    "CardSpec",
    "CardInstance",
    # Project
    "ProjectParams",
    "DATE_FORMAT",
    "today_string",
    # Generation
    "GenerationWarning",
    "UnknownModuleWarning",
    "MissingTemplatePageWarning",
    "OverviewSlotsExhaustedWarning",
    "GenerationResult",
]
