"""Processing engine for the wiring schema generator."""

from .classifier import (
    MalformedInputError,
    classify_points,
    count_demand,
)

from .card_catalog import (
    CardCatalog,
    CatalogError,
    DEFAULT_SEQUENCE_PRECEDENCE,
    get_card_catalog,
    load_card_catalog,
)

from .sequencer import sequence_cards

from .capacity import (
    CapacityExceededError,
    available_capacity,
    summarize_capacity,
    validate_capacity,
)

from .point_allocator import (
    AllocationInvariantViolation,
    allocate_points,
)

__all__ = [
    # Classifier
    "MalformedInputError",
    "classify_points",
    "count_demand",
    # Catalog
    "CardCatalog",
    "CatalogError",
    "DEFAULT_SEQUENCE_PRECEDENCE",
    "get_card_catalog",
    "load_card_catalog",
    # Sequencer
    "sequence_cards",
    # Capacity
    "CapacityExceededError",
    "available_capacity",
    "summarize_capacity",
    "validate_capacity",
    # Allocator
    "AllocationInvariantViolation",
    "allocate_points",
]
