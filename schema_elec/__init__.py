"""Electrical Wiring Schema Generator.

Generates draw.io electrical wiring schemas from a telemetry point list and
a selection of controller and I/O cards: the points are allocated to the
card channels and written into the card pages of a draw.io template.
"""

__version__ = "1.0.0"
__author__ = "Nayyer"

from .models import (
    Point,
    SignalType,
    CardCategory,
    CardCapacity,
    CardSpec,
    CardInstance,
    ProjectParams,
    GenerationWarning,
    GenerationResult,
)

from .parsers import (
    PointListParser,
    load_point_records,
)

from .engine import (
    MalformedInputError,
    classify_points,
    CardCatalog,
    get_card_catalog,
    sequence_cards,
    CapacityExceededError,
    validate_capacity,
    allocate_points,
)

from .drawing import (
    TemplateRepository,
    DiagramAssembler,
    SchemaGenerator,
    NoValidCardsError,
    generate_wiring_schema,
)

from .settings import (
    GeneratorConfig,
    load_config,
)

__all__ = [
    # Version
    "__version__",
    "__author__",
    # Models
    "Point",
    "SignalType",
    "CardCategory",
    "CardCapacity",
    "CardSpec",
    "CardInstance",
    "ProjectParams",
    "GenerationWarning",
    "GenerationResult",
    # Parsers
    "PointListParser",
    "load_point_records",
    # Engine
    "MalformedInputError",
    "classify_points",
    "CardCatalog",
    "get_card_catalog",
    "sequence_cards",
    "CapacityExceededError",
    "validate_capacity",
    "allocate_points",
    # Drawing
    "TemplateRepository",
    "DiagramAssembler",
    "SchemaGenerator",
    "NoValidCardsError",
    "generate_wiring_schema",
    # Settings
    "GeneratorConfig",
    "load_config",
]
