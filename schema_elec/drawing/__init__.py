"""Drawing module for the wiring schema generator."""

from .template_repository import (
    TemplateError,
    TemplateInfo,
    TemplateRepository,
    decode_diagram_text,
    inflate_compressed_pages,
    parse_template,
)

from .overview import (
    clean_glyph,
    make_glyph_element,
    place_card_glyphs,
)

from .assembler import (
    AssemblyResult,
    AssemblyStage,
    DiagramAssembler,
    clear_unused_placeholders,
    index_placeholders,
    is_placeholder,
    serialize_document,
    substitute_metadata,
    substitute_points,
)

from .generator import (
    NoValidCardsError,
    SchemaGenerator,
    generate_wiring_schema,
)

from .allocation_report import (
    AllocationReportGenerator,
    ReportConfig,
    generate_allocation_report,
)

__all__ = [
    # Template repository
    "TemplateError",
    "TemplateInfo",
    "TemplateRepository",
    "decode_diagram_text",
    "inflate_compressed_pages",
    "parse_template",
    # Overview
    "clean_glyph",
    "make_glyph_element",
    "place_card_glyphs",
    # Assembler
    "AssemblyResult",
    "AssemblyStage",
    "DiagramAssembler",
    "clear_unused_placeholders",
    "index_placeholders",
    "is_placeholder",
    "serialize_document",
    "substitute_metadata",
    "substitute_points",
    # Generator
    "NoValidCardsError",
    "SchemaGenerator",
    "generate_wiring_schema",
    # Report
    "AllocationReportGenerator",
    "ReportConfig",
    "generate_allocation_report",
]
