"""Wiring schema generation pipeline."""

import logging
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..engine.card_catalog import CardCatalog, load_card_catalog
from ..engine.capacity import validate_capacity
from ..engine.classifier import classify_points, count_demand
from ..engine.point_allocator import allocate_points
from ..engine.sequencer import sequence_cards
from ..models.generation import GenerationResult
from ..models.project import ProjectParams
from ..settings import GeneratorConfig, load_config
from .assembler import DiagramAssembler
from .template_repository import TemplateRepository

logger = logging.getLogger(__name__)


class NoValidCardsError(Exception):
    """Exception raised when none of the selected cards is in the catalog."""
    pass


class SchemaGenerator:
    """
    Runs the complete pipeline:
    classify points -> resolve and sequence cards -> check capacity ->
    allocate points -> assemble the draw.io document.
    """

    def __init__(
        self,
        catalog: Optional[CardCatalog] = None,
        templates: Optional[TemplateRepository] = None,
        config: Optional[GeneratorConfig] = None
    ):
        """
        Initialize the generator.

        Args:
            catalog: Card catalog (defaults to the bundled catalog)
            templates: Template repository (defaults to the configured template)
            config: Generator configuration (defaults to load_config())
        """
        self.config = config or load_config()
        if catalog is None:
            catalog = load_card_catalog(self.config.catalog_path)
        self.catalog = catalog
        self.templates = templates or TemplateRepository(self.config.resolved_template_path)
        self.assembler = DiagramAssembler(self.catalog, self.config)

    def generate(
        self,
        raw_points: Sequence[Mapping],
        card_ids: Iterable[str],
        params: Optional[Union[ProjectParams, Mapping]] = None
    ) -> GenerationResult:
        """
        Generate a wiring schema.

        Args:
            raw_points: Point records (signal type, equipment name, point name)
            card_ids: Selected card ids; duplicates are separate instances
            params: Project metadata, as ProjectParams or a mapping

        Returns:
            GenerationResult with the document bytes

        Raises:
            MalformedInputError: If the point list is malformed
            NoValidCardsError: If no selected card is in the catalog
            CapacityExceededError: If the cards lack channels for a signal type
        """
        if params is None:
            params = ProjectParams()
        elif not isinstance(params, ProjectParams):
            params = ProjectParams.model_validate(dict(params))

        points_by_type = classify_points(raw_points)

        selected, warnings = self.catalog.resolve(card_ids)
        if not selected:
            raise NoValidCardsError("None of the selected cards was found in the catalog")

        ordered = sequence_cards(selected, self.catalog.sequence_precedence)
        validate_capacity(count_demand(points_by_type), ordered)
        cards = allocate_points(ordered, points_by_type)

        assembly = self.assembler.assemble(self.templates.load_template(), cards, params)
        warnings.extend(assembly.warnings)

        logger.info(
            "Schema generated: %d cards, %d pages, %d warnings",
            len(cards), len(assembly.page_names), len(warnings)
        )
        return GenerationResult(
            document=assembly.document,
            cards=cards,
            points_by_type=points_by_type,
            warnings=warnings,
        )


def generate_wiring_schema(
    raw_points: Sequence[Mapping],
    card_ids: Iterable[str],
    params: Optional[Union[ProjectParams, Mapping]] = None,
    template_path: Optional[str] = None,
    output_path: Optional[str] = None
) -> GenerationResult:
    """
    Convenience function to generate a wiring schema.

    Args:
        raw_points: Point records
        card_ids: Selected card ids
        params: Project metadata
        template_path: Template file (defaults to the configured template)
        output_path: If given, the document is also written there

    Returns:
        GenerationResult
    """
    config = load_config()
    templates = TemplateRepository(template_path) if template_path else None
    generator = SchemaGenerator(templates=templates, config=config)
    result = generator.generate(raw_points, card_ids, params)
    if output_path:
        result.write_to(output_path)
    return result
