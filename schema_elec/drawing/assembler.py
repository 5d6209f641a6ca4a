"""
Diagram assembler: stamps allocated cards into a draw.io template.

The assembler works on a per-request copy of the template document:
template pages are deep-copied for every card instance, placeholders are
replaced by point names, untouched template pages are pruned and project
metadata is written into the title blocks.
"""

import copy
import logging
import xml.etree.ElementTree as ET
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.card import CardInstance
from ..models.generation import GenerationWarning, MissingTemplatePageWarning
from ..models.point import ALLOCATABLE_SIGNAL_TYPES
from ..models.project import ProjectParams
from ..settings import GeneratorConfig
from .overview import place_card_glyphs

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Label-bearing nodes: (tag, attribute)
LABEL_ATTRIBUTES = (("mxCell", "value"), ("object", "label"))


class AssemblyStage(Enum):
    """Stages of one assembly run, in order."""
    INDEXED = "indexed"
    OVERVIEW_BUILT = "overview_built"
    PAGES_INSTANTIATED = "pages_instantiated"
    PRUNED = "pruned"
    METADATA_SUBSTITUTED = "metadata_substituted"
    PLACEHOLDERS_CLEARED = "placeholders_cleared"
    SERIALIZED = "serialized"


@dataclass
class AssemblyResult:
    """Serialized document and the warnings raised while building it."""
    document: bytes
    page_names: List[str] = field(default_factory=list)
    warnings: List[GenerationWarning] = field(default_factory=list)


def is_placeholder(value: Optional[str]) -> bool:
    """Check if a value is a bare $...$ placeholder token."""
    return bool(value) and len(value) >= 2 and value.startswith("$") and value.endswith("$")


def point_token(prefix: str, number: int) -> str:
    """Placeholder token of the n-th point of a type ($di1$, $ao4$...)."""
    return f"${prefix}{number}$"


def index_placeholders(page: ET.Element) -> Dict[str, List[Tuple[ET.Element, str]]]:
    """
    Map each placeholder token of a page to the nodes carrying it.

    Both leaf cells (mxCell@value) and container objects (object@label)
    are indexed.
    """
    index: Dict[str, List[Tuple[ET.Element, str]]] = defaultdict(list)
    for tag, attr in LABEL_ATTRIBUTES:
        for node in page.iter(tag):
            value = node.get(attr)
            if is_placeholder(value):
                index[value].append((node, attr))
    return index


def substitute_points(page: ET.Element, card: CardInstance) -> int:
    """
    Write the card's point names into its page.

    Returns:
        Number of labels replaced
    """
    index = index_placeholders(page)
    replaced = 0

    for signal_type in ALLOCATABLE_SIGNAL_TYPES:
        for number, point in enumerate(card.points(signal_type), start=1):
            token = point_token(signal_type.placeholder_prefix, number)
            nodes = index.get(token)
            if not nodes:
                logger.debug("Page %s: no placeholder %s for '%s'", card.page_name, token, point.display_name)
                continue
            for node, attr in nodes:
                node.set(attr, point.display_name)
                replaced += 1

    return replaced


def substitute_metadata(page: ET.Element, replacements: Dict[str, str]) -> None:
    """Replace metadata tokens inside every attribute of every node of a page."""
    for node in page.iter():
        for attr, value in list(node.attrib.items()):
            new_value = value
            for token, text in replacements.items():
                if token in new_value:
                    new_value = new_value.replace(token, text)
            if new_value != value:
                node.set(attr, new_value)


def clear_unused_placeholders(root: ET.Element, marker: str) -> int:
    """
    Replace labels still holding a placeholder with the unused marker.

    Returns:
        Number of labels replaced
    """
    cleared = 0
    for tag, attr in LABEL_ATTRIBUTES:
        for node in root.iter(tag):
            if is_placeholder(node.get(attr)):
                node.set(attr, marker)
                cleared += 1
    return cleared


def serialize_document(root: ET.Element) -> bytes:
    """Serialize a document with an XML declaration."""
    text = ET.tostring(root, encoding="unicode")
    if not text.startswith("<?xml"):
        text = XML_DECLARATION + text
    return text.encode("utf-8")


class DiagramAssembler:
    """Builds the wiring schema document from a template and allocated cards."""

    def __init__(self, catalog, config: Optional[GeneratorConfig] = None):
        """
        Initialize the assembler.

        Args:
            catalog: Card catalog, used for overview glyphs
            config: Generator configuration
        """
        self.catalog = catalog
        self.config = config or GeneratorConfig()

    def _metadata_replacements(self, params: ProjectParams) -> Dict[str, str]:
        values = params.values()
        return {
            token: values.get(field_name) or ""
            for field_name, token in self.config.metadata_tokens.items()
        }

    def _build_overview(
        self,
        pages: Dict[str, ET.Element],
        cards: Sequence[CardInstance],
        warnings: List[GenerationWarning]
    ) -> Optional[ET.Element]:
        controller = next((c for c in cards if c.spec.is_controller), None)
        if controller is None:
            return None

        page_name = f"{self.config.overview_page_prefix}{controller.card_id}"
        template_page = pages.get(page_name)
        if template_page is None:
            warning = MissingTemplatePageWarning(
                message=f"Overview page '{page_name}' not found in template",
                card_id=controller.card_id
            )
            logger.warning(warning.message)
            warnings.append(warning)
            return None

        page = copy.deepcopy(template_page)
        page.set("name", page_name)
        page.set("id", f"page_Synoptique_{controller.card_id}_conserv")
        warnings.extend(place_card_glyphs(page, cards, self.catalog, self.config))
        logger.debug("Overview page created: %s", page_name)
        return page

    def _instantiate_page(
        self,
        pages: Dict[str, ET.Element],
        card: CardInstance,
        warnings: List[GenerationWarning]
    ) -> Optional[ET.Element]:
        template_page = pages.get(card.spec.template_page_id)
        if template_page is None:
            warning = MissingTemplatePageWarning(
                message=f"Template page '{card.spec.template_page_id}' not found, card {card.page_name} skipped",
                card_id=card.card_id
            )
            logger.warning(warning.message)
            warnings.append(warning)
            return None

        page = copy.deepcopy(template_page)
        page.set("name", card.page_name)
        page.set("id", f"page_{card.page_name}_conserv")
        replaced = substitute_points(page, card)
        logger.debug("Page created: %s (%d labels)", card.page_name, replaced)
        return page

    def assemble(
        self,
        template: ET.Element,
        cards: Sequence[CardInstance],
        params: Optional[ProjectParams] = None
    ) -> AssemblyResult:
        """
        Assemble the wiring schema.

        Args:
            template: Working copy of the template <mxfile> root. It is
                modified in place and must not be shared
            cards: Allocated card instances in sequence order
            params: Project metadata

        Returns:
            AssemblyResult with the serialized document
        """
        params = params or ProjectParams()
        warnings: List[GenerationWarning] = []

        pages = {d.get("name"): d for d in template.findall("diagram") if d.get("name")}
        logger.debug("%s: %d template pages", AssemblyStage.INDEXED.value, len(pages))

        kept: List[ET.Element] = []

        overview = self._build_overview(pages, cards, warnings)
        if overview is not None:
            template.append(overview)
            kept.append(overview)
        logger.debug("%s", AssemblyStage.OVERVIEW_BUILT.value)

        for card in cards:
            page = self._instantiate_page(pages, card, warnings)
            if page is not None:
                template.append(page)
                kept.append(page)
        logger.debug("%s: %d pages", AssemblyStage.PAGES_INSTANTIATED.value, len(kept))

        kept_ids = {id(page) for page in kept}
        removed = 0
        for diagram in template.findall("diagram"):
            if id(diagram) not in kept_ids:
                template.remove(diagram)
                removed += 1
        logger.debug("%s: %d template pages removed", AssemblyStage.PRUNED.value, removed)

        replacements = self._metadata_replacements(params)
        for page in kept:
            substitute_metadata(page, replacements)
        logger.debug("%s", AssemblyStage.METADATA_SUBSTITUTED.value)

        cleared = clear_unused_placeholders(template, self.config.unused_marker)
        logger.debug("%s: %d unused labels", AssemblyStage.PLACEHOLDERS_CLEARED.value, cleared)

        document = serialize_document(template)
        logger.debug("%s: %d bytes", AssemblyStage.SERIALIZED.value, len(document))

        return AssemblyResult(
            document=document,
            page_names=[page.get("name") for page in kept],
            warnings=warnings,
        )
