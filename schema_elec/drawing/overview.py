"""Card glyph placement on the controller overview (synoptic) page."""

import logging
import xml.etree.ElementTree as ET
from typing import List, Sequence

from ..models.card import CardInstance, CardCategory
from ..models.generation import (
    GenerationWarning,
    MissingTemplatePageWarning,
    OverviewSlotsExhaustedWarning,
)
from ..settings import GeneratorConfig

logger = logging.getLogger(__name__)

GLYPH_STYLE = (
    "shape=image;verticalLabelPosition=bottom;labelBackgroundColor=default;"
    "verticalAlign=top;aspect=fixed;imageAspect=0;image=data:image/svg+xml,{glyph}"
)


def _fmt(value: float) -> str:
    return f"{value:g}"


def clean_glyph(glyph: str) -> str:
    """Strip whitespace and line breaks from a base64 glyph."""
    return glyph.strip().replace("\n", "").replace("\r", "")


def make_glyph_element(card_id: str, glyph: str, x: int, y: int, config: GeneratorConfig) -> ET.Element:
    """Build the <object> node drawing a card glyph at (x, y)."""
    obj = ET.Element("object", {"label": "", "id": f"{card_id}{x}"})
    cell = ET.SubElement(obj, "mxCell", {
        "style": GLYPH_STYLE.format(glyph=glyph),
        "vertex": "1",
        "parent": "1",
    })
    ET.SubElement(cell, "mxGeometry", {
        "x": str(x),
        "y": str(y),
        "width": _fmt(config.glyph_width),
        "height": _fmt(config.glyph_height),
        "as": "geometry",
    })
    return obj


def place_card_glyphs(
    page: ET.Element,
    cards: Sequence[CardInstance],
    catalog,
    config: GeneratorConfig
) -> List[GenerationWarning]:
    """
    Draw the glyph of every I/O card on an overview page.

    Cards are placed left to right on the configured slots, in sequence
    order. Cards without a glyph are skipped and take no slot. When the
    slots run out the remaining glyphs are dropped and a warning is
    returned.

    Args:
        page: Overview <diagram> page (working copy)
        cards: Allocated card instances in sequence order
        catalog: Card catalog providing glyph(card_id)
        config: Generator configuration (slots, glyph size)

    Returns:
        Warnings raised while placing glyphs
    """
    warnings: List[GenerationWarning] = []

    graph_root = page.find(".//root")
    if graph_root is None:
        warning = MissingTemplatePageWarning(
            message=f"Overview page '{page.get('name')}' has no <root> element, glyphs not placed"
        )
        logger.warning(warning.message)
        return [warning]

    slots = list(config.overview_slots_x)
    slot_index = 0
    dropped = []

    for card in cards:
        if card.spec.category != CardCategory.CARD:
            continue

        glyph = clean_glyph(catalog.glyph(card.card_id))
        if not glyph:
            logger.debug("No glyph for card %s", card.card_id)
            continue

        if slot_index >= len(slots):
            dropped.append(card.page_name)
            continue

        x = slots[slot_index]
        slot_index += 1
        graph_root.append(make_glyph_element(card.card_id, glyph, x, config.overview_slot_y, config))
        logger.debug("Card %s placed on overview at (%s, %s)", card.card_id, x, config.overview_slot_y)

    if dropped:
        warning = OverviewSlotsExhaustedWarning(
            message=(
                f"Overview page has {len(slots)} card slots, "
                f"{len(dropped)} card glyph(s) not drawn: {', '.join(dropped)}"
            ),
            dropped=dropped,
        )
        logger.warning(warning.message)
        warnings.append(warning)

    return warnings
