"""Card sequencer: puts the selected cards in their canonical processing order."""

import logging
from typing import List, Optional, Sequence

from ..models.card import CardSpec

logger = logging.getLogger(__name__)


def sequence_cards(
    selected: Sequence[CardSpec],
    precedence: Optional[Sequence[str]] = None
) -> List[CardSpec]:
    """
    Order selected cards for allocation.

    Order:
    1. The first controller of the selection
    2. Cards listed in the precedence table, in table order; several
       instances of the same card keep their selection order
    3. Cards missing from the precedence table, in selection order

    The resulting order decides which card receives points first.

    Args:
        selected: Card specs in selection order (duplicates allowed)
        precedence: Card ids in processing order. Defaults to the
            catalog's default precedence table

    Returns:
        New list of card specs
    """
    if precedence is None:
        from .card_catalog import DEFAULT_SEQUENCE_PRECEDENCE
        precedence = DEFAULT_SEQUENCE_PRECEDENCE

    remaining = list(selected)
    ordered: List[CardSpec] = []

    for i, card in enumerate(remaining):
        if card.is_controller:
            ordered.append(remaining.pop(i))
            break

    rank = {card_id: i for i, card_id in enumerate(precedence)}
    listed = [card for card in remaining if card.id in rank]
    unlisted = [card for card in remaining if card.id not in rank]

    # sorted() is stable: same-id instances stay in selection order
    ordered.extend(sorted(listed, key=lambda card: rank[card.id]))
    ordered.extend(unlisted)

    if unlisted:
        logger.debug(
            "Cards without precedence appended last: %s",
            ", ".join(card.id for card in unlisted)
        )
    logger.debug("Card sequence: %s", ", ".join(card.id for card in ordered))
    return ordered
