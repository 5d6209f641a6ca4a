"""Capacity check of the selected cards against the point counts."""

import logging
from typing import Dict, Sequence, Tuple

from ..models.card import CardSpec
from ..models.point import SignalType, ALLOCATABLE_SIGNAL_TYPES

logger = logging.getLogger(__name__)


class CapacityExceededError(Exception):
    """Exception raised when the selected cards cannot hold all points of a type."""

    def __init__(self, signal_type: SignalType, demanded: int, available: int):
        self.signal_type = signal_type
        self.demanded = demanded
        self.available = available
        super().__init__(
            f"{signal_type.value} points ({demanded}) exceed the "
            f"{signal_type.value} channels available ({available})"
        )

    @property
    def shortfall(self) -> int:
        return self.demanded - self.available

    def to_dict(self) -> Dict:
        return {
            'signal_type': self.signal_type.value,
            'demanded': self.demanded,
            'available': self.available,
            'shortfall': self.shortfall,
        }


def available_capacity(cards: Sequence[CardSpec]) -> Dict[SignalType, int]:
    """Total channels per allocatable signal type."""
    return {
        t: sum(card.capacity.for_type(t) for card in cards)
        for t in ALLOCATABLE_SIGNAL_TYPES
    }


def summarize_capacity(
    demand: Dict[SignalType, int],
    cards: Sequence[CardSpec]
) -> Dict[SignalType, Tuple[int, int]]:
    """
    Demand against availability for each signal type.

    Returns:
        Dictionary {SignalType: (demanded, available)} in check order
    """
    available = available_capacity(cards)
    return {t: (demand.get(t, 0), available[t]) for t in ALLOCATABLE_SIGNAL_TYPES}


def validate_capacity(demand: Dict[SignalType, int], cards: Sequence[CardSpec]) -> None:
    """
    Verify the cards have enough channels for every signal type.

    Types are checked in the order DI, AI, DO, AO; the first shortfall is
    reported. Nothing is allocated here.

    Args:
        demand: Number of points per signal type
        cards: Selected card specs

    Raises:
        CapacityExceededError: For the first signal type lacking channels
    """
    summary = summarize_capacity(demand, cards)
    logger.debug(
        "Capacity check: %s",
        ", ".join(f"{t.value} {d}/{a}" for t, (d, a) in summary.items())
    )

    for signal_type, (demanded, available) in summary.items():
        if demanded > available:
            error = CapacityExceededError(signal_type, demanded, available)
            logger.error(str(error))
            raise error
