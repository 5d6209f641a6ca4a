"""Greedy point-to-card allocation."""

import logging
from collections import deque
from typing import Dict, List, Sequence

from ..models.card import CardSpec, CardInstance
from ..models.point import Point, SignalType, ALLOCATABLE_SIGNAL_TYPES

logger = logging.getLogger(__name__)


class AllocationInvariantViolation(RuntimeError):
    """Internal fault: points left over after a successful capacity check."""

    def __init__(self, remaining: Dict[SignalType, int]):
        self.remaining = remaining
        super().__init__(
            "Points left unallocated: "
            + ", ".join(f"{t.value}={n}" for t, n in remaining.items())
        )


def allocate_points(
    cards_in_order: Sequence[CardSpec],
    points_by_type: Dict[SignalType, List[Point]]
) -> List[CardInstance]:
    """
    Distribute points over the cards.

    Each card, in sequence order, takes points from the front of each
    type's queue (DI, AI, DO, AO) until its channels for that type are full
    or the queue is empty. No reordering, no backtracking.

    Args:
        cards_in_order: Sequenced card specs
        points_by_type: Classified points

    Returns:
        One CardInstance per card, position = index in the sequence

    Raises:
        AllocationInvariantViolation: If any point could not be placed
    """
    queues = {t: deque(points_by_type.get(t, [])) for t in ALLOCATABLE_SIGNAL_TYPES}
    instances = []

    for position, card in enumerate(cards_in_order):
        assigned = {}
        for signal_type in ALLOCATABLE_SIGNAL_TYPES:
            queue = queues[signal_type]
            take = min(card.capacity.for_type(signal_type), len(queue))
            assigned[signal_type] = tuple(queue.popleft() for _ in range(take))

        instance = CardInstance(spec=card, position=position, assigned=assigned)
        instances.append(instance)
        logger.debug(
            "Card %s: %s",
            instance.page_name,
            ", ".join(
                f"{t.value} {len(assigned[t])}/{card.capacity.for_type(t)}"
                for t in ALLOCATABLE_SIGNAL_TYPES
            )
        )

    remaining = {t: len(q) for t, q in queues.items() if q}
    if remaining:
        raise AllocationInvariantViolation(remaining)

    return instances
