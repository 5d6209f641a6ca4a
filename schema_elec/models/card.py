"""Card (hardware module) data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .point import Point, SignalType, ALLOCATABLE_SIGNAL_TYPES


class CardCategory(Enum):
    """Card categories from the catalog."""
    CONTROLLER = "controller"    # Hosts the overview (synoptic) page
    CARD = "card"                # I/O card, drawn on the overview page
    EXTENSION = "extension"      # Extension bus module


@dataclass(frozen=True)
class CardCapacity:
    """Channel count per signal type."""
    di: int = 0
    do: int = 0
    ai: int = 0
    ao: int = 0

    def for_type(self, signal_type: SignalType) -> int:
        """Channels available for a signal type (0 for COM)."""
        return {
            SignalType.DI: self.di,
            SignalType.DO: self.do,
            SignalType.AI: self.ai,
            SignalType.AO: self.ao,
        }.get(signal_type, 0)

    @property
    def total(self) -> int:
        return self.di + self.do + self.ai + self.ao

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {'DI': self.di, 'AI': self.ai, 'DO': self.do, 'AO': self.ao}


@dataclass(frozen=True)
class CardSpec:
    """Catalog specification of a card."""
    id: str                           # e.g. "s4th_16_di"
    display_name: str                 # e.g. "S4TH 16 DI"
    brand: str                        # e.g. "Sofrel"
    category: CardCategory
    capacity: CardCapacity = field(default_factory=CardCapacity)
    template_page_id: str = ""        # Template page name, defaults to id
    glyph: Optional[str] = None       # Base64 SVG used on the overview page
    gui_order: int = 0                # Display order in card pickers

    def __post_init__(self):
        if not self.template_page_id:
            object.__setattr__(self, "template_page_id", self.id)

    @property
    def is_controller(self) -> bool:
        return self.category == CardCategory.CONTROLLER


@dataclass
class CardInstance:
    """A selected card with the points allocated to it."""
    spec: CardSpec
    position: int                     # Index in the sequenced card list

    # Allocated points per signal type
    assigned: Dict[SignalType, Tuple[Point, ...]] = field(
        default_factory=lambda: {t: () for t in ALLOCATABLE_SIGNAL_TYPES}
    )

    @property
    def card_id(self) -> str:
        return self.spec.id

    @property
    def page_name(self) -> str:
        """Unique name of this instance's diagram page."""
        return f"{self.spec.id}_{self.position}"

    def points(self, signal_type: SignalType) -> Tuple[Point, ...]:
        return self.assigned.get(signal_type, ())

    @property
    def total_channels(self) -> int:
        return self.spec.capacity.total

    @property
    def used_channels(self) -> int:
        return sum(len(points) for points in self.assigned.values())

    @property
    def spare_channels(self) -> int:
        return self.total_channels - self.used_channels

    @property
    def utilization_percent(self) -> float:
        """Calculate channel utilization percentage."""
        if self.total_channels == 0:
            return 0.0
        return (self.used_channels / self.total_channels) * 100
