"""I/O point data model for wiring schema generation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SignalType(Enum):
    """Signal type of an I/O point."""
    DI = "DI"    # Digital Input
    DO = "DO"    # Digital Output
    AI = "AI"    # Analog Input
    AO = "AO"    # Analog Output
    COM = "COM"  # Modbus RS485 communication

    @property
    def is_allocatable(self) -> bool:
        """Check if points of this type occupy card channels."""
        return self in ALLOCATABLE_SIGNAL_TYPES

    @property
    def placeholder_prefix(self) -> str:
        """Prefix used by template placeholders ($di1$, $ai2$...)."""
        return self.value.lower()


# Raw tokens found in point lists
SIGNAL_TYPE_TOKENS = {
    "DI": SignalType.DI,
    "DO": SignalType.DO,
    "AI": SignalType.AI,
    "AO": SignalType.AO,
    "COM : Modbus RS485": SignalType.COM,
}

# Order in which types are checked and allocated
ALLOCATABLE_SIGNAL_TYPES = (
    SignalType.DI,
    SignalType.AI,
    SignalType.DO,
    SignalType.AO,
)


def parse_signal_type(token: str) -> Optional[SignalType]:
    """
    Map a raw point-list token to a SignalType.

    Args:
        token: Raw value of the signal type column (e.g. "DI", "COM : Modbus RS485")

    Returns:
        SignalType or None if the token is not recognized
    """
    if not isinstance(token, str):
        return None
    return SIGNAL_TYPE_TOKENS.get(token)


@dataclass(frozen=True)
class Point:
    """A single electrical I/O point."""

    equipment_name: str             # e.g. "PUMP1"
    point_name: str                 # e.g. "RUN"
    signal_type: SignalType

    # Derived, never supplied by the caller
    display_name: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "display_name", f"{self.equipment_name} - {self.point_name}"
        )
