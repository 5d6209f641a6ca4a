"""Point classifier: normalizes raw point records and groups them by signal type."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from ..models.point import (
    Point,
    SignalType,
    ALLOCATABLE_SIGNAL_TYPES,
    parse_signal_type,
)

logger = logging.getLogger(__name__)


class MalformedInputError(ValueError):
    """Exception raised when the point list is not a well-formed sequence of records."""

    def __init__(self, message: str, record_index: Optional[int] = None, field: Optional[str] = None):
        super().__init__(message)
        self.record_index = record_index
        self.field = field


# Accepted keys for each record field, first present wins
FIELD_ALIASES = {
    "signal_type": ("signalType", "signal_type", "TypePoint"),
    "equipment_name": ("equipmentName", "equipment_name", "NomEquipement"),
    "point_name": ("pointName", "point_name", "NomPoint"),
}


def _get_field(record: Mapping, field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        if key in record:
            return record[key]
    raise KeyError(field)


def _required_text(record: Mapping, field: str, index: int) -> str:
    try:
        value = _get_field(record, field)
    except KeyError:
        raise MalformedInputError(
            f"Record {index}: missing field '{FIELD_ALIASES[field][0]}'",
            record_index=index, field=field
        ) from None
    if value is None:
        raise MalformedInputError(
            f"Record {index}: field '{FIELD_ALIASES[field][0]}' is empty",
            record_index=index, field=field
        )
    return value if isinstance(value, str) else str(value)


def classify_points(raw_points: Sequence[Mapping]) -> Dict[SignalType, List[Point]]:
    """
    Classify raw point records by signal type.

    Records whose signal type is not one of the recognized tokens
    (DI, DO, AI, AO, "COM : Modbus RS485") are dropped. Relative order
    is preserved inside each bucket and the input is left untouched.

    Args:
        raw_points: Sequence of mappings with signal type, equipment name
            and point name fields

    Returns:
        Dictionary mapping every SignalType to its list of Points

    Raises:
        MalformedInputError: If the input is not a sequence of mappings or a
            recognized record lacks a required field
    """
    if isinstance(raw_points, (str, bytes, Mapping)) or not isinstance(raw_points, Sequence):
        raise MalformedInputError(
            f"Point list must be a sequence of records, got {type(raw_points).__name__}"
        )

    grouped: Dict[SignalType, List[Point]] = {t: [] for t in SignalType}
    dropped = 0

    for index, record in enumerate(raw_points):
        if not isinstance(record, Mapping):
            raise MalformedInputError(
                f"Record {index}: expected an object, got {type(record).__name__}",
                record_index=index
            )

        try:
            token = _get_field(record, "signal_type")
        except KeyError:
            raise MalformedInputError(
                f"Record {index}: missing field 'signalType'",
                record_index=index, field="signal_type"
            ) from None

        signal_type = parse_signal_type(token)
        if signal_type is None:
            dropped += 1
            continue

        grouped[signal_type].append(Point(
            equipment_name=_required_text(record, "equipment_name", index),
            point_name=_required_text(record, "point_name", index),
            signal_type=signal_type,
        ))

    logger.info(
        "Classified points: %s (%d dropped)",
        ", ".join(f"{t.value}={len(p)}" for t, p in grouped.items()),
        dropped,
    )
    return grouped


def count_demand(points_by_type: Dict[SignalType, List[Point]]) -> Dict[SignalType, int]:
    """Number of channels needed per allocatable signal type."""
    return {t: len(points_by_type.get(t, [])) for t in ALLOCATABLE_SIGNAL_TYPES}
