"""Warnings and results of a schema generation run."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .card import CardInstance
from .point import Point, SignalType


@dataclass
class GenerationWarning:
    """Non-fatal condition recorded during generation."""
    message: str
    card_id: Optional[str] = None

    @property
    def code(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return self.message


@dataclass
class UnknownModuleWarning(GenerationWarning):
    """A selected card id is not in the catalog."""


@dataclass
class MissingTemplatePageWarning(GenerationWarning):
    """A card (or its overview page) has no page in the template."""


@dataclass
class OverviewSlotsExhaustedWarning(GenerationWarning):
    """More card glyphs than overview slots; the extra glyphs were dropped."""
    dropped: List[str] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Output of a complete generation run."""
    document: bytes
    cards: List[CardInstance]
    points_by_type: Dict[SignalType, List[Point]]
    warnings: List[GenerationWarning] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return self.document.count(b"<diagram ")

    def point_counts(self) -> Dict[str, int]:
        return {t.value: len(points) for t, points in self.points_by_type.items()}

    def write_to(self, output_path: str) -> Path:
        """Write the document to disk and return the path."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.document)
        return path
