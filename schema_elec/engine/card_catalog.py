"""Card catalog loader from YAML specifications."""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

from ..models.card import CardSpec, CardCapacity, CardCategory
from ..models.generation import UnknownModuleWarning

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Exception raised for malformed catalog data."""
    pass


# Processing order of cards after the controller
DEFAULT_SEQUENCE_PRECEDENCE = [
    's4th_8_ai_t',
    's4th_4_ai_t',
    's4th_8_ai_v',
    's4th_4_ai_v',
    's4th_8_ai_ma',
    's4th_4_ai_ma',
    's4th_16_di',
    's4th_8_di',
    's4th_8_do',
    's4th_4_do',
    's4th_8_ao',
    's4th_4_ao',
    'isma_mix38',
    'isma_mix18',
    'isma_8u',
    'isma_8i',
    'isma_4i4o',
    'isma_4o',
]

# Brand listed first in card pickers
PREFERRED_BRAND = "Sofrel"


class CardCatalog:
    """Read-only catalog of card specifications loaded from YAML."""

    def __init__(self, spec_path: Optional[str] = None):
        """
        Initialize the catalog.

        Args:
            spec_path: Path to YAML catalog file. Defaults to config/catalog.yaml
        """
        self.spec_path = spec_path or self._get_default_spec_path()
        self.cards: Dict[str, CardSpec] = {}
        self.sequence_precedence: List[str] = list(DEFAULT_SEQUENCE_PRECEDENCE)
        self._load_specifications()

    @classmethod
    def from_dict(cls, spec: Dict) -> "CardCatalog":
        """Build a catalog from an already parsed YAML structure."""
        catalog = cls.__new__(cls)
        catalog.spec_path = None
        catalog.cards = {}
        catalog.sequence_precedence = list(DEFAULT_SEQUENCE_PRECEDENCE)
        catalog._apply_spec(spec)
        return catalog

    def _get_default_spec_path(self) -> str:
        """Get default path to the bundled catalog."""
        return str(Path(__file__).parent.parent / "config" / "catalog.yaml")

    def _load_specifications(self):
        """Load card specifications from the YAML file."""
        try:
            with open(self.spec_path, 'r', encoding='utf-8') as f:
                spec = yaml.safe_load(f)
        except FileNotFoundError:
            logger.warning("Card catalog not found at %s, catalog is empty", self.spec_path)
            return
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid catalog YAML {self.spec_path}: {e}") from e

        self._apply_spec(spec or {})

    def _apply_spec(self, spec: Dict):
        if 'sequence_precedence' in spec:
            self.sequence_precedence = [str(card_id) for card_id in spec['sequence_precedence'] or []]

        for card in self._parse_cards(spec.get('cards') or []):
            self.cards[card.id] = card

        logger.debug("Loaded %d cards from catalog", len(self.cards))

    def _parse_cards(self, card_list: Iterable[Dict]) -> List[CardSpec]:
        """Parse cards from YAML structure."""
        cards = []

        for card_spec in card_list:
            try:
                card_id = str(card_spec['id'])
                category = CardCategory(card_spec.get('category', 'card'))
            except KeyError as e:
                raise CatalogError(f"Catalog card without {e}: {card_spec}") from e
            except ValueError as e:
                raise CatalogError(f"Card '{card_spec.get('id')}': {e}") from e

            capacity = card_spec.get('capacity') or {}
            glyph = card_spec.get('glyph') or None

            cards.append(CardSpec(
                id=card_id,
                display_name=card_spec.get('display_name', card_id),
                brand=card_spec.get('brand', ''),
                category=category,
                capacity=CardCapacity(
                    di=int(capacity.get('di', 0) or 0),
                    do=int(capacity.get('do', 0) or 0),
                    ai=int(capacity.get('ai', 0) or 0),
                    ao=int(capacity.get('ao', 0) or 0),
                ),
                template_page_id=card_spec.get('template_page', card_id),
                glyph=glyph,
                gui_order=int(card_spec.get('gui_order', 0) or 0),
            ))

        return cards

    def lookup(self, card_id: str) -> Optional[CardSpec]:
        """
        Get the specification of a card.

        Args:
            card_id: Card identifier (e.g., "s4th_16_di")

        Returns:
            CardSpec or None if not in the catalog
        """
        return self.cards.get(card_id)

    def glyph(self, card_id: str) -> str:
        """Base64 SVG glyph of a card, empty string if none."""
        card = self.cards.get(card_id)
        if card is None or not card.glyph:
            return ""
        return card.glyph

    def resolve(self, card_ids: Iterable[str]) -> Tuple[List[CardSpec], List[UnknownModuleWarning]]:
        """
        Look up every selected card id, keeping selection order and duplicates.

        Unknown ids are excluded and reported as warnings.

        Returns:
            Tuple of (resolved specs, warnings)
        """
        resolved = []
        warnings = []

        for card_id in card_ids:
            card = self.lookup(card_id)
            if card is None:
                warning = UnknownModuleWarning(
                    message=f"Card '{card_id}' not found in catalog, ignored",
                    card_id=card_id
                )
                logger.warning(warning.message)
                warnings.append(warning)
                continue
            resolved.append(card)

        return resolved, warnings

    def list_cards(self) -> List[CardSpec]:
        """All cards ordered by GUI order."""
        return sorted(self.cards.values(), key=lambda c: (c.gui_order, c.id))

    def group_by_brand(self) -> Dict[str, Dict[str, List[CardSpec]]]:
        """
        Group cards by brand then category.

        The preferred brand comes first, the others alphabetically.
        """
        groups: Dict[str, Dict[str, List[CardSpec]]] = {}
        for card in self.list_cards():
            brand = card.brand or "Other"
            groups.setdefault(brand, {}).setdefault(card.category.value, []).append(card)

        brands = sorted(groups, key=lambda b: (b.lower() != PREFERRED_BRAND.lower(), b.lower()))
        return {brand: dict(sorted(groups[brand].items())) for brand in brands}

    def __len__(self) -> int:
        return len(self.cards)


# Global catalog instance (singleton pattern)
_catalog_instance: Optional[CardCatalog] = None


def get_card_catalog() -> CardCatalog:
    """Get or create the global CardCatalog instance."""
    global _catalog_instance
    if _catalog_instance is None:
        _catalog_instance = CardCatalog()
    return _catalog_instance


def load_card_catalog(catalog_path: Optional[str] = None) -> CardCatalog:
    """
    Load the catalog at catalog_path, or the shared bundled catalog.

    Args:
        catalog_path: Configured catalog YAML (GeneratorConfig.catalog_path)
    """
    if catalog_path:
        return CardCatalog(catalog_path)
    return get_card_catalog()
