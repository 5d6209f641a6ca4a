"""Generator configuration loaded from YAML."""

import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_ENV_VAR = "SCHEMA_ELEC_CONFIG"

PACKAGE_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "config" / "generator.yaml"
DEFAULT_TEMPLATE_PATH = PACKAGE_DIR / "templates" / "modele_http.drawio"


class ConfigError(Exception):
    """Exception raised for unreadable or invalid configuration."""
    pass


class GeneratorConfig(BaseModel):
    """Settings of the schema generator."""

    # Sources
    template_path: Optional[str] = None
    catalog_path: Optional[str] = None
    output_filename: str = "schema_elec_auto.drawio"

    # Overview (synoptic) page
    overview_page_prefix: str = "synoptique_"
    overview_slots_x: List[int] = Field(
        default_factory=lambda: [530, 592, 654, 715, 777, 839, 901, 962, 1024, 1086]
    )
    overview_slot_y: int = 140
    glyph_width: float = 62.14
    glyph_height: float = 290

    # Placeholders
    unused_marker: str = "Libre"
    metadata_tokens: Dict[str, str] = Field(
        default_factory=lambda: {
            "author": "$Auteur$",
            "site_name": "$Nom du site$",
            "cabinet_name": "$Nom armoire$",
            "edition_date": "$__/__/____$",
            "revision_index": "$A$",
        }
    )

    @field_validator("metadata_tokens")
    @classmethod
    def check_metadata_tokens(cls, v: Dict[str, str]) -> Dict[str, str]:
        known = {"author", "site_name", "cabinet_name", "edition_date", "revision_index"}
        unknown = set(v) - known
        if unknown:
            raise ValueError(f"unknown metadata fields: {', '.join(sorted(unknown))}")
        return v

    @property
    def resolved_template_path(self) -> Path:
        return Path(self.template_path) if self.template_path else DEFAULT_TEMPLATE_PATH


def load_config(path: Optional[str] = None) -> GeneratorConfig:
    """
    Load the generator configuration.

    Lookup order: explicit path, the SCHEMA_ELEC_CONFIG environment
    variable, then the bundled config/generator.yaml.

    Args:
        path: Optional path to a YAML configuration file

    Returns:
        GeneratorConfig

    Raises:
        ConfigError: If an explicitly requested file is missing or any file is invalid
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    config_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return GeneratorConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return GeneratorConfig(**data)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
