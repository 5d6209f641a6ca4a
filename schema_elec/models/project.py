"""Project metadata stamped into the generated schema."""

from datetime import date
from typing import Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DATE_FORMAT = "%d/%m/%Y"


def today_string() -> str:
    """Current date in the title-block format (dd/mm/YYYY)."""
    return date.today().strftime(DATE_FORMAT)


class ProjectParams(BaseModel):
    """
    Project parameters for the title block of every page.

    Accepts the field names as well as the keys sent by the web form
    (``auteur``, ``nomSite``...) and the French display labels.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    author: str = Field(
        "", validation_alias=AliasChoices("author", "auteur", "Auteur")
    )
    site_name: str = Field(
        "", validation_alias=AliasChoices("site_name", "nomSite", "Nom du site", "nomProjet")
    )
    cabinet_name: str = Field(
        "", validation_alias=AliasChoices("cabinet_name", "nomArmoire", "Nom armoire")
    )
    edition_date: str = Field(
        default_factory=today_string,
        validation_alias=AliasChoices("edition_date", "dateEdition", "Date dernière édition"),
    )
    revision_index: str = Field(
        "", validation_alias=AliasChoices("revision_index", "indice", "Indice")
    )

    @field_validator("author", "site_name", "cabinet_name", "revision_index", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        if v is None:
            return ""
        return str(v)

    @field_validator("edition_date", mode="before")
    @classmethod
    def default_edition_date(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return today_string()
        if isinstance(v, date):
            return v.strftime(DATE_FORMAT)
        return str(v)

    def values(self) -> Dict[str, str]:
        """Parameter values keyed by field name."""
        return self.model_dump()
