"""Shared fixtures: a small card catalog and a small draw.io template."""

import xml.etree.ElementTree as ET

import pytest
import yaml

from schema_elec.engine import CardCatalog
from schema_elec.drawing import SchemaGenerator, TemplateRepository
from schema_elec.settings import GeneratorConfig

GLYPH_A = "PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciLz4="
GLYPH_B = "PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciPjxyZWN0Lz48L3N2Zz4="

CATALOG_YAML = f"""
cards:
  - id: ctrl
    display_name: Controller
    brand: Sofrel
    category: controller
    capacity: {{di: 0, do: 0, ai: 0, ao: 0}}
    gui_order: 1
  - id: di2
    display_name: DI 2
    brand: Sofrel
    category: card
    capacity: {{di: 2}}
    gui_order: 2
    glyph: {GLYPH_A}
  - id: di4
    display_name: DI 4
    brand: Sofrel
    category: card
    capacity: {{di: 4}}
    gui_order: 3
    glyph: |
      {GLYPH_B[:20]}
      {GLYPH_B[20:]}
  - id: ai3
    display_name: AI 3
    brand: Sofrel
    category: card
    capacity: {{ai: 3}}
    gui_order: 4
    glyph: {GLYPH_A}
  - id: bare
    display_name: Card without glyph
    brand: Sofrel
    category: card
    capacity: {{do: 1}}
    gui_order: 5
  - id: mix
    display_name: Mixed extension
    brand: Acme
    category: extension
    capacity: {{di: 2, do: 2, ai: 2, ao: 2}}
    gui_order: 6
  - id: nopage
    display_name: Card without template page
    brand: Acme
    category: extension
    capacity: {{ao: 1}}
    gui_order: 7
sequence_precedence:
  - ai3
  - di2
  - di4
  - bare
  - mix
"""


def _cell(cell_id, value):
    return f'<mxCell id="{cell_id}" value="{value}" vertex="1" parent="1"/>'


def _page(name, *cells):
    return (
        f'<diagram id="tpl_{name}" name="{name}"><mxGraphModel><root>'
        '<mxCell id="0"/><mxCell id="1" parent="0"/>'
        + "".join(cells)
        + "</root></mxGraphModel></diagram>"
    )


TEMPLATE_XML = (
    "<mxfile>"
    + _page("Sommaire", _cell("toc", "Table of contents"))
    + _page("synoptique_ctrl", _cell("syn-cab", "Cabinet $Nom armoire$"))
    + _page("ctrl", _cell("ctrl-author", "$Auteur$"))
    + _page(
        "di2",
        _cell("di2-1", "$di1$"),
        '<object label="$di2$" id="di2-2"><mxCell vertex="1" parent="1"/></object>',
        _cell("di2-site", "Site: $Nom du site$"),
        _cell("di2-date", "$__/__/____$"),
        _cell("di2-rev", "Rev $A$"),
        _cell("di2-text", "Price $5"),
    )
    + _page("di4", *[_cell(f"di4-{n}", f"$di{n}$") for n in range(1, 5)])
    + _page("ai3", *[_cell(f"ai3-{n}", f"$ai{n}$") for n in range(1, 4)])
    + _page("bare", _cell("bare-1", "$do1$"))
    + _page(
        "mix",
        *[_cell(f"mix-{t}{n}", f"${t}{n}$") for t in ("di", "do", "ai", "ao") for n in (1, 2)]
    )
    + "</mxfile>"
)


def make_records(signal_type, count, equipment="EQ"):
    """Raw point records named EQ1 - P1, EQ2 - P2..."""
    return [
        {"signalType": signal_type, "equipmentName": f"{equipment}{n}", "pointName": f"P{n}"}
        for n in range(1, count + 1)
    ]


def diagrams(document):
    """Parse generated bytes into a list of <diagram> elements."""
    return ET.fromstring(document).findall("diagram")


def labels(page):
    """All mxCell values and object labels of a page, by node id."""
    found = {}
    for node in page.iter("mxCell"):
        if node.get("value") is not None:
            found[node.get("id")] = node.get("value")
    for node in page.iter("object"):
        found[node.get("id")] = node.get("label")
    return found


@pytest.fixture
def catalog():
    return CardCatalog.from_dict(yaml.safe_load(CATALOG_YAML))


@pytest.fixture
def config():
    return GeneratorConfig()


@pytest.fixture
def template_path(tmp_path):
    path = tmp_path / "template.drawio"
    path.write_text(TEMPLATE_XML, encoding="utf-8")
    return path


@pytest.fixture
def templates(template_path):
    return TemplateRepository(template_path)


@pytest.fixture
def generator(catalog, templates, config):
    return SchemaGenerator(catalog=catalog, templates=templates, config=config)
