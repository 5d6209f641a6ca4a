"""Command-line interface for the electrical wiring schema generator."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from .. import __version__

console = Console()


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(message: str):
    console.print(f"[red]✗ {message}[/red]")
    sys.exit(1)


def _load_generator(template, config):
    from ..settings import load_config
    from ..drawing import SchemaGenerator, TemplateRepository

    generator_config = load_config(config)
    templates = TemplateRepository(template) if template else None
    return SchemaGenerator(templates=templates, config=generator_config)


def _load_catalog(config):
    from ..settings import load_config, ConfigError
    from ..engine import load_card_catalog

    try:
        return load_card_catalog(load_config(config).catalog_path)
    except ConfigError as e:
        _fail(str(e))


def _print_cards(cards, title="Allocation"):
    from ..models import ALLOCATABLE_SIGNAL_TYPES

    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Card", style="cyan")
    table.add_column("Page")
    for signal_type in ALLOCATABLE_SIGNAL_TYPES:
        table.add_column(signal_type.value, justify="right")
    table.add_column("Spare", justify="right")
    table.add_column("Util %", justify="right")

    for card in cards:
        row = [str(card.position), card.spec.display_name, card.page_name]
        for signal_type in ALLOCATABLE_SIGNAL_TYPES:
            capacity = card.spec.capacity.for_type(signal_type)
            row.append(f"{len(card.points(signal_type))}/{capacity}" if capacity else "-")
        row.append(str(card.spare_channels))
        row.append(f"{card.utilization_percent:.0f}%")
        table.add_row(*row)

    console.print(table)


def _print_warnings(warnings):
    if warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  [{warning.code}] {warning.message}")


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Electrical Wiring Schema Generator.

    Generate draw.io wiring schemas from a telemetry point list and a card selection.
    """
    _setup_logging(verbose)


@cli.command()
@click.option(
    "--points", "-p",
    required=True,
    type=click.Path(exists=True),
    help="Path to the point list (.json, .xlsx or .xls)"
)
@click.option(
    "--card", "-c", "card_ids",
    required=True,
    multiple=True,
    help="Selected card id, repeat for several cards (e.g., -c s4w -c s4th_16_di)"
)
@click.option(
    "--template", "-t",
    default=None,
    type=click.Path(exists=True),
    help="Draw.io template file (default: bundled template)"
)
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(),
    help="Output .drawio file path (default: configured output file name)"
)
@click.option("--author", default="", help="Schema author")
@click.option("--site", default="", help="Site name")
@click.option("--cabinet", default="", help="Cabinet name")
@click.option("--date", "edition_date", default="", help="Edition date (default: today, dd/mm/YYYY)")
@click.option("--revision", default="", help="Revision index")
@click.option(
    "--report",
    default=None,
    type=click.Path(),
    help="Also write a PDF allocation report"
)
@click.option(
    "--config",
    default=None,
    type=click.Path(exists=True),
    help="Generator configuration YAML"
)
def generate(points, card_ids, template, output, author, site, cabinet, edition_date, revision, report, config):
    """Generate a wiring schema from a point list."""
    from ..parsers import load_point_records, PointListParseError
    from ..engine import MalformedInputError, CapacityExceededError
    from ..drawing import NoValidCardsError, TemplateError, ReportConfig, generate_allocation_report
    from ..models import ProjectParams
    from ..settings import ConfigError

    console.print(Panel.fit(
        "[bold blue]Electrical Wiring Schema Generator[/bold blue]",
        border_style="blue"
    ))

    params = ProjectParams(
        author=author,
        site_name=site,
        cabinet_name=cabinet,
        edition_date=edition_date,
        revision_index=revision,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Loading point list...", total=None)
        try:
            records = load_point_records(points)
            generator = _load_generator(template, config)

            progress.update(task, description="Generating schema...")
            result = generator.generate(records, card_ids, params)
        except CapacityExceededError as e:
            _fail(f"Insufficient capacity: {e}")
        except (PointListParseError, MalformedInputError, NoValidCardsError, TemplateError, ConfigError) as e:
            _fail(str(e))

    output_path = result.write_to(output or generator.config.output_filename)
    console.print(f"[green]✓ Generated schema:[/green] {output_path} ({result.page_count} pages)")
    console.print("  Points: " + ", ".join(f"{t}={n}" for t, n in result.point_counts().items()))

    _print_cards(result.cards)
    _print_warnings(result.warnings)

    if report:
        generate_allocation_report(result, report, ReportConfig(params=params))
        console.print(f"[green]✓ Allocation report saved to:[/green] {report}")


@cli.command()
@click.option(
    "--catalog",
    default=None,
    type=click.Path(exists=True),
    help="Card catalog YAML (default: configured catalog)"
)
@click.option(
    "--config",
    default=None,
    type=click.Path(exists=True),
    help="Generator configuration YAML"
)
def cards(catalog, config):
    """List the card catalog grouped by brand and category."""
    from ..engine import CardCatalog

    card_catalog = CardCatalog(catalog) if catalog else _load_catalog(config)

    table = Table(title=f"Card Catalog ({len(card_catalog)} cards)")
    table.add_column("Brand", style="magenta")
    table.add_column("Category")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("DI", justify="right")
    table.add_column("AI", justify="right")
    table.add_column("DO", justify="right")
    table.add_column("AO", justify="right")

    for brand, categories in card_catalog.group_by_brand().items():
        for category, specs in categories.items():
            for spec in specs:
                capacity = spec.capacity
                table.add_row(
                    brand, category, spec.id, spec.display_name,
                    str(capacity.di), str(capacity.ai), str(capacity.do), str(capacity.ao),
                )

    console.print(table)


@cli.command()
@click.option(
    "--points", "-p",
    required=True,
    type=click.Path(exists=True),
    help="Path to the point list (.json, .xlsx or .xls)"
)
@click.option(
    "--card", "-c", "card_ids",
    required=True,
    multiple=True,
    help="Selected card id, repeat for several cards"
)
@click.option(
    "--config",
    default=None,
    type=click.Path(exists=True),
    help="Generator configuration YAML"
)
def check(points, card_ids, config):
    """Check that the selected cards can host a point list."""
    from ..parsers import load_point_records, PointListParseError
    from ..engine import (
        MalformedInputError, CapacityExceededError,
        classify_points, count_demand, sequence_cards, summarize_capacity,
        validate_capacity, allocate_points,
    )

    console.print(f"Checking: [cyan]{points}[/cyan]\n")

    catalog = _load_catalog(config)
    try:
        points_by_type = classify_points(load_point_records(points))
    except (PointListParseError, MalformedInputError) as e:
        _fail(str(e))

    counts = Table(title="Point Summary")
    counts.add_column("Type", style="cyan")
    counts.add_column("Count", justify="right")
    counts.add_column("Channels")
    for signal_type, type_points in points_by_type.items():
        counts.add_row(
            signal_type.value, str(len(type_points)),
            "yes" if signal_type.is_allocatable else "no",
        )
    console.print(counts)

    selected, warnings = catalog.resolve(card_ids)
    _print_warnings(warnings)
    if not selected:
        _fail("No valid card selected")

    ordered = sequence_cards(selected, catalog.sequence_precedence)
    demand = count_demand(points_by_type)

    capacity = Table(title="Capacity")
    capacity.add_column("Type", style="cyan")
    capacity.add_column("Points", justify="right")
    capacity.add_column("Channels", justify="right")
    capacity.add_column("Spare", justify="right")
    for signal_type, (demanded, available) in summarize_capacity(demand, ordered).items():
        spare = available - demanded
        style = "red" if spare < 0 else "green"
        capacity.add_row(signal_type.value, str(demanded), str(available), f"[{style}]{spare}[/{style}]")
    console.print(capacity)

    try:
        validate_capacity(demand, ordered)
    except CapacityExceededError as e:
        _fail(f"Insufficient capacity: {e}")

    _print_cards(allocate_points(ordered, points_by_type))
    console.print("\n[green]✓ Card selection can host every point[/green]")


@cli.command("template-info")
@click.option(
    "--template", "-t",
    default=None,
    type=click.Path(),
    help="Draw.io template file (default: configured template)"
)
def template_info(template):
    """Show template file information and pages."""
    from ..drawing import TemplateRepository, TemplateError
    from ..settings import load_config

    path = template or load_config().resolved_template_path
    repository = TemplateRepository(path)

    info = repository.info()
    if info is None:
        _fail(f"Template not found: {path}")

    console.print(f"Template: [cyan]{info.name}[/cyan]")
    console.print(f"  Path: {info.path}")
    console.print(f"  Size: {info.size} bytes")
    console.print(f"  Modified: {info.modified:%d/%m/%Y %H:%M}")

    try:
        names = repository.page_names()
    except TemplateError as e:
        _fail(str(e))

    table = Table(title=f"Pages ({len(names)})")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    for index, name in enumerate(names, start=1):
        table.add_row(str(index), name)
    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
