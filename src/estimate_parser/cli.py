#!/usr/bin/env python3
"""
Command line interface for the estimate response parser.
"""

import json
import logging
import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import PipelineConfig, MIN_SHARED_WORD_LENGTH
from .models import CatalogMaterial, EstimateResult
from .pipeline import EstimatePipeline
from .prompt import build_user_prompt, estimate_title

logger = logging.getLogger(__name__)

console = Console()


def load_catalog(path: Optional[str]) -> List[CatalogMaterial]:
    """
    Load saved materials from a JSON file.

    The file holds either a list of materials or an object with a
    ``materials`` list. Raises ValueError for anything else.
    """
    if not path:
        return []

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Catalog file is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get('materials')
    if not isinstance(data, list):
        raise ValueError("Catalog must be a list of materials or an object with a 'materials' list")

    return [CatalogMaterial.from_dict(entry) for entry in data]


def render_table(result: EstimateResult, title: str) -> Table:
    table = Table(title=escape(title))
    table.add_column("Description")
    table.add_column("Qty", justify="right")
    table.add_column("Unit Price", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Notes", style="dim")

    for item in result.line_items:
        table.add_row(
            escape(item.description),
            f"{item.quantity:g}",
            f"${item.unit_price:,.2f}",
            f"${item.total:,.2f}",
            escape(item.notes),
        )
    table.add_row("[bold]Total[/bold]", "", "", f"[bold]${result.total_price:,.2f}[/bold]", "")
    return table


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def cli(verbose: bool):
    """Normalize generated estimate text into priced line items."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


@cli.command()
@click.argument('response_file', type=click.File('r', encoding='utf-8'))
@click.option('--catalog', '-c', 'catalog_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON file with saved materials')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output JSON file path')
@click.option('--table', 'as_table', is_flag=True, help='Print a table instead of JSON')
@click.option('--job-type', help='Job type used in the estimate title')
@click.option('--min-word-length', type=click.IntRange(min=1), default=MIN_SHARED_WORD_LENGTH,
              show_default=True, help='Shortest shared word that counts as a catalog match')
def parse(response_file, catalog_path: Optional[str], output: Optional[str],
          as_table: bool, job_type: Optional[str], min_word_length: int):
    """Parse generator output in RESPONSE_FILE ('-' for stdin)."""
    try:
        catalog = load_catalog(catalog_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    raw = response_file.read()
    logger.info(f"Read {len(raw)} characters of generator output")

    pipeline = EstimatePipeline(PipelineConfig(min_shared_word_length=min_word_length))
    result = pipeline.build_estimate(raw, catalog)

    payload = {"title": estimate_title(job_type)}
    payload.update(result.to_dict())
    json_str = json.dumps(payload, indent=2, ensure_ascii=False)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(json_str)
        logger.info(f"Results saved to: {output}")

    if as_table:
        console.print(render_table(result, payload["title"]))
    elif not output:
        click.echo(json_str)


@cli.command()
@click.argument('job_description')
@click.option('--catalog', '-c', 'catalog_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON file with saved materials')
@click.option('--job-type', help='Job type sent with the description')
def prompt(job_description: str, catalog_path: Optional[str], job_type: Optional[str]):
    """Print the generator prompt for JOB_DESCRIPTION, enriched with saved materials."""
    try:
        catalog = load_catalog(catalog_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(build_user_prompt(job_description, catalog, job_type))


if __name__ == "__main__":
    cli()
