#!/usr/bin/env python3
"""
Command-line interface for LensMatch
"""

import asyncio
import json
import logging
import random

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from lensmatch.collectors.photographer_csv import (
    read_photographer_csv, write_json, write_sql, write_postgres_csv
)
from lensmatch.collectors.supabase_importer import PhotographerImporter
from lensmatch.collectors.zip_csv import convert_zip_csv
from lensmatch.collectors.zip_dataset import ZipDatasetLoader
from lensmatch.core.photographer_filter import filter_profiles
from lensmatch.core.zip_search import ZipSearchEngine
from lensmatch.models.photographer import FilterConfig, PriceRange, ProfileRecord
from lensmatch.models.zipcode import CityAggregate


console = Console()


@click.group()
@click.option('--verbose', is_flag=True, help='Show debug logging')
def cli(verbose):
    """LensMatch photographer marketplace tools"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command('search-zips')
@click.argument('query')
@click.option('--base-url', default=None, help='Where uszips-quick.json and uszips.json are served')
def search_zips(query, base_url):
    """Autocomplete a zip prefix or city name"""

    engine = ZipSearchEngine(ZipDatasetLoader(base_url=base_url))

    async def run():
        await engine.loader.initialize()
        return await engine.search(query)

    with console.status("[bold green]Searching zip database..."):
        results = asyncio.run(run())

    if engine.error:
        console.print(f"[red]{engine.error}[/red]")

    if not results:
        console.print(f"[yellow]No matches for '{query}'[/yellow]")
        return

    table = Table(title=f"Matches for '{query}'")
    table.add_column("Location", style="magenta")
    table.add_column("Zip Codes", style="cyan")
    table.add_column("Population", justify="right", style="green")

    for result in results:
        if isinstance(result, CityAggregate):
            zips = ', '.join(result.all_zips[:5])
            if len(result.all_zips) > 5:
                zips += f" (+{len(result.all_zips) - 5})"
            table.add_row(result.display_name, zips, f"{result.representative_population:,}")
        else:
            table.add_row(result.display_name, result.zip, f"{result.population:,}")

    console.print(table)


@cli.command('validate-zip')
@click.argument('zip_code')
@click.option('--base-url', default=None, help='Where uszips-quick.json and uszips.json are served')
def validate_zip(zip_code, base_url):
    """Look up an exact 5-digit zip code"""

    engine = ZipSearchEngine(ZipDatasetLoader(base_url=base_url))

    async def run():
        await engine.loader.initialize()
        return await engine.validate_zip_code(zip_code)

    with console.status("[bold green]Checking zip code..."):
        record = asyncio.run(run())

    if not record:
        console.print(f"[red]{zip_code} is not a known zip code[/red]")
        raise SystemExit(1)

    info_text = f"""
[bold]{record.zip}[/bold]
Location: {record.city}, {record.state}
Coordinates: {record.latitude:.4f}, {record.longitude:.4f}
Population: {record.population:,}
"""
    console.print(Panel(info_text, title="Zip Code", border_style="blue"))


@cli.command('build-zips')
@click.argument('csv_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--full', 'full_path', default='public/data/uszips.json', help='Full dataset output')
@click.option('--quick', 'quick_path', default='public/data/uszips-quick.json', help='Quick dataset output')
def build_zips(csv_path, full_path, quick_path):
    """Convert a uszips CSV into the full and quick JSON datasets"""

    with console.status("[bold green]Converting zip CSV..."):
        summary = convert_zip_csv(csv_path, full_path, quick_path)

    console.print("[green]✓[/green] Conversion complete")
    console.print(f"   - Full database: {summary['full']:,} zip codes ({summary['full_bytes'] / 1024 / 1024:.2f} MB)")
    console.print(f"   - Quick database: {summary['quick']:,} major zip codes ({summary['quick_bytes'] / 1024:.2f} KB)")


@cli.command('convert-photographers')
@click.argument('csv_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'json_path', default='photographers-data.json', help='JSON output file')
@click.option('--sql', 'sql_path', default='photographers-insert.sql', help='SQL INSERT output file')
@click.option('--csv', 'export_csv', default=None, help='Also write a Postgres-importable CSV')
@click.option('--seed', default=None, type=int, help='Seed for the demo listing values')
@click.option('--upload', is_flag=True, help='Upsert the rows into Supabase')
@click.option('--batch-size', default=50, help='Rows per upsert batch')
def convert_photographers(csv_path, json_path, sql_path, export_csv, seed, upload, batch_size):
    """Turn the photographer contact CSV into preview profiles"""

    photographers = read_photographer_csv(csv_path, random.Random(seed))

    if not photographers:
        console.print("[red]No photographers with an email address found[/red]")
        return

    write_json(photographers, json_path)
    write_sql(photographers, sql_path)
    console.print(f"[green]✓[/green] Converted {len(photographers)} photographers")
    console.print(f"   - JSON: {json_path}")
    console.print(f"   - SQL: {sql_path}")

    if export_csv:
        write_postgres_csv(photographers, export_csv)
        console.print(f"   - CSV: {export_csv}")

    if upload:
        importer = PhotographerImporter()
        with console.status("[bold green]Importing into Supabase..."):
            summary = importer.upsert(photographers, batch_size=batch_size)

        table = Table(title="Import Summary")
        table.add_column("Total", justify="right")
        table.add_column("Imported", justify="right", style="green")
        table.add_column("Errors", justify="right", style="red")
        table.add_row(str(summary.total), str(summary.imported), str(summary.failed))
        console.print(table)
        console.print(f"Rows now in {importer.table}: {importer.count():,}")


def parse_price(ctx, param, value):
    try:
        return PriceRange.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@cli.command()
@click.argument('profiles_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--rating', default=None, type=float, help='Minimum average rating')
@click.option('--price', default='all', callback=parse_price, help="Price range tag, e.g. '150-300' or '500+'")
@click.option('--specialty', 'specialties', multiple=True, help='Specialty (repeatable, any match)')
@click.option('--language', 'languages', multiple=True, help='Language (repeatable, any match)')
@click.option('--location', default=None, help='City or state text')
@click.option('--top', default=20, help='Number of results to show')
def browse(profiles_path, rating, price, specialties, languages, location, top):
    """Filter a JSON file of photographer listings"""

    with open(profiles_path) as f:
        rows = json.load(f)

    profiles = []
    for index, row in enumerate(rows):
        row.setdefault('id', str(index + 1))
        profiles.append(ProfileRecord.from_row(row))

    config = FilterConfig(
        min_rating=rating,
        price_range=price,
        specialties=frozenset(specialties),
        languages=frozenset(languages),
        location=location or None,
    )
    if config.is_empty:
        console.print("[dim]No filters given, showing every listing[/dim]")

    filtered = filter_profiles(profiles, config)

    if not filtered:
        console.print("[red]No photographers match these filters[/red]")
        return

    title = f"{len(filtered)} of {len(profiles)} photographers ({config.active_count} filters)"
    if config.price_range:
        title += f", {config.price_range.label}"

    table = Table(title=title)
    table.add_column("Name", style="magenta")
    table.add_column("Location")
    table.add_column("Rate", justify="right", style="green")
    table.add_column("Rating", justify="right")
    table.add_column("Specialties")

    for p in filtered[:top]:
        table.add_row(
            p.display_name[:40],
            ', '.join(part for part in (p.location_city, p.location_state) if part) or "N/A",
            f"${p.hourly_rate:,.0f}/hr",
            f"{p.average_rating:.1f} ({p.total_reviews})",
            ', '.join(p.specialties[:3])
        )

    console.print(table)


if __name__ == '__main__':
    cli()
