# ==============================================================================
#  Copyright 2025 Matthew Pounsett <matt@conundrum.com>
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# ==============================================================================
"""CLI entry point for the FitFoodWay menu planner."""

import argparse
import asyncio
import datetime
import logging
import sys

import yaml
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from fitfood_planner import __version__
from fitfood_planner.basket import DEFAULT_CODE, BasketFiller
from fitfood_planner.config import ADDITIONAL_FOOD, DEFAULT_MENU, load_menu
from fitfood_planner.menu import (
    aggregate_menu,
    compare_to_target,
    format_day_total,
    format_top_up,
    suggest_additional_food,
)
from fitfood_planner.models import DayTotal, Product
from fitfood_planner.scraper import CURRENCY, FitFoodScraper, new_client

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="fitfood-planner",
        description=(
            "Compute daily price and nutrition totals for a FitFoodWay weekly menu "
            "and optionally fill the basket with it."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-m",
        "--menu",
        metavar="FILE",
        help="YAML file mapping day names to lists of product ids.",
    )
    parser.add_argument(
        "--off",
        type=float,
        default=0,
        metavar="PERCENT",
        help="Percentage discount applied to every price (0-100).",
    )
    parser.add_argument(
        "-p",
        "--print",
        action="store_true",
        dest="print_table",
        help="Print a table of the product catalog to stdout.",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output YAML file path for the daily totals. Use '-' for stdout.",
    )
    parser.add_argument(
        "--daily-kcal",
        type=float,
        metavar="KCAL",
        help="Daily calorie target. Days below it get additional food suggested.",
    )
    parser.add_argument(
        "--daily-proteins",
        type=float,
        metavar="GRAMS",
        help="Daily protein target to compare each day against.",
    )
    parser.add_argument(
        "--fill-basket",
        action="store_true",
        help="Add the menu to the basket and apply a discount code.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=5,
        help="Number of delivery days to fill (default: %(default)s).",
    )
    parser.add_argument(
        "--start-date",
        type=datetime.date.fromisoformat,
        metavar="YYYY-MM-DD",
        help="First date to fill the basket for (default: today).",
    )
    parser.add_argument(
        "--code",
        default=DEFAULT_CODE,
        help="Discount code applied after filling the basket (default: %(default)s).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity. Use -vv for debug output.",
    )

    return parser.parse_args(args)


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: Verbosity level (0=warning, 1=info, 2+=debug).
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def print_catalog_table(catalog: dict[str, Product], console: Console) -> None:
    """Print a Rich table of the product catalog.

    Args:
        catalog: Mapping of product id to product.
        console: Rich console for output.
    """
    table = Table(title="FitFoodWay Products")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="green")
    table.add_column(f"Price ({CURRENCY})", style="yellow", justify="right")
    table.add_column("Grams", justify="right")
    table.add_column("Kcal", justify="right")
    table.add_column("Carbs", justify="right")
    table.add_column("Fats", justify="right")
    table.add_column("Proteins", justify="right")
    table.add_column("Fibers", justify="right")

    for product in catalog.values():
        macro = product.macro
        table.add_row(
            product.id,
            product.name,
            f"{product.price:.2f}",
            *(
                f"{value:g}"
                for value in (
                    macro.grams,
                    macro.kcal,
                    macro.carbohydrates,
                    macro.fats,
                    macro.proteins,
                    macro.fibers,
                )
            ),
        )

    console.print(table)


def output_yaml(totals: list[DayTotal], output_path: str) -> None:
    """Output daily totals as YAML.

    Args:
        totals: Daily totals in menu order.
        output_path: File path or '-' for stdout.
    """
    data = [total.model_dump() for total in totals]

    if output_path == "-":
        yaml.dump(data, sys.stdout, default_flow_style=False, sort_keys=False, allow_unicode=True)
    else:
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        logger.info("Output written to: %s", output_path)


async def run(parsed_args: argparse.Namespace, menu: dict, console: Console) -> None:
    """Fetch the catalog, report the menu and optionally fill the basket."""
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
    )

    async with new_client() as client:
        scraper = FitFoodScraper(client=client)
        with progress:
            task = progress.add_task("Fetching product catalog...", total=1)
            catalog = await scraper.get_catalog(off=parsed_args.off)
            progress.update(task, completed=1)

        if parsed_args.print_table:
            print_catalog_table(catalog, console)

        totals = []
        for total in aggregate_menu(catalog, menu):
            console.print(
                format_day_total(total), markup=False, highlight=False, soft_wrap=True
            )
            for line in compare_to_target(
                total, parsed_args.daily_kcal, parsed_args.daily_proteins
            ):
                console.print(f"  {line}", markup=False, highlight=False, soft_wrap=True)
            if parsed_args.daily_kcal is not None:
                top_up = suggest_additional_food(
                    total, parsed_args.daily_kcal, ADDITIONAL_FOOD
                )
                for line in format_top_up(top_up):
                    console.print(f"  {line}", markup=False, highlight=False, soft_wrap=True)
            totals.append(total)

        if parsed_args.output:
            output_yaml(totals, parsed_args.output)

        if parsed_args.fill_basket:
            basket = BasketFiller(client=client)
            await basket.fill_basket(
                menu, parsed_args.days, parsed_args.start_date, parsed_args.code
            )


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parsed_args = parse_args(args)
    setup_logging(parsed_args.verbose)

    if not 0 <= parsed_args.off <= 100:
        logger.error("Discount must be between 0 and 100, got %s.", parsed_args.off)
        return 1
    if parsed_args.days < 0:
        logger.error("Number of days cannot be negative, got %s.", parsed_args.days)
        return 1

    menu = load_menu(parsed_args.menu) if parsed_args.menu else DEFAULT_MENU

    asyncio.run(run(parsed_args, menu, Console()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
