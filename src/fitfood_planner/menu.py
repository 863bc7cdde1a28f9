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
"""Per-day price and nutrition totals for a weekly menu."""

import logging
import math
from collections.abc import Iterator, Mapping, Sequence

from fitfood_planner.models import AdditionalFood, DayTotal, Product, TopUp
from fitfood_planner.scraper import CURRENCY

logger = logging.getLogger(__name__)


def aggregate_day(
    catalog: Mapping[str, Product], day: str, product_ids: Sequence[int | str]
) -> DayTotal:
    """Sum price and macros for one day's products.

    Args:
        catalog: Mapping of product id to product.
        day: Day name, used for reporting.
        product_ids: Ids of the day's products, in serving order.

    Returns:
        The day's totals.

    Raises:
        KeyError: If an id is not in the catalog.
    """
    total = DayTotal(day=day)
    for product_id in product_ids:
        product = catalog.get(str(product_id))
        if product is None:
            raise KeyError(f"Product {product_id} on {day} is not in the catalog")
        total.menu.append(product.name)
        total.price += product.price
        total.macro += product.macro
    return total


def aggregate_menu(
    catalog: Mapping[str, Product], menu: Mapping[str, Sequence[int | str]]
) -> Iterator[DayTotal]:
    """Yield the totals of each day in menu order."""
    for day, product_ids in menu.items():
        yield aggregate_day(catalog, day, product_ids)


def format_day_total(total: DayTotal) -> str:
    """Render a day's totals as a single report line."""
    return (
        f"On {total.day} the menu is: {', '.join(total.menu)} - "
        f"{total.price:.2f} {CURRENCY}: {total.macro.model_dump_json()}."
    )


def compare_to_target(
    total: DayTotal, daily_kcal: float | None = None, daily_proteins: float | None = None
) -> list[str]:
    """Compare a day's kcal and proteins against daily targets.

    Each line reads ``<field>: <target>(<signed difference>) = <value>``.
    Targets left as None are skipped.
    """
    lines = []
    for field, target in (("kcal", daily_kcal), ("proteins", daily_proteins)):
        if target is None:
            continue
        value = getattr(total.macro, field)
        lines.append(f"{field}: {target:g}({value - target:+g}) = {value:g}")
    return lines


def suggest_additional_food(
    total: DayTotal,
    daily_kcal: float,
    foods: Sequence[AdditionalFood],
    weights: Sequence[float] | None = None,
) -> TopUp:
    """Suggest extra food to close a day's calorie shortfall.

    The shortfall is split across ``foods`` by ``weights`` (equal shares when
    omitted) and each food is scaled to supply its share of kcal. Nothing is
    added when the day already reaches the target.

    Args:
        total: The day's menu totals.
        daily_kcal: Daily calorie target.
        foods: Foods to top up with, each with its kcal and proteins.
        weights: Share of the shortfall taken by each food.

    Returns:
        The scaled foods and the day's kcal and proteins including them.

    Raises:
        ValueError: If ``weights`` and ``foods`` differ in length.
    """
    if weights is None:
        weights = [1 / len(foods)] * len(foods) if foods else []
    if len(weights) != len(foods):
        raise ValueError(f"Got {len(weights)} weights for {len(foods)} foods")

    kcal = total.macro.kcal
    proteins = total.macro.proteins
    if math.isnan(kcal):
        logger.warning("No calorie total for %s, skipping additional food", total.day)

    missing = daily_kcal - kcal
    added = []
    if missing > 0:
        for food, weight in zip(foods, weights):
            extra = food.scale(weight * missing / food.kcal)
            logger.debug("Adding %s g of %s on %s", extra.grams, extra.name, total.day)
            added.append(extra)
            kcal += extra.kcal
            proteins += extra.proteins

    return TopUp(
        day=total.day, target_kcal=daily_kcal, foods=added, kcal=kcal, proteins=proteins
    )


def format_top_up(top_up: TopUp) -> list[str]:
    """Render a top-up suggestion as report lines."""
    if not top_up.foods:
        return ["no additional food needed"]
    lines = [
        f"add {food.name}: {food.grams:g} g, {food.kcal:g} kcal, {food.proteins:g} g proteins"
        for food in top_up.foods
    ]
    lines.append(
        f"with additional food: kcal: {top_up.target_kcal:g}"
        f"({top_up.kcal - top_up.target_kcal:+g}) = {top_up.kcal:g}, "
        f"proteins: {top_up.proteins:g}"
    )
    return lines
