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
"""Fill the FitFoodWay basket with a weekly menu."""

import asyncio
import datetime
import logging
from collections.abc import Iterator, Mapping, Sequence

import httpx

from fitfood_planner.scraper import new_client, site_url

logger = logging.getLogger(__name__)

ADD_TO_CART_URL = site_url("comanda", "adauga_in_cos")
ADD_CODE_URL = site_url("cos", "adauga_cod")

DEFAULT_CODE = "WELCOME"
PRODUCT_TYPE = "produs"

# The site only delivers on weekdays
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


def basket_dates(
    menu: Mapping[str, Sequence[int | str]], days: int, start: datetime.date
) -> Iterator[tuple[datetime.date, Sequence[int | str]]]:
    """Walk the calendar from ``start`` and pair delivery dates with products.

    A date is used when its weekday has entries in the menu. Walking stops
    once ``days`` dates have been yielded.

    Args:
        menu: Mapping of day name to product ids.
        days: Number of delivery dates to produce.
        start: First calendar date to consider.

    Yields:
        Tuples of (date, product ids).
    """
    if not any(menu.get(weekday) for weekday in WEEKDAYS):
        return
    date = start
    while days > 0:
        weekday = date.weekday()
        to_add = menu.get(WEEKDAYS[weekday]) if weekday < len(WEEKDAYS) else None
        if to_add:
            yield date, to_add
            days -= 1
        date += datetime.timedelta(days=1)


class BasketFiller:
    """Adds menu products to the basket and applies a discount code.

    Requests are best effort: a failed POST is logged and the run carries on.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self.client = client or new_client()

    async def __aenter__(self) -> "BasketFiller":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def post(self, url: str, data: dict[str, str], err_message: str) -> httpx.Response | None:
        """POST a form and log failures instead of raising them.

        Args:
            url: Endpoint URL.
            data: Form fields, sent as application/x-www-form-urlencoded.
            err_message: Message logged when the request fails.

        Returns:
            The response, or None if the request failed.
        """
        try:
            response = await self.client.post(url, data=data)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("%s %s", err_message, e)
            return None
        return response

    async def add_product(
        self, date: datetime.date, product_id: int | str, product_type: str = PRODUCT_TYPE
    ) -> httpx.Response | None:
        """Add one product to the basket for a delivery date."""
        day = date.isoformat()
        return await self.post(
            ADD_TO_CART_URL,
            {"tip_id": str(product_id), "tip": product_type, "date": day},
            f"Failed sending request for type:{product_type}, id:{product_id}, date:{day}.",
        )

    async def add_discount_code(self, code: str = DEFAULT_CODE) -> httpx.Response | None:
        """Apply a discount code to the basket."""
        return await self.post(
            ADD_CODE_URL,
            {"cod_reducere": code},
            f'Failed applying off code "{code}".',
        )

    async def fill_basket(
        self,
        menu: Mapping[str, Sequence[int | str]],
        days: int,
        start: datetime.date | None = None,
        code: str = DEFAULT_CODE,
    ) -> None:
        """Add the menu to the basket for ``days`` delivery dates.

        Args:
            menu: Mapping of day name to product ids.
            days: Number of delivery dates to fill.
            start: First date to consider. Defaults to today.
            code: Discount code applied once the basket is filled.
        """
        product_count = sum(len(menu.get(weekday) or ()) for weekday in WEEKDAYS)
        if product_count < 1:
            logger.warning("Empty product list, nothing to add.")
            return

        logger.info("Filling basket.")
        for date, to_add in basket_dates(menu, days, start or datetime.date.today()):
            await asyncio.gather(*(self.add_product(date, product_id) for product_id in to_add))
            logger.info("Added %s on %s.", ", ".join(map(str, to_add)), date.isoformat())
        logger.info("Basket filled.")

        logger.info("Adding off code.")
        await self.add_discount_code(code)
