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
"""FitFoodWay website scraper using HTTPX and BeautifulSoup."""

import asyncio
import logging

import httpx
from bs4 import BeautifulSoup
from furl import furl

from fitfood_planner.extraction import ExtractionStrategy, FitFoodExtractor
from fitfood_planner.models import Product

logger = logging.getLogger(__name__)

FITFOOD_BASE_URL = "https://fitfoodway.ro"
LISTING_PATH = "produse"
PRODUCT_PATH = "p"

CURRENCY = "Lei"

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def site_url(*segments: str) -> str:
    """Build an absolute fitfoodway.ro URL from path segments.

    Segments are taken as already URL-encoded, the way slugs appear in the
    listing page links.
    """
    return furl(FITFOOD_BASE_URL).add(path="/".join(segments)).url


def new_client() -> httpx.AsyncClient:
    """Create the HTTPX client shared by the scraper and the basket filler."""
    return httpx.AsyncClient(
        timeout=None,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def format_product(product: Product) -> str:
    """Render a catalog entry as a single log line."""
    return (
        f"{product.id} - {product.name}: {product.price:.2f} {CURRENCY} => "
        f"{product.macro.model_dump_json()}"
    )


class FitFoodScraper:
    """Scraper for the FitFoodWay product catalog."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        extractor: ExtractionStrategy | None = None,
    ) -> None:
        """Initialize the scraper.

        Args:
            client: HTTPX client to use. A new one is created when omitted.
            extractor: Page parsing strategy. Defaults to the positional
                fitfoodway.ro extractor.
        """
        self.client = client or new_client()
        self.extractor = extractor or FitFoodExtractor()

    async def __aenter__(self) -> "FitFoodScraper":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close the client."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client."""
        await self.client.aclose()

    async def fetch_document(self, url: str) -> BeautifulSoup:
        """Fetch a page and parse it.

        Args:
            url: Page URL.

        Returns:
            The parsed document.

        Raises:
            httpx.HTTPError: On network failure or a non-success status.
        """
        logger.debug("Fetching %s", url)
        response = await self.client.get(url)
        response.raise_for_status()
        return BeautifulSoup(response.text, "html.parser")

    async def get_name_to_id(self) -> dict[str, str]:
        """Index the product listing page.

        Returns:
            Mapping of name slug to product id.
        """
        soup = await self.fetch_document(site_url(LISTING_PATH))
        return self.extractor.parse_listing(soup)

    async def get_product(self, name: str, product_id: str, off: float = 0) -> Product:
        """Fetch and extract one product.

        Args:
            name: Name slug of the product page.
            product_id: Product id from the listing page.
            off: Percentage discount applied to the price.

        Returns:
            The extracted product.
        """
        soup = await self.fetch_document(site_url(PRODUCT_PATH, name))
        return self.extractor.parse_product(soup, product_id, off)

    async def get_catalog(self, off: float = 0) -> dict[str, Product]:
        """Fetch every product on the listing page.

        All detail pages are requested concurrently. If any request or
        extraction fails the whole call fails and nothing is returned.

        Args:
            off: Percentage discount applied to every price.

        Returns:
            Mapping of product id to product.
        """
        logger.info("Getting information from all products.")
        name_to_id = await self.get_name_to_id()

        products = await asyncio.gather(
            *(self.get_product(name, product_id, off) for name, product_id in name_to_id.items())
        )
        catalog = {product.id: product for product in products}

        for product in catalog.values():
            logger.info("%s", format_product(product))
        return catalog
