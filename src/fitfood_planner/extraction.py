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
"""HTML extraction for FitFoodWay listing and product pages.

The parsing here is tied to the site's markup. It sits behind the
:class:`ExtractionStrategy` protocol so the scraper and the aggregation code
never touch selectors or regexes directly.
"""

import logging
import math
import re
from typing import Protocol

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from fitfood_planner.models import Macro, Product

logger = logging.getLogger(__name__)

# Selectors for the product listing page (https://fitfoodway.ro/produse)
LISTING_ITEM_SELECTOR = ".menu-item-wrap > div.content"
LISTING_TITLE_SELECTOR = "h2 > a"
LISTING_CART_SELECTOR = "a.btn"

# Selectors for a product detail page (https://fitfoodway.ro/p/<slug>)
PRODUCT_NAME_SELECTOR = ".banner-text h1"
PRODUCT_VALUES_SELECTOR = ".price, div.amount-per-serving > div"

SLUG_REGEX = re.compile(r".*/(.*)$")
CART_ID_REGEX = re.compile(r"adauga_in_cos\((\d+),")
VALUE_REGEX = re.compile(r"\s*(\d+(?:[.,]\d+)?)")
WHITESPACE_REGEX = re.compile(r"\s+")

# Elements that start a new line of rendered text
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
        "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
        "section", "table", "tr", "ul",
    }
)
CELL_TAGS = frozenset({"td", "th"})
HIDDEN_TAGS = frozenset({"head", "noscript", "script", "style", "template"})

# Macro fields in the order they appear after the price on a product page
MACRO_FIELDS = tuple(Macro.model_fields)


class ExtractionStrategy(Protocol):
    """Interface for turning fetched pages into catalog data."""

    def parse_listing(self, soup: BeautifulSoup) -> dict[str, str]:
        """Return a mapping of name slug to product id."""

    def parse_product(
        self, soup: BeautifulSoup, product_id: str, off: float = 0
    ) -> Product:
        """Return the product described by a detail page."""


def parse_value(line: str) -> float | None:
    """Parse the first number on a line, accepting a comma decimal separator.

    Args:
        line: A single line of rendered text.

    Returns:
        The parsed value, or None if the line holds no number.
    """
    match = VALUE_REGEX.search(line)
    if not match:
        return None
    return float(match.group(1).replace(",", "."))


def rendered_text(element: Tag) -> str:
    """Return an element's text split into lines the way a browser renders it.

    Inline markup is joined without a separator and runs of whitespace collapse
    to one space. Line breaks come only from ``<br>`` and block-level elements,
    so ``25<sup>,99</sup>`` reads as ``25,99``.

    Args:
        element: Element to render.

    Returns:
        The rendered text, with ``\\n`` between lines.
    """
    parts: list[str] = []
    _render(element, parts)
    return "".join(parts)


def _render(node: Tag, parts: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(WHITESPACE_REGEX.sub(" ", str(child)))
        elif child.name == "br":
            parts.append("\n")
        elif child.name in HIDDEN_TAGS:
            continue
        elif child.name in BLOCK_TAGS:
            parts.append("\n")
            _render(child, parts)
            parts.append("\n")
        elif child.name in CELL_TAGS:
            _render(child, parts)
            parts.append("\t")
        else:
            _render(child, parts)


def apply_discount(price: float, off: float) -> float:
    """Apply a percentage discount to a price."""
    if not 0 <= off <= 100:
        raise ValueError(f"Discount must be between 0 and 100, got {off}")
    return price * (100 - off) / 100


def _select_one(soup, selector: str, context: str):
    element = soup.select_one(selector)
    if element is None:
        raise ValueError(f"No element matching {selector!r} in {context}")
    return element


def _search(regex: re.Pattern, text: str | None, context: str) -> str:
    match = regex.search(text or "")
    if not match:
        raise ValueError(f"Pattern {regex.pattern!r} not found in {context}: {text!r}")
    return match.group(1)


class FitFoodExtractor:
    """Positional extractor for the fitfoodway.ro page layout."""

    def parse_listing(self, soup: BeautifulSoup) -> dict[str, str]:
        """Extract name slug to product id pairs from the listing page.

        Args:
            soup: Parsed listing page.

        Returns:
            Mapping of name slug to product id, in document order. A repeated
            slug keeps the id of its last occurrence.

        Raises:
            ValueError: If an item lacks its title link or cart button.
        """
        name_to_id = {}
        for item in soup.select(LISTING_ITEM_SELECTOR):
            link = _select_one(item, LISTING_TITLE_SELECTOR, "listing item")
            name = _search(SLUG_REGEX, link.get("href"), "listing link")

            button = _select_one(item, LISTING_CART_SELECTOR, "listing item")
            product_id = _search(CART_ID_REGEX, button.get("onclick"), "cart button")

            if name in name_to_id:
                logger.debug("Duplicate slug %s, replacing id %s", name, name_to_id[name])
            name_to_id[name] = product_id

        logger.debug("Found %d products on listing page", len(name_to_id))
        return name_to_id

    def parse_values(self, soup: BeautifulSoup) -> list[float]:
        """Collect the numbers shown in the price and macro rows, in page order."""
        values = []
        for element in soup.select(PRODUCT_VALUES_SELECTOR):
            for line in rendered_text(element).splitlines():
                value = parse_value(line)
                if value is not None:
                    values.append(value)
        return values

    def parse_product(
        self, soup: BeautifulSoup, product_id: str, off: float = 0
    ) -> Product:
        """Build a product from its detail page.

        The first value on the page is the price and the next six are the
        macros in :data:`MACRO_FIELDS` order. Positions the page does not
        provide are filled with NaN.

        Args:
            soup: Parsed product page.
            product_id: Id of the product, as found on the listing page.
            off: Percentage discount applied to the listed price.

        Returns:
            The extracted product.
        """
        name = _select_one(soup, PRODUCT_NAME_SELECTOR, "product page").get_text(strip=True)

        values = self.parse_values(soup)
        expected = 1 + len(MACRO_FIELDS)
        if len(values) < expected:
            logger.warning(
                "Product %s (%s) has %d of %d values", product_id, name, len(values), expected
            )
        values += [math.nan] * (expected - len(values))

        return Product(
            id=product_id,
            name=name,
            price=apply_discount(values[0], off),
            macro=Macro(**dict(zip(MACRO_FIELDS, values[1:expected]))),
        )
