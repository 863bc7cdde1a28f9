"""Shared test fixtures."""

import httpx
import pytest
from bs4 import BeautifulSoup

from fitfood_planner.models import Macro, Product

MACRO_LABELS = ("Gramaj", "Calorii", "Carbohidrati", "Grasimi", "Proteine", "Fibre")


def listing_page(items: list[tuple[str, str]]) -> str:
    """Render a listing page with (slug, id) items."""
    blocks = "".join(
        f"""
        <div class="menu-item-wrap">
          <div class="content">
            <h2><a href="https://fitfoodway.ro/p/{slug}">{slug.title()}</a></h2>
            <p>Descriere</p>
            <a class="btn" onclick="adauga_in_cos({product_id}, 'produs')">Adauga</a>
          </div>
        </div>
        """
        for slug, product_id in items
    )
    return f"<html><body><div class='products'>{blocks}</div></body></html>"


def product_page(name: str, price: str, values: list[str]) -> str:
    """Render a product page with a price and labelled macro rows."""
    rows = "".join(
        f"<div><span>{label}</span><br>{value}</div>"
        for label, value in zip(MACRO_LABELS, values)
    )
    return f"""
    <html><body>
      <div class="banner"><div class="banner-text"><h1>{name}</h1></div></div>
      <div class="details">
        <span class="price">{price} Lei</span>
        <div class="amount-per-serving">{rows}</div>
      </div>
    </body></html>
    """


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def mock_client(pages: dict[str, str], seen: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    """Create a client serving ``pages`` by URL path, 404 for anything else."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        html = pages.get(request.url.path)
        if html is None:
            return httpx.Response(404, text="Not found")
        return httpx.Response(200, text=html)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


SITE_PAGES = {
    "/produse": listing_page([("omleta-cu-legume", "10"), ("pui-cu-orez", "20")]),
    "/p/omleta-cu-legume": product_page(
        "Omleta cu legume", "10,00", ["1 g", "2 kcal", "3 g", "4 g", "5 g", "6 g"]
    ),
    "/p/pui-cu-orez": product_page(
        "Pui cu orez", "20", ["2 g", "4 kcal", "6 g", "8 g", "10 g", "12 g"]
    ),
}


@pytest.fixture
def catalog() -> dict[str, Product]:
    return {
        "10": Product(
            id="10",
            name="A",
            price=10,
            macro=Macro(grams=1, kcal=2, carbohydrates=3, fats=4, proteins=5, fibers=6),
        ),
        "20": Product(
            id="20",
            name="B",
            price=20,
            macro=Macro(grams=2, kcal=4, carbohydrates=6, fats=8, proteins=10, fibers=12),
        ),
    }
