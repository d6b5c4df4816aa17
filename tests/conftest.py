"""Shared test fixtures for unitprice tests."""

import pytest

from unitprice.models import InventoryItem, Offer
from unitprice.units import unitapi
from unitprice.units.unitdata import CONVERSIONS_PATH_ENV, ConversionEdge
from unitprice.units.unitresolver import UnitResolver


@pytest.fixture(autouse=True)
def clear_unit_caches(monkeypatch):
    """Start and finish every test with an empty table cache and no shared resolver."""
    monkeypatch.delenv(CONVERSIONS_PATH_ENV, raising=False)
    unitapi.clear_cache()
    yield
    unitapi.clear_cache()


@pytest.fixture
def resolver():
    """Resolver over the packaged conversion table."""
    return unitapi.load_resolver()


@pytest.fixture
def mass_edges():
    """Small mass table: canonical g, with a self edge."""
    return [
        ConversionEdge("g", "g", 1.0, "mass"),
        ConversionEdge("kg", "g", 1000.0, "mass"),
        ConversionEdge("lb", "g", 453.592, "mass"),
        ConversionEdge("oz", "g", 28.3495, "mass"),
    ]


@pytest.fixture
def mass_resolver(mass_edges):
    return UnitResolver.from_edges(mass_edges)


@pytest.fixture
def gapped_resolver():
    """Mass table where lb only converts to oz, so lb has no path to g."""
    return UnitResolver.from_edges([
        ConversionEdge("g", "g", 1.0, "mass"),
        ConversionEdge("kg", "g", 1000.0, "mass"),
        ConversionEdge("lb", "oz", 16.0, "mass"),
    ])


@pytest.fixture
def rice():
    return InventoryItem(id="rice", name="Rice", canonical_dimension="mass", canonical_unit="g")


@pytest.fixture
def yogurt():
    return InventoryItem(
        id="yogurt",
        name="Yogurt",
        canonical_dimension="count",
        canonical_unit="unit",
        shelf_life_sensitive=True,
        category="Dairy",
    )


@pytest.fixture
def kilo_offer():
    """1 kg for 20.00 plus 5.00 shipping."""
    return Offer(id="o1", amount=1, amount_unit="kg", total_price=20.0, shipping_cost=5.0)
