"""
Shared fixtures for Gear Forge tests.
"""

import pytest

from gearforge.core.config import Config
from gearforge.core.models import Item, ItemKind, Inventory


@pytest.fixture
def sword():
    """A common one-handed sword, fresh from the shop."""
    return Item(id='sword', name='Iron Sword', kind=ItemKind.WEAPON, damage=10, value=100)


@pytest.fixture
def greatsword():
    return Item(id='greatsword', name='Steel Greatsword', kind=ItemKind.WEAPON, damage=20, value=250)


@pytest.fixture
def dagger():
    return Item(id='dagger', name='Iron Dagger', kind=ItemKind.WEAPON, damage=4, value=30)


@pytest.fixture
def shield():
    return Item(id='shield', name='Oak Shield', kind=ItemKind.APPAREL, armor=8, value=60)


@pytest.fixture
def helmet():
    return Item(id='helmet', name='Iron Helmet', kind=ItemKind.APPAREL, armor=5, value=40)


@pytest.fixture
def potion():
    return Item(id='potion', name='Healing Potion', kind=ItemKind.CONSUMABLE, value=25, quantity=3)


@pytest.fixture
def armory_items(sword, greatsword, dagger, shield, helmet, potion):
    """A small unequipped collection."""
    return Inventory.of(sword, greatsword, dagger, shield, helmet, potion)


@pytest.fixture
def config(monkeypatch):
    """Config built from a clean environment."""
    for var in ('LOG_LEVEL', 'LOG_FILE', 'LOG_COLORS', 'GEARFORGE_STRICT_UNEQUIP', 'GEARFORGE_ID_PREFIX'):
        monkeypatch.delenv(var, raising=False)
    return Config()
