"""Pytest configuration and fixtures"""
import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

from techmart.cart import CartManager, InMemoryCartStorage
from techmart.services.catalog import InMemoryCatalog
from techmart.services.models import Product


class SlowCatalog(InMemoryCatalog):
    """Catalog that yields to the event loop on every lookup, like a network call."""

    async def get_product_by_id(self, product_id):
        await asyncio.sleep(0)
        return await super().get_product_by_id(product_id)


class GatedLoadStorage(InMemoryCartStorage):
    """Holds loads for one customer until ``open_gate`` is set, like a slow Redis round trip."""

    def __init__(self, gated_customer_id):
        super().__init__()
        self.gated_customer_id = gated_customer_id
        self.open_gate = asyncio.Event()
        self.load_calls = 0

    async def load(self, customer_id):
        self.load_calls += 1
        if customer_id == self.gated_customer_id:
            await self.open_gate.wait()
        return await super().load(customer_id)


class FailingSaveStorage(InMemoryCartStorage):
    """Loads normally, never manages to save."""

    def __init__(self):
        super().__init__()
        self.save_attempts = 0

    async def save(self, customer_id, lines):
        self.save_attempts += 1
        raise ConnectionError("redis unreachable")


@pytest.fixture
def make_product():
    """Factory for catalog products"""
    def _make(product_id=7, sell_price="50", quantity=10, is_active=True, name=None):
        return Product(
            id=product_id,
            name=name or f"Product {product_id}",
            brand="Sony",
            sell_price=Decimal(sell_price),
            quantity=quantity,
            is_active=is_active,
        )
    return _make


@pytest.fixture
def catalog(make_product):
    """Catalog with a $50 product 7 (10 in stock) and a $20 product 9 (5 in stock)"""
    return InMemoryCatalog([
        make_product(7, sell_price="50", quantity=10),
        make_product(9, sell_price="20", quantity=5),
    ])


@pytest.fixture
def storage():
    return InMemoryCartStorage()


@pytest.fixture
def manager(catalog, storage):
    """Unbound cart manager"""
    return CartManager(catalog, storage)


@pytest_asyncio.fixture
async def cart(manager):
    """Cart manager bound to customer 42"""
    await manager.bind(42)
    return manager


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.upsert.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock
    return client


@pytest.fixture
def sample_product_row():
    """Products table row"""
    return {
        "id": 7,
        "brand": "Apple",
        "name": "iPhone 15 Pro Max",
        "image_path": "/images/products/iphone-15-pro.jpg",
        "quantity": 25,
        "cost_price": 999.99,
        "sell_price": 1199.99,
        "rating": 5,
        "is_active": True,
        "created_by": 1,
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:30:00Z",
    }


@pytest.fixture
def slow_catalog(make_product):
    """Catalog with 3 units of product 7 that yields on every lookup"""
    return SlowCatalog([make_product(7, quantity=3)])


@pytest.fixture
def failing_storage():
    return FailingSaveStorage()


@pytest.fixture
def gated_storage():
    """Storage whose loads for customer 1 block until the test opens the gate"""
    return GatedLoadStorage(gated_customer_id=1)
