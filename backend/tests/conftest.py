"""
Pytest fixtures and configuration for Garment Exchange backend tests

Each test gets its own file-backed SQLite database, so transactions, locking
and concurrent sessions behave as they do in a running service.
"""
import pytest
from decimal import Decimal

from garment_exchange.core.database import (
    create_db_engine,
    create_read_session_factory,
    create_session_factory,
    init_db,
    unit_of_work,
)
from garment_exchange.domain.catalog import ItemCreate, VendorCreate
from garment_exchange.repositories import CatalogRepository


@pytest.fixture(scope="function")
def engine(tmp_path):
    """
    Fresh database with the schema created

    Scope: function (new database per test)
    """
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'garments.db'}", lock_timeout=5.0)
    init_db(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def read_session_factory(engine):
    return create_read_session_factory(engine)


@pytest.fixture
def catalog(session_factory):
    """
    Provides a small catalog:
        vendor "Sunrise Textiles" with
            A: Cotton T-Shirt, qty 5, price 10.00, available
            B: Denim Jeans, qty 20, price 899.00, available
            C: Linen Scarf, qty 8, price 45.50, NOT available
        vendor "Metro Garments" with
            D: Summer Dress, qty 1, price 499.00, available

    Returns a dict of ids.
    """
    with unit_of_work(session_factory) as session:
        repo = CatalogRepository(session)
        sunrise = repo.create_vendor(VendorCreate(name="Sunrise Textiles", contact="sunrise@example.com"))
        metro = repo.create_vendor(VendorCreate(name="Metro Garments", contact="metro@example.com"))

        a = repo.add_item(sunrise.id, ItemCreate(
            name="Cotton T-Shirt", size="M", color="White", price=Decimal("10.00"), quantity=5
        ))
        b = repo.add_item(sunrise.id, ItemCreate(
            name="Denim Jeans", size="32", color="Blue", price=Decimal("899.00"), quantity=20
        ))
        c = repo.add_item(sunrise.id, ItemCreate(
            name="Linen Scarf", color="Beige", price=Decimal("45.50"), quantity=8, available=False
        ))
        d = repo.add_item(metro.id, ItemCreate(
            name="Summer Dress", size="L", color="Red", price=Decimal("499.00"), quantity=1
        ))

    return {
        "sunrise": sunrise.id,
        "metro": metro.id,
        "A": a.id,
        "B": b.id,
        "C": c.id,
        "D": d.id,
    }


@pytest.fixture
def store_snapshot(engine):
    """
    Callable returning every row of items, orders and order_items

    Two equal snapshots mean the store was left exactly as it was.
    """
    from sqlalchemy import text

    def snapshot():
        with engine.connect() as conn:
            return {
                table: [tuple(row) for row in conn.execute(text(f"SELECT * FROM {table} ORDER BY id"))]
                for table in ("items", "orders", "order_items")
            }

    return snapshot
