"""
Test fixtures - SQLite database file per test + HTTP client bound to the app
"""
from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from catalog_api.database import Database, get_database
from catalog_api.main import app
from catalog_api.services import catalog_store


@pytest_asyncio.fixture()
async def database(tmp_path):
    """Create a fresh SQLite database for each test"""
    db = Database(f"sqlite:///{tmp_path / 'catalog.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture()
async def seed_data(database):
    """Insert baseline test data: 2 categories + 1 categorized product"""
    async with database.transaction() as conn:
        bebidas_id = await catalog_store.insert_category(conn, "Bebidas")
        limpieza_id = await catalog_store.insert_category(conn, "Limpieza")
        cola_id = await catalog_store.insert_product(conn, {
            "CodigoBarra": "7750182000123",
            "Nombre": "Gaseosa Cola 500ml",
            "categoria_id": bebidas_id,
            "Marca": "Kola",
            "Precio": 2.5,
        })

    return {"bebidas_id": bebidas_id, "limpieza_id": limpieza_id, "cola_id": cola_id}


def _client_for(db):
    app.dependency_overrides[get_database] = lambda: db
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture()
async def client(database):
    """httpx AsyncClient bound to the FastAPI app and the test database"""
    async with _client_for(database) as ac:
        yield ac
    app.dependency_overrides.clear()


class BrokenDatabase:
    """Stands in for a pool whose every connection attempt fails"""

    def __init__(self, error: Exception):
        self.error = error

    @asynccontextmanager
    async def acquire(self):
        raise self.error
        yield

    transaction = acquire

    async def ping(self):
        raise self.error


@pytest_asyncio.fixture()
async def broken_client_factory():
    """Build clients whose database fails with the given error"""
    clients = []

    async def make(error: Exception) -> AsyncClient:
        ac = _client_for(BrokenDatabase(error))
        clients.append(ac)
        return ac

    yield make

    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()
