"""
Data access operations for products and categories.

Every operation takes an open connection so a handler can run a write and
its re-fetch on the same connection and transaction. Values always travel
as bound parameters.
"""
from typing import Any, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from catalog_api.models.category import Category
from catalog_api.models.product import Product

# Product columns a write replaces wholesale
PRODUCT_FIELDS = ("CodigoBarra", "Nombre", "categoria_id", "Marca", "Precio")
OPTIONAL_PRODUCT_FIELDS = ("CodigoBarra", "categoria_id", "Marca")

# Range of the INT id columns; ids outside it can't match a row
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1


def _enriched_product_query():
    """Product columns plus the category name, kept when the category is missing"""
    return (
        select(
            Product.IdProducto,
            Product.CodigoBarra,
            Product.Nombre,
            Product.categoria_id,
            Category.nombre.label("Categoria"),
            Product.Marca,
            Product.Precio,
        )
        .select_from(Product)
        .outerjoin(Category, Product.categoria_id == Category.id)
    )


def _storable_id(value: int) -> bool:
    return ID_MIN <= value <= ID_MAX


def _product_values(fields: dict[str, Any]) -> dict[str, Any]:
    # Absent, empty and zero optional values are all stored as NULL
    values = {name: fields.get(name) for name in PRODUCT_FIELDS}
    for name in OPTIONAL_PRODUCT_FIELDS:
        values[name] = values[name] or None
    return values


async def list_products(conn: AsyncConnection) -> list[dict]:
    result = await conn.execute(_enriched_product_query().order_by(Product.IdProducto))
    return [dict(row) for row in result.mappings()]


async def get_product(conn: AsyncConnection, product_id: int) -> Optional[dict]:
    if not _storable_id(product_id):
        return None
    result = await conn.execute(
        _enriched_product_query().where(Product.IdProducto == product_id)
    )
    row = result.mappings().first()
    return dict(row) if row is not None else None


async def insert_product(conn: AsyncConnection, fields: dict[str, Any]) -> int:
    """Insert a product and return the id the store assigned to it"""
    result = await conn.execute(insert(Product).values(**_product_values(fields)))
    return result.inserted_primary_key[0]


async def update_product(conn: AsyncConnection, product_id: int, fields: dict[str, Any]) -> int:
    """
    Replace every writable column of a product.

    No existence check is made; the number of matched rows is returned and
    is 0 for an unknown id.
    """
    if not _storable_id(product_id):
        return 0
    result = await conn.execute(
        update(Product)
        .where(Product.IdProducto == product_id)
        .values(**_product_values(fields))
    )
    return result.rowcount


async def delete_product(conn: AsyncConnection, product_id: int) -> int:
    if not _storable_id(product_id):
        return 0
    result = await conn.execute(delete(Product).where(Product.IdProducto == product_id))
    return result.rowcount


async def list_categories(conn: AsyncConnection) -> list[dict]:
    result = await conn.execute(select(Category.id, Category.nombre))
    return [dict(row) for row in result.mappings()]


async def insert_category(conn: AsyncConnection, nombre: str) -> int:
    result = await conn.execute(insert(Category).values(nombre=nombre))
    return result.inserted_primary_key[0]
