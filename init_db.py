"""Initialize database tables"""
import asyncio
from catalog_api.config import get_settings
from catalog_api.database import Database


async def init():
    database = Database.from_settings(get_settings())
    try:
        await database.create_all()
    finally:
        await database.dispose()
    print("Database tables created successfully.")


if __name__ == "__main__":
    asyncio.run(init())
