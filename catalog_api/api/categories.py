"""
Categories API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from pydantic import BaseModel

from catalog_api.database import Database, get_database
from catalog_api.errors import StoreError
from catalog_api.services import catalog_store
from catalog_api.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


class CategoryResponse(BaseModel):
    id: int
    nombre: str


class CategoryPayload(BaseModel):
    nombre: Optional[str] = None


@router.get("", response_model=List[CategoryResponse])
async def list_categories(database: Database = Depends(get_database)):
    try:
        async with database.acquire() as conn:
            return await catalog_store.list_categories(conn)
    except StoreError as e:
        logger.error(f"Error al obtener categorías: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al obtener categorías")


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: Optional[CategoryPayload] = None,
    database: Database = Depends(get_database),
):
    """Create a category"""
    nombre = data.nombre if data else None
    if not nombre:
        raise HTTPException(status_code=400, detail="El nombre es obligatorio")

    try:
        async with database.transaction() as conn:
            category_id = await catalog_store.insert_category(conn, nombre)
    except StoreError as e:
        logger.error(f"Error al crear categoría: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al crear categoría")

    return {"id": category_id, "nombre": nombre}
