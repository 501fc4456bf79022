"""
Products API endpoints
"""
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Path
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field

from catalog_api.database import Database, get_database
from catalog_api.errors import StoreError
from catalog_api.services import catalog_store
from catalog_api.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Nombre y Precio son campos requeridos"
NOT_FOUND_MESSAGE = "Producto no encontrado"


# --- Pydantic Schemas ---

class ProductResponse(BaseModel):
    IdProducto: int
    CodigoBarra: Optional[str]
    Nombre: str
    categoria_id: Optional[int]
    Categoria: Optional[str]
    Marca: Optional[str]
    Precio: float


class ProductPayload(BaseModel):
    # Required fields are checked by the handlers so they answer 400
    CodigoBarra: Optional[str] = None
    Nombre: Optional[str] = None
    categoria_id: Optional[int] = Field(None, ge=catalog_store.ID_MIN, le=catalog_store.ID_MAX)
    Marca: Optional[str] = None
    Precio: Optional[Decimal] = None


# --- Helper ---

def _validated_fields(data: Optional[ProductPayload]) -> dict:
    data = data or ProductPayload()
    if not data.Nombre or data.Precio is None:
        raise HTTPException(status_code=400, detail=REQUIRED_FIELDS_MESSAGE)
    return data.model_dump()


# --- Endpoints ---

@router.get("", response_model=List[ProductResponse])
async def list_products(database: Database = Depends(get_database)):
    """List all products with their category name, by ascending id"""
    try:
        async with database.acquire() as conn:
            return await catalog_store.list_products(conn)
    except StoreError as e:
        logger.error(f"Error al obtener productos: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al obtener productos")


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: Annotated[int, Path()], database: Database = Depends(get_database)):
    """Get a single product"""
    try:
        async with database.acquire() as conn:
            product = await catalog_store.get_product(conn, product_id)
    except StoreError as e:
        logger.error(f"Error al obtener producto {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al obtener producto")

    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return product


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    data: Optional[ProductPayload] = None,
    database: Database = Depends(get_database),
):
    """Create a product and answer with the stored row"""
    fields = _validated_fields(data)

    try:
        async with database.transaction() as conn:
            product_id = await catalog_store.insert_product(conn, fields)
            product = await catalog_store.get_product(conn, product_id)
    except StoreError as e:
        logger.error(f"Error al crear producto: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al crear producto")

    logger.info(f"Created product {product_id}")
    return product


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: Annotated[int, Path()],
    data: Optional[ProductPayload] = None,
    database: Database = Depends(get_database),
):
    """Replace every writable field of a product"""
    fields = _validated_fields(data)

    try:
        async with database.transaction() as conn:
            await catalog_store.update_product(conn, product_id, fields)
            product = await catalog_store.get_product(conn, product_id)
    except StoreError as e:
        logger.error(f"Error al actualizar producto {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al actualizar producto")

    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return product


@router.delete("/{product_id}")
async def delete_product(product_id: Annotated[int, Path()], database: Database = Depends(get_database)):
    """Delete a product; unknown ids are reported as deleted too"""
    try:
        async with database.transaction() as conn:
            deleted = await catalog_store.delete_product(conn, product_id)
    except StoreError as e:
        logger.error(f"Error al eliminar producto {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error al eliminar producto")

    logger.debug(f"Delete of product {product_id} matched {deleted} row(s)")
    return {"message": "Producto eliminado correctamente"}
