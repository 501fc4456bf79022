"""
Product model
"""
from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from catalog_api.database import Base


class Product(Base):
    __tablename__ = "productos"

    IdProducto = Column(Integer, primary_key=True, autoincrement=True)
    CodigoBarra = Column(String(50), nullable=True)
    Nombre = Column(String(150), nullable=False)
    # Nullable; a dangling reference still lists the product
    categoria_id = Column(Integer, ForeignKey("categorias.id", ondelete="SET NULL"), nullable=True, index=True)
    Marca = Column(String(100), nullable=True)
    Precio = Column(Numeric(10, 2), nullable=False)
