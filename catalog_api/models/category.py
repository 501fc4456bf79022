"""
Category model
"""
from sqlalchemy import Column, Integer, String
from catalog_api.database import Base


class Category(Base):
    __tablename__ = "categorias"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(100), nullable=False)
