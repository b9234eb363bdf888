# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, CheckConstraint
from database import Base

# Catalog product. Owned by the catalog module; this backend only reads it.
# `stock` is used by provisioning as a rollouts-per-unit multiplier.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String)

    price = Column(Numeric(12, 2), CheckConstraint("price >= 0"), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)

    is_available = Column(Boolean, nullable=False, default=True)
    image_url = Column(String, nullable=True)
