from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.product import Product
from app.schemas.product import ProductCreate


class ProductService:
    """Catalog rows the order workflow decrements and restores stock on"""

    @staticmethod
    def create_product(db: Session, product_data: ProductCreate) -> Product:
        db_product = Product(**product_data.model_dump())
        db.add(db_product)
        db.commit()
        db.refresh(db_product)
        return db_product

    @staticmethod
    def get_product(db: Session, product_id: int) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id).first()

    @staticmethod
    def get_products(db: Session, skip: int = 0, limit: int = 100) -> List[Product]:
        limit = min(max(limit, 1), 500)
        return db.query(Product).order_by(Product.id).offset(skip).limit(limit).all()
