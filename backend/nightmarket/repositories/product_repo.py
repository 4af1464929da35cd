from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from nightmarket.models.product import Product, PublishStatus


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_published_by_slug(self, slug: str) -> Optional[Product]:
        return (
            self.db.query(Product)
            .filter(Product.slug == slug, Product.status == PublishStatus.PUBLISHED.value)
            .order_by(Product.created_at.desc())
            .first()
        )

    def list_published(self, q: Optional[str] = None) -> List[Product]:
        query = self.db.query(Product).filter(Product.status == PublishStatus.PUBLISHED.value)
        if q:
            like = f"%{q}%"
            query = query.filter(
                (Product.name.ilike(like)) | (Product.summary.ilike(like)) | (Product.description.ilike(like))
            )
        return query.order_by(Product.created_at.desc()).all()

    def list_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.created_at.desc()).all()

    def create(self, fields: Dict[str, Any]) -> Product:
        p = Product(**fields)
        self.db.add(p)
        self.db.flush()
        return p

    def update(self, product: Product, fields: Dict[str, Any]) -> Product:
        for key, value in fields.items():
            setattr(product, key, value)
        self.db.flush()
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)
        self.db.flush()
